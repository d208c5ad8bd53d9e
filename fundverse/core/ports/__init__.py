"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Ports canister : Contrats des services distants
- IBackendService : Canister backend (idées, campagnes)
- IFundFlowService : Canister Fund_Flow (utilisateurs, contributions, séquestre)
- CallResult : Variante candid Ok/Err
- ServiceKind, ServiceDescriptor : Désignation d'un canister

Ports identité : Contrats du fournisseur d'identité
- IIdentity : Credential opaque
- IAuthClient : Connexion par redirection à callbacks
"""

from fundverse.core.ports.canisters import (
    CallResult,
    IBackendService,
    IFundFlowService,
    ServiceDescriptor,
    ServiceKind,
    as_nat,
)
from fundverse.core.ports.identity import IAuthClient, IIdentity

__all__ = [
    "CallResult",
    "IAuthClient",
    "IBackendService",
    "IFundFlowService",
    "IIdentity",
    "ServiceDescriptor",
    "ServiceKind",
    "as_nat",
]
