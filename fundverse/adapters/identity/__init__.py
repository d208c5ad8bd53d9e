"""
Adaptateurs du fournisseur d'identité.

- DelegationIdentity : credential (délégation) reçu du fournisseur
- CredentialStore : stockage persistant du credential (diskcache)
- LoopbackAuthClient : connexion par redirection vers un callback local
"""

from fundverse.adapters.identity.credential_store import CredentialStore
from fundverse.adapters.identity.delegation import DelegationIdentity
from fundverse.adapters.identity.loopback_auth_client import (
    LoopbackAuthClient,
    build_callback_app,
)

__all__ = [
    "CredentialStore",
    "DelegationIdentity",
    "LoopbackAuthClient",
    "build_callback_app",
]
