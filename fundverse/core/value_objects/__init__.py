"""
Objets valeur immutables du domaine.

Exports :
- EndpointConfig : Adresses du replica et du fournisseur d'identité
- Session : Liaison credential / principal avec son état d'invalidation
- to_e8s, from_e8s, format_e8s, format_icp : Conversions de montants ICP
"""

from fundverse.core.value_objects.amount import (
    E8S_PER_ICP,
    MAX_U64,
    format_e8s,
    format_icp,
    from_e8s,
    to_e8s,
)
from fundverse.core.value_objects.endpoint import EndpointConfig
from fundverse.core.value_objects.session import Session

__all__ = [
    "E8S_PER_ICP",
    "MAX_U64",
    "EndpointConfig",
    "Session",
    "format_e8s",
    "format_icp",
    "from_e8s",
    "to_e8s",
]
