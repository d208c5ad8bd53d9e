"""
Credential obtenu du fournisseur d'identité.

Une délégation signée par le fournisseur autorise les appels au nom d'un
principal jusqu'à son expiration.
"""

import time
from dataclasses import asdict, dataclass
from typing import Any, Optional

from fundverse.core.ports.identity import IIdentity


@dataclass(frozen=True)
class DelegationIdentity(IIdentity):
    """
    Délégation du fournisseur d'identité.

    Attributes:
        principal_text: Principal de l'utilisateur
        delegation: Jeton de délégation opaque
        expiration_ns: Fin de validité (nanosecondes epoch)
    """

    principal_text: str
    delegation: str
    expiration_ns: int

    @property
    def principal(self) -> str:
        return self.principal_text

    def auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Delegation {self.delegation}"}

    def is_expired(self, now_ns: Optional[int] = None) -> bool:
        if now_ns is None:
            now_ns = time.time_ns()
        return now_ns >= self.expiration_ns

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DelegationIdentity":
        return cls(
            principal_text=data["principal_text"],
            delegation=data["delegation"],
            expiration_ns=int(data["expiration_ns"]),
        )
