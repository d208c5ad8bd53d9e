"""
Interfaces ports pour les canisters distants.

Les deux canisters sont des endpoints RPC opaques :
- backend : idées et campagnes
- Fund_Flow : utilisateurs, contributions et séquestre

Les méthodes de mise à jour renvoient un résultat candid `Result`
({"Ok": valeur} ou {"Err": message}) représenté par CallResult : un `Err`
n'est pas une exception de transport, c'est à l'appelant de décider.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from fundverse.core.entities import (
    Campaign,
    CampaignMeta,
    CampaignStatus,
    Contribution,
    EscrowSummary,
    RegisteredUser,
)


class ServiceKind(str, Enum):
    """Les deux canisters consommés par le client."""

    BACKEND = "backend"
    FUND_FLOW = "fund_flow"


@dataclass(frozen=True)
class ServiceDescriptor:
    """Adresse d'un canister : son type et son identifiant."""

    kind: ServiceKind
    canister_id: str


def as_nat(value: Any) -> int:
    """
    Valide un identifiant candid `nat` / `nat64` renvoyé par un canister.

    Raises:
        ValueError: Si la valeur n'est pas un entier positif (bool, float et
            texte sont refusés)
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"Unexpected identifier: {value!r}")
    return value


@dataclass(frozen=True)
class CallResult:
    """
    Résultat candid `Result<T, String>`.

    Attributes:
        ok: Valeur renvoyée en cas de succès
        err: Message d'erreur renvoyé par le canister, None en cas de succès
    """

    ok: Any = None
    err: Optional[str] = None

    @property
    def is_ok(self) -> bool:
        return self.err is None

    @classmethod
    def from_payload(cls, payload: Any) -> "CallResult":
        """
        Construit un CallResult depuis la réponse JSON d'un canister.

        Un payload qui n'est pas une variante Ok/Err est traité comme
        une valeur de succès brute.
        """
        if isinstance(payload, dict):
            if "Err" in payload:
                return cls(err=str(payload["Err"]))
            if "Ok" in payload:
                return cls(ok=payload["Ok"])
        return cls(ok=payload)


class IBackendService(ABC):
    """Contrat du canister backend (idées et campagnes)."""

    @property
    @abstractmethod
    def canister_id(self) -> str:
        """Identifiant du canister, passé à Fund_Flow lors des contributions."""
        ...

    @abstractmethod
    async def create_idea(
        self,
        title: str,
        description: str,
        funding_goal: int,
        legal_entity: str,
        contact_info: str,
        category: str,
        business_registration: int,
    ) -> int:
        """Crée une idée et retourne son identifiant."""
        ...

    @abstractmethod
    async def create_campaign(self, idea_id: int, goal: int, end_date: int) -> CallResult:
        """Crée une campagne liée à une idée (Ok: identifiant de campagne)."""
        ...

    @abstractmethod
    async def get_campaign_cards(self) -> list[Campaign]:
        """Liste toutes les campagnes."""
        ...

    @abstractmethod
    async def get_campaign_cards_by_status(self, status: CampaignStatus) -> list[Campaign]:
        """Liste les campagnes actives ou terminées."""
        ...

    @abstractmethod
    async def get_campaign_meta(self, campaign_id: int) -> Optional[CampaignMeta]:
        """Retourne les métadonnées d'une campagne, ou None si inconnue."""
        ...

    @abstractmethod
    async def get_campaign_total_funding(self, campaign_id: int) -> int:
        """Retourne le total collecté (toutes méthodes confondues) en e8s."""
        ...


class IFundFlowService(ABC):
    """Contrat du canister Fund_Flow (utilisateurs, contributions, séquestre)."""

    @property
    @abstractmethod
    def canister_id(self) -> str:
        ...

    @abstractmethod
    async def register_user(self, name: str, email: str) -> CallResult:
        """Enregistre l'appelant comme utilisateur connu."""
        ...

    @abstractmethod
    async def is_registered(self, principal: Optional[str] = None) -> bool:
        ...

    @abstractmethod
    async def get_my_profile(self) -> Optional[RegisteredUser]:
        ...

    @abstractmethod
    async def contribute_icp(
        self, backend: str, campaign_id: int, amount_e8s: int
    ) -> CallResult:
        """Crée une contribution en attente (Ok: identifiant de contribution)."""
        ...

    @abstractmethod
    async def confirm_payment(self, contribution_id: int, backend: str) -> CallResult:
        """Confirme le paiement : la contribution passe de Pending à Held."""
        ...

    @abstractmethod
    async def get_escrow_summary(self, campaign_id: int) -> EscrowSummary:
        ...

    @abstractmethod
    async def get_contributions_by_user(
        self, principal: Optional[str] = None
    ) -> list[Contribution]:
        ...

    @abstractmethod
    async def get_campaign_contributions(self, campaign_id: int) -> list[Contribution]:
        ...
