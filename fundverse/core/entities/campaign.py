"""
Entités financement : campagnes, contributions et séquestre.

Projections en lecture seule des enregistrements tenus par les canisters.
Le client n'en garde que des copies transitoires pour l'affichage.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class CampaignStatus(str, Enum):
    """Filtre de statut accepté par get_campaign_cards_by_status."""

    ACTIVE = "Active"
    ENDED = "Ended"


class EscrowStatus(str, Enum):
    """Cycle de vie d'une contribution côté Fund_Flow."""

    PENDING = "Pending"
    HELD = "Held"
    RELEASED = "Released"
    REFUNDED = "Refunded"


def _variant(value: Any) -> str:
    """Extrait le nom d'une variante candid ({"Held": null} ou "Held")."""
    if isinstance(value, dict) and value:
        return next(iter(value))
    return str(value)


@dataclass(frozen=True)
class Campaign:
    """
    Campagne telle que renvoyée par get_campaign_cards.

    Attributes:
        id: Identifiant de la campagne
        title: Titre de l'idée liée
        goal: Objectif en e8s
        amount_raised: Montant collecté en e8s
        end_date: Date de fin (secondes epoch)
        category: Catégorie de l'idée liée
        idea_id: Identifiant de l'idée liée
    """

    id: int
    title: str
    goal: int
    amount_raised: int
    end_date: int
    category: str
    idea_id: int

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "Campaign":
        return cls(
            id=int(data["id"]),
            title=data.get("title", ""),
            goal=int(data.get("goal", 0)),
            amount_raised=int(data.get("amount_raised", 0)),
            end_date=int(data.get("end_date", 0)),
            category=data.get("category", ""),
            idea_id=int(data.get("idea_id", 0)),
        )


@dataclass(frozen=True)
class CampaignMeta:
    """Métadonnées minimales d'une campagne (objectif, collecte, fin)."""

    campaign_id: int
    goal: int
    amount_raised: int
    end_date_secs: int

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "CampaignMeta":
        return cls(
            campaign_id=int(data["campaign_id"]),
            goal=int(data["goal"]),
            amount_raised=int(data["amount_raised"]),
            end_date_secs=int(data["end_date_secs"]),
        )


@dataclass(frozen=True)
class Contribution:
    """Contribution enregistrée par Fund_Flow."""

    id: int
    campaign_id: int
    backer: str
    amount: int
    status: EscrowStatus
    created_at_ns: int
    confirmed_at_ns: Optional[int] = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "Contribution":
        confirmed = data.get("confirmed_at_ns")
        return cls(
            id=int(data["id"]),
            campaign_id=int(data["campaign_id"]),
            backer=str(data.get("backer", "")),
            amount=int(data["amount"]),
            status=EscrowStatus(_variant(data["status"])),
            created_at_ns=int(data.get("created_at_ns", 0)),
            confirmed_at_ns=int(confirmed) if confirmed is not None else None,
        )


@dataclass(frozen=True)
class EscrowSummary:
    """Totaux du séquestre d'une campagne, par statut, en e8s."""

    campaign_id: int
    total_pending: int = 0
    total_held: int = 0
    total_released: int = 0
    total_refunded: int = 0

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "EscrowSummary":
        return cls(
            campaign_id=int(data["campaign_id"]),
            total_pending=int(data.get("total_pending", 0)),
            total_held=int(data.get("total_held", 0)),
            total_released=int(data.get("total_released", 0)),
            total_refunded=int(data.get("total_refunded", 0)),
        )


@dataclass(frozen=True)
class RegisteredUser:
    """Profil enregistré auprès de Fund_Flow."""

    user_principal: str
    name: str
    email: str
    registered_at_ns: int = 0

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "RegisteredUser":
        return cls(
            user_principal=str(data.get("user_principal", "")),
            name=data.get("name", ""),
            email=data.get("email", ""),
            registered_at_ns=int(data.get("registered_at_ns", 0)),
        )
