"""
Entités métier.

Projections des enregistrements des canisters backend et Fund_Flow.
"""

from fundverse.core.entities.campaign import (
    Campaign,
    CampaignMeta,
    CampaignStatus,
    Contribution,
    EscrowStatus,
    EscrowSummary,
    RegisteredUser,
)

__all__ = [
    "Campaign",
    "CampaignMeta",
    "CampaignStatus",
    "Contribution",
    "EscrowStatus",
    "EscrowSummary",
    "RegisteredUser",
]
