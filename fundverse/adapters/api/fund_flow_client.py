"""
Client du canister Fund_Flow (utilisateurs, contributions et séquestre).

Les méthodes de mise à jour renvoient le CallResult brut : l'interprétation
d'un `Err` (erreur métier ou "déjà enregistré") appartient à l'appelant.
"""

from typing import Optional

from fundverse.adapters.api.backend_client import unwrap_opt
from fundverse.adapters.api.canister_client import CanisterClient
from fundverse.core.entities import Contribution, EscrowSummary, RegisteredUser
from fundverse.core.ports.canisters import CallResult, IFundFlowService


class FundFlowClient(CanisterClient, IFundFlowService):
    """Client du canister Fund_Flow."""

    async def register_user(self, name: str, email: str) -> CallResult:
        return CallResult.from_payload(await self._update("register_user", name, email))

    async def is_registered(self, principal: Optional[str] = None) -> bool:
        reply = await self._query("is_registered", [principal] if principal else [])
        return bool(reply)

    async def get_my_profile(self) -> Optional[RegisteredUser]:
        reply = unwrap_opt(await self._query("get_my_profile"))
        return RegisteredUser.from_payload(reply) if reply else None

    async def contribute_icp(
        self, backend: str, campaign_id: int, amount_e8s: int
    ) -> CallResult:
        reply = await self._update("contribute_icp", backend, campaign_id, amount_e8s)
        return CallResult.from_payload(reply)

    async def confirm_payment(self, contribution_id: int, backend: str) -> CallResult:
        reply = await self._update("confirm_payment", contribution_id, backend)
        return CallResult.from_payload(reply)

    async def get_escrow_summary(self, campaign_id: int) -> EscrowSummary:
        return EscrowSummary.from_payload(
            await self._query("get_escrow_summary", campaign_id)
        )

    async def get_contributions_by_user(
        self, principal: Optional[str] = None
    ) -> list[Contribution]:
        reply = await self._query(
            "get_contributions_by_user", [principal] if principal else []
        )
        return [Contribution.from_payload(item) for item in reply or []]

    async def get_campaign_contributions(self, campaign_id: int) -> list[Contribution]:
        reply = await self._query("get_campaign_contributions", campaign_id)
        return [Contribution.from_payload(item) for item in reply or []]
