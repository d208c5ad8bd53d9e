"""
Client du canister backend FundVerse (idées et campagnes).

Implémente IBackendService au-dessus du HttpAgent partagé.

Usage:
    client = BackendClient(agent, canister_id="be2us-64aaa-aaaaa-qaabq-cai")
    campaigns = await client.get_campaign_cards()
"""

from typing import Any, Optional

from fundverse.adapters.api.canister_client import CanisterClient
from fundverse.core.entities import Campaign, CampaignMeta, CampaignStatus
from fundverse.core.ports.canisters import CallResult, IBackendService, as_nat


def unwrap_opt(value: Any) -> Any:
    """Déballe une option candid ([] / [x] ou null / x)."""
    if isinstance(value, list):
        return value[0] if value else None
    return value


class BackendClient(CanisterClient, IBackendService):
    """Client du canister backend."""

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
        reply = await self._update(
            "create_idea",
            title,
            description,
            funding_goal,
            legal_entity,
            contact_info,
            category,
            business_registration,
        )
        return as_nat(reply)

    async def create_campaign(self, idea_id: int, goal: int, end_date: int) -> CallResult:
        reply = await self._update("create_campaign", idea_id, goal, end_date)
        return CallResult.from_payload(reply)

    async def get_campaign_cards(self) -> list[Campaign]:
        reply = await self._query("get_campaign_cards")
        return [Campaign.from_payload(item) for item in reply or []]

    async def get_campaign_cards_by_status(self, status: CampaignStatus) -> list[Campaign]:
        # Variante candid sans charge utile : {"Active": null}
        reply = await self._query("get_campaign_cards_by_status", {status.value: None})
        return [Campaign.from_payload(item) for item in reply or []]

    async def get_campaign_meta(self, campaign_id: int) -> Optional[CampaignMeta]:
        reply = unwrap_opt(await self._query("get_campaign_meta", campaign_id))
        return CampaignMeta.from_payload(reply) if reply else None

    async def get_campaign_total_funding(self, campaign_id: int) -> int:
        return int(await self._query("get_campaign_total_funding", campaign_id))
