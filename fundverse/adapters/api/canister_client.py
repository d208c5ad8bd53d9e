"""
Base commune des clients de canister.

Les clients backend et Fund_Flow ne diffèrent que par l'identifiant de
canister et la liste des méthodes exposées : tout le transport passe par
le même HttpAgent.
"""

from typing import Any

from fundverse.adapters.api.agent import HttpAgent


class CanisterClient:
    """Liaison entre un HttpAgent et un canister."""

    def __init__(self, agent: HttpAgent, canister_id: str) -> None:
        self._agent = agent
        self._canister_id = canister_id

    @property
    def canister_id(self) -> str:
        return self._canister_id

    @property
    def agent(self) -> HttpAgent:
        return self._agent

    async def _query(self, method: str, *args: Any) -> Any:
        return await self._agent.query(self._canister_id, method, *args)

    async def _update(self, method: str, *args: Any) -> Any:
        return await self._agent.call(self._canister_id, method, *args)

    async def close(self) -> None:
        await self._agent.close()
