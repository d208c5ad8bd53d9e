"""
Agent HTTP authentifié vers le replica.

L'agent lie une Session (credential) à l'adresse du replica. Chaque appel
vérifie que la session est toujours valide : un agent dérivé d'une
session invalidée (logout) refuse de servir et doit être recréé.

Format des échanges (JSON) :
    POST /api/v2/canister/{canister_id}/query|call
        {"method_name": "...", "arg": [...], "sender": "<principal>"}
    -> {"status": "replied", "reply": <valeur>}
    -> {"status": "rejected", "reject_code": 5, "reject_message": "..."}
"""

from typing import Any, Optional

import httpx
from loguru import logger

from fundverse.adapters.api.retry import request_with_retry
from fundverse.core.errors import CanisterRejectError, SessionInvalidatedError
from fundverse.core.value_objects import Session


class HttpAgent:
    """
    Agent HTTP pour les appels query et update vers les canisters.

    Example:
        agent = HttpAgent(host="https://ic0.app", session=session)
        cards = await agent.query("be2us-64aaa-aaaaa-qaabq-cai", "get_campaign_cards")
        await agent.close()
    """

    STATUS_PATH = "/api/v2/status"

    def __init__(
        self,
        host: str,
        session: Session,
        timeout: float = 30.0,
        query_max_attempts: int = 5,
    ) -> None:
        """
        Initialise l'agent.

        Args:
            host: URL du replica
            session: Session dont le credential autorise les appels
            timeout: Timeout de transport (secondes)
            query_max_attempts: Tentatives maximum pour les appels query
        """
        self._host = host
        self._session = session
        self._timeout = timeout
        self._query_max_attempts = query_max_attempts
        self._root_key: Optional[str] = None
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def host(self) -> str:
        return self._host

    @property
    def session(self) -> Session:
        return self._session

    @property
    def root_key(self) -> Optional[str]:
        """Clé racine de vérification (uniquement en développement local)."""
        return self._root_key

    def _get_client(self) -> httpx.AsyncClient:
        """Retourne le client HTTP, le crée si nécessaire (lazy init)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._host,
                headers={"Accept": "application/json"},
                timeout=httpx.Timeout(self._timeout, connect=10.0),
            )
        return self._client

    def _ensure_usable(self) -> None:
        if not self._session.authenticated:
            raise SessionInvalidatedError()

    async def fetch_root_key(self) -> str:
        """
        Récupère la clé racine du replica local.

        Nécessaire uniquement en développement : le mainnet utilise une clé
        racine connue à l'avance.
        """
        client = self._get_client()
        response = await client.get(self.STATUS_PATH)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict) or not isinstance(payload.get("root_key"), str):
            raise ValueError(f"Unexpected status payload: {payload!r}")
        self._root_key = payload["root_key"]
        return self._root_key

    async def query(self, canister_id: str, method: str, *args: Any) -> Any:
        """Appel en lecture, relancé si le replica est saturé."""
        return await self._send("query", canister_id, method, args, retry=True)

    async def call(self, canister_id: str, method: str, *args: Any) -> Any:
        """Appel de mise à jour, jamais relancé automatiquement."""
        return await self._send("call", canister_id, method, args, retry=False)

    async def _send(
        self,
        request_type: str,
        canister_id: str,
        method: str,
        args: tuple[Any, ...],
        retry: bool,
    ) -> Any:
        self._ensure_usable()
        client = self._get_client()
        url = f"/api/v2/canister/{canister_id}/{request_type}"
        body = {
            "method_name": method,
            "arg": list(args),
            "sender": self._session.principal,
        }
        headers = self._session.identity.auth_headers()

        logger.debug("Canister {}", request_type, canister=canister_id, method=method)
        if retry:
            response = await request_with_retry(
                client,
                "POST",
                url,
                max_attempts=self._query_max_attempts,
                json=body,
                headers=headers,
            )
        else:
            response = await client.post(url, json=body, headers=headers)
            response.raise_for_status()

        return self._decode(response)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        data = response.json()
        if data.get("status") == "rejected":
            raise CanisterRejectError(
                data.get("reject_message", "call rejected"),
                reject_code=data.get("reject_code"),
            )
        return data.get("reply")

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None
