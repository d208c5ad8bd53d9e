"""
Relance avec backoff exponentiel pour les appels de lecture (query).

Le replica peut répondre 429 (trop de requêtes) ou 503 (surcharge) : ces
réponses signifient que la requête n'a pas été traitée et peut donc être
rejouée. Seuls les appels query passent par ici ; les appels de mise à
jour (contributions, confirmations) ne sont jamais rejoués car ils ne
sont pas idempotents.

Usage:
    response = await request_with_retry(client, "POST", url, json=body)
"""

from typing import Optional

import httpx
from loguru import logger
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

RETRYABLE_STATUS_CODES = frozenset({429, 503})


class ReplicaBusyError(Exception):
    """
    Le replica a refusé la requête sans la traiter (429 ou 503).

    Attributes:
        status_code: Code HTTP reçu
        retry_after: Secondes à attendre (header Retry-After), ou None
    """

    def __init__(self, status_code: int, retry_after: Optional[int] = None) -> None:
        self.status_code = status_code
        self.retry_after = retry_after
        super().__init__(f"Replica busy ({status_code}). Retry after: {retry_after}s")


def with_retry(max_attempts: int = 5, max_wait: int = 30):
    """
    Décorateur relançant une coroutine sur ReplicaBusyError.

    Args:
        max_attempts: Nombre maximum de tentatives
        max_wait: Délai maximum entre deux tentatives (secondes)
    """
    return retry(
        retry=retry_if_exception_type(ReplicaBusyError),
        wait=wait_random_exponential(multiplier=1, min=1, max=max_wait),
        stop=stop_after_attempt(max_attempts),
        reraise=True,
    )


def _parse_retry_after(response: httpx.Response) -> Optional[int]:
    header = response.headers.get("Retry-After")
    if header and header.isdigit():
        return int(header)
    return None


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    max_attempts: int = 5,
    **kwargs,
) -> httpx.Response:
    """
    Exécute une requête HTTP en relançant sur 429/503.

    Les autres erreurs HTTP sont propagées immédiatement.

    Raises:
        ReplicaBusyError: Si le replica reste saturé après max_attempts
        httpx.HTTPStatusError: Pour les autres statuts d'erreur
    """

    @with_retry(max_attempts=max_attempts)
    async def _do_request() -> httpx.Response:
        response = await client.request(method, url, **kwargs)
        if response.status_code in RETRYABLE_STATUS_CODES:
            logger.debug("Replica busy, retrying", url=url, status=response.status_code)
            raise ReplicaBusyError(response.status_code, _parse_retry_after(response))
        response.raise_for_status()
        return response

    return await _do_request()
