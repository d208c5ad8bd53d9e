"""
Connexion par redirection avec callback local (loopback).

Le navigateur est ouvert sur le fournisseur d'identité avec une URL de
redirection pointant vers un petit serveur FastAPI local. Le fournisseur
y renvoie soit la délégation (principal, jeton, expiration), soit une
erreur. Aucune limite de temps n'est imposée : l'échange se termine
uniquement par l'un de ces deux callbacks.

Le protocole interne du fournisseur reste une boîte noire : seuls les
paramètres de la redirection sont interprétés.
"""

import asyncio
import time
import webbrowser
from typing import Any, Callable, Optional
from urllib.parse import urlencode

import uvicorn
from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from loguru import logger

from fundverse.adapters.identity.credential_store import CredentialStore
from fundverse.adapters.identity.delegation import DelegationIdentity
from fundverse.core.errors import NotAuthenticatedError
from fundverse.core.ports.identity import IAuthClient, IIdentity

CALLBACK_PATH = "/callback"

_SUCCESS_PAGE = "<html><body><h3>Login successful.</h3>You can close this window.</body></html>"
_ERROR_PAGE = "<html><body><h3>Login failed.</h3>{message}</body></html>"


def build_callback_app(
    max_time_to_live: int,
    on_credential: Callable[[DelegationIdentity], None],
    on_error: Callable[[str], None],
) -> FastAPI:
    """
    Construit l'application recevant la redirection du fournisseur.

    Seule la première redirection est prise en compte.

    Args:
        max_time_to_live: Validité maximale acceptée (nanosecondes)
        on_credential: Appelé avec la délégation reçue
        on_error: Appelé avec le message d'erreur du fournisseur
    """
    app = FastAPI(openapi_url=None, docs_url=None, redoc_url=None)
    state = {"handled": False}

    @app.get(CALLBACK_PATH, response_class=HTMLResponse)
    async def callback(
        principal: Optional[str] = None,
        delegation: Optional[str] = None,
        expiration: Optional[int] = None,
        error: Optional[str] = None,
    ) -> HTMLResponse:
        if state["handled"]:
            return HTMLResponse(_ERROR_PAGE.format(message="Login already completed."), status_code=409)
        state["handled"] = True

        if error or not principal or not delegation:
            message = error or "Identity provider response is missing the delegation"
            on_error(message)
            return HTMLResponse(_ERROR_PAGE.format(message=message), status_code=400)

        # La delegation ne peut pas depasser la duree demandee
        deadline = time.time_ns() + max_time_to_live
        expiration_ns = min(expiration, deadline) if expiration else deadline
        try:
            on_credential(
                DelegationIdentity(
                    principal_text=principal,
                    delegation=delegation,
                    expiration_ns=expiration_ns,
                )
            )
        except Exception as e:
            return HTMLResponse(_ERROR_PAGE.format(message=str(e)), status_code=500)
        return HTMLResponse(_SUCCESS_PAGE)

    return app


class LoopbackAuthClient(IAuthClient):
    """
    Client du fournisseur d'identité avec callback loopback.

    Example:
        client = LoopbackAuthClient(store=CredentialStore("~/.cache/fundverse"))
        client.login(url, ttl, on_success=..., on_error=...)
    """

    def __init__(
        self,
        store: CredentialStore,
        host: str = "127.0.0.1",
        port: int = 8765,
        open_browser: Callable[[str], Any] = webbrowser.open,
    ) -> None:
        """
        Args:
            store: Stockage persistant du credential
            host: Interface d'écoute du callback
            port: Port d'écoute du callback
            open_browser: Fonction ouvrant l'URL du fournisseur
        """
        self._store = store
        self._host = host
        self._port = port
        self._open_browser = open_browser
        self._exchange_task: Optional[asyncio.Task] = None

    @property
    def redirect_uri(self) -> str:
        return f"http://{self._host}:{self._port}{CALLBACK_PATH}"

    def build_login_url(self, identity_provider: str, max_time_to_live: int) -> str:
        """URL d'autorisation du fournisseur avec la redirection loopback."""
        params = urlencode(
            {"redirect_uri": self.redirect_uri, "max_time_to_live": max_time_to_live}
        )
        return f"{identity_provider.rstrip('/')}/#authorize?{params}"

    def login(
        self,
        identity_provider: str,
        max_time_to_live: int,
        on_success: Callable[[], None],
        on_error: Callable[[str], None],
    ) -> None:
        self._exchange_task = asyncio.get_running_loop().create_task(
            self._exchange(identity_provider, max_time_to_live, on_success, on_error)
        )

    async def _exchange(
        self,
        identity_provider: str,
        max_time_to_live: int,
        on_success: Callable[[], None],
        on_error: Callable[[str], None],
    ) -> None:
        completed = asyncio.Event()

        def handle_credential(identity: DelegationIdentity) -> None:
            try:
                self._store.save(identity)
            except Exception as e:
                logger.error("Cannot store credential: {}", e)
                completed.set()
                on_error(f"Cannot store credential: {e}")
                raise
            completed.set()
            on_success()

        def handle_error(message: str) -> None:
            completed.set()
            on_error(message)

        app = build_callback_app(max_time_to_live, handle_credential, handle_error)
        server = uvicorn.Server(
            uvicorn.Config(app, host=self._host, port=self._port, log_level="warning", lifespan="off")
        )
        serve_task = asyncio.create_task(self._serve(server))
        waiter = asyncio.create_task(completed.wait())
        try:
            url = self.build_login_url(identity_provider, max_time_to_live)
            logger.info("Opening identity provider", url=url)
            self._open_browser(url)
            await asyncio.wait({serve_task, waiter}, return_when=asyncio.FIRST_COMPLETED)
            if not completed.is_set():
                # Le serveur s'est arrete avant toute redirection (port occupe...)
                error = serve_task.exception() if not serve_task.cancelled() else None
                on_error(f"Login callback server stopped: {error or 'cancelled'}")
        finally:
            waiter.cancel()
            server.should_exit = True
            if not serve_task.done():
                await serve_task

    @staticmethod
    async def _serve(server: uvicorn.Server) -> None:
        try:
            await server.serve()
        except SystemExit as e:
            # uvicorn quitte le processus si le port est indisponible
            raise OSError(f"cannot listen for login callback (exit code {e.code})") from e

    def is_authenticated(self) -> bool:
        return self._store.load() is not None

    def get_identity(self) -> IIdentity:
        identity = self._store.load()
        if identity is None:
            raise NotAuthenticatedError()
        return identity

    async def logout(self) -> None:
        if self._exchange_task is not None and not self._exchange_task.done():
            self._exchange_task.cancel()
        self._exchange_task = None
        self._store.clear()
