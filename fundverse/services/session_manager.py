"""
Gestion du cycle de vie de la session d'authentification.

Le SessionManager est l'unique propriétaire du credential du processus.
Il adapte la connexion à callbacks du fournisseur d'identité en une seule
opération awaitable, ouvre la Session à partir du credential stocké et
l'invalide lors de la déconnexion.

Responsabilités:
- login / logout / is_authenticated / get_principal
- Ouverture paresseuse de la Session (credential restauré au démarrage)
- Invalidation : tous les clients dérivés d'une session invalidée
  deviennent inutilisables
"""

import asyncio
from typing import Optional

from loguru import logger

from fundverse.core.errors import LoginError, NotAuthenticatedError
from fundverse.core.ports.identity import IAuthClient
from fundverse.core.value_objects import EndpointConfig, Session

# Duree de vie maximale demandee au fournisseur : 7 jours en nanosecondes
SESSION_MAX_TIME_TO_LIVE_NS = 7 * 24 * 60 * 60 * 1_000_000_000


class SessionManager:
    """
    Propriétaire unique du credential et de la Session courante.

    Un second login() alors qu'une session est déjà authentifiée ne relance
    pas d'échange avec le fournisseur et renvoie True.

    Example:
        manager = SessionManager(auth_client=client, endpoint=settings.endpoint_config())
        if not manager.is_authenticated():
            await manager.login()
        principal = manager.get_principal()
    """

    def __init__(self, auth_client: IAuthClient, endpoint: EndpointConfig) -> None:
        """
        Args:
            auth_client: Client du fournisseur d'identité
            endpoint: Configuration réseau (URL du fournisseur)
        """
        self._auth_client = auth_client
        self._endpoint = endpoint
        self._session: Optional[Session] = None

    async def login(self) -> bool:
        """
        Connecte l'utilisateur auprès du fournisseur d'identité.

        Suspend sans limite de temps jusqu'au callback de succès ou d'erreur.

        Returns:
            True une fois la session ouverte

        Raises:
            LoginError: Si le fournisseur signale un échec (état inchangé)
        """
        if self.is_authenticated():
            self.current_session()
            logger.debug("Login skipped, session already authenticated")
            return True

        loop = asyncio.get_running_loop()
        outcome: asyncio.Future[bool] = loop.create_future()

        def on_success() -> None:
            if not outcome.done():
                outcome.set_result(True)

        def on_error(message: str) -> None:
            if not outcome.done():
                outcome.set_exception(LoginError(message))

        self._auth_client.login(
            identity_provider=self._endpoint.identity_provider_url,
            max_time_to_live=SESSION_MAX_TIME_TO_LIVE_NS,
            on_success=on_success,
            on_error=on_error,
        )
        try:
            await outcome
        except LoginError as e:
            logger.error("Login failed: {}", e)
            raise

        self._replace_session(self._open_session())
        logger.info("Login successful", principal=self._session.principal)
        return True

    async def logout(self) -> None:
        """
        Invalide la session et supprime le credential.

        Toujours sûr, même sans session. L'état local est invalidé avant
        l'appel au fournisseur, dont l'éventuelle erreur est propagée.
        """
        self._replace_session(None)
        await self._auth_client.logout()
        logger.info("Logout successful")

    def is_authenticated(self) -> bool:
        """Statut d'authentification ; False en cas d'erreur de vérification."""
        try:
            return self._auth_client.is_authenticated()
        except Exception as e:
            logger.warning("Authentication check failed: {}", e)
            return False

    def current_session(self) -> Session:
        """
        Retourne la Session courante, ouverte à la première utilisation.

        Raises:
            NotAuthenticatedError: Si aucun credential valide n'est stocké
        """
        if not self.is_authenticated():
            # Credential expire ou supprime : les clients derives ne doivent plus servir
            self._replace_session(None)
            raise NotAuthenticatedError()
        if self._session is None:
            self._session = self._open_session()
        return self._session

    def get_principal(self) -> str:
        """
        Principal de l'utilisateur connecté.

        Raises:
            NotAuthenticatedError: Si aucune session n'est authentifiée
        """
        return self.current_session().principal

    def _open_session(self) -> Session:
        identity = self._auth_client.get_identity()
        return Session(identity=identity, principal=identity.principal)

    def _replace_session(self, session: Optional[Session]) -> None:
        if self._session is not None and self._session is not session:
            self._session.invalidate()
        self._session = session


def connection_status(manager: SessionManager) -> tuple[bool, Optional[str]]:
    """
    État de connexion pour l'en-tête de l'interface.

    Returns:
        (connecté, principal) ; (False, None) en cas d'erreur
    """
    try:
        if not manager.is_authenticated():
            return False, None
        return True, manager.get_principal()
    except Exception as e:
        logger.warning("Failed to get connection status: {}", e)
        return False, None
