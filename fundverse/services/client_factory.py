"""
Fabrique de clients autorisés vers les canisters.

ClientFactory construit, pour la Session courante, un HttpAgent et le
client du canister demandé. La fabrique ne garde rien en cache :
SessionClients, côté appelant, conserve la paire (backend, Fund_Flow)
tant que la Session dont elle dérive reste valide, et la reconstruit
après tout cycle logout/login.
"""

from typing import Optional, Union

from loguru import logger

from fundverse.adapters.api.agent import HttpAgent
from fundverse.adapters.api.backend_client import BackendClient
from fundverse.adapters.api.fund_flow_client import FundFlowClient
from fundverse.core.errors import ConfigurationError
from fundverse.core.ports.canisters import ServiceDescriptor, ServiceKind
from fundverse.core.value_objects import EndpointConfig, Session
from fundverse.services.session_manager import SessionManager

CanisterClientType = Union[BackendClient, FundFlowClient]

_CLIENT_CLASSES = {
    ServiceKind.BACKEND: BackendClient,
    ServiceKind.FUND_FLOW: FundFlowClient,
}


class ClientFactory:
    """
    Construit les clients backend et Fund_Flow par la même logique.

    Example:
        factory = ClientFactory(session_manager, endpoint, backend_canister_id="...",
                                fund_flow_canister_id="...")
        backend = await factory.create_client(factory.backend_descriptor)
    """

    def __init__(
        self,
        session_manager: SessionManager,
        endpoint: EndpointConfig,
        backend_canister_id: Optional[str] = None,
        fund_flow_canister_id: Optional[str] = None,
        timeout: float = 30.0,
        query_max_attempts: int = 5,
    ) -> None:
        self._session_manager = session_manager
        self._endpoint = endpoint
        self._backend_canister_id = backend_canister_id
        self._fund_flow_canister_id = fund_flow_canister_id
        self._timeout = timeout
        self._query_max_attempts = query_max_attempts

    @property
    def backend_descriptor(self) -> ServiceDescriptor:
        return self._descriptor(ServiceKind.BACKEND, self._backend_canister_id)

    @property
    def fund_flow_descriptor(self) -> ServiceDescriptor:
        return self._descriptor(ServiceKind.FUND_FLOW, self._fund_flow_canister_id)

    @staticmethod
    def _descriptor(kind: ServiceKind, canister_id: Optional[str]) -> ServiceDescriptor:
        if not canister_id:
            raise ConfigurationError(
                f"Missing canister id for {kind.value} "
                f"(set FUNDVERSE_{kind.value.upper()}_CANISTER_ID)"
            )
        return ServiceDescriptor(kind=kind, canister_id=canister_id)

    async def create_client(self, descriptor: ServiceDescriptor) -> CanisterClientType:
        """
        Crée un client autorisé pour le canister décrit.

        En développement local, la clé racine du replica est récupérée une
        fois ; un échec est journalisé et n'empêche pas la création.

        Raises:
            NotAuthenticatedError: Si aucune session n'est authentifiée
        """
        session = self._session_manager.current_session()
        agent = HttpAgent(
            host=self._endpoint.remote_host,
            session=session,
            timeout=self._timeout,
            query_max_attempts=self._query_max_attempts,
        )
        if self._endpoint.is_local:
            try:
                await agent.fetch_root_key()
            except Exception as e:
                logger.warning("Failed to fetch root key: {}", e)

        client_cls = _CLIENT_CLASSES[descriptor.kind]
        logger.debug("Client created", kind=descriptor.kind.value, canister=descriptor.canister_id)
        return client_cls(agent, descriptor.canister_id)


class SessionClients:
    """
    Cache de la paire de clients, lié à une Session.

    La paire est reconstruite dès que la Session courante n'est plus celle
    dont elle a été dérivée (logout puis login, credential expiré).
    """

    def __init__(self, factory: ClientFactory, session_manager: SessionManager) -> None:
        self._factory = factory
        self._session_manager = session_manager
        self._session: Optional[Session] = None
        self._backend: Optional[BackendClient] = None
        self._fund_flow: Optional[FundFlowClient] = None

    async def get(self) -> tuple[BackendClient, FundFlowClient]:
        """Retourne (backend, Fund_Flow), reconstruits si la session a changé."""
        session = self._session_manager.current_session()
        if self._session is not session or not session.authenticated:
            await self.close()
            self._backend = await self._factory.create_client(self._factory.backend_descriptor)
            self._fund_flow = await self._factory.create_client(self._factory.fund_flow_descriptor)
            self._session = session
        return self._backend, self._fund_flow

    async def close(self) -> None:
        """Ferme et oublie les clients courants."""
        for client in (self._backend, self._fund_flow):
            if client is not None:
                await client.close()
        self._backend = None
        self._fund_flow = None
        self._session = None
