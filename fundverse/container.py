"""
Container d'injection de dependances via dependency-injector.

Fournit une instance unique du credential et de la session par processus,
et les clients autorises qui en derivent.
"""

from dependency_injector import containers, providers

from .adapters.identity.credential_store import CredentialStore
from .adapters.identity.loopback_auth_client import LoopbackAuthClient
from .config import Settings
from .services.client_factory import ClientFactory, SessionClients
from .services.contribution import ContributionGate
from .services.session_manager import SessionManager


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        manager = container.session_manager()
        backend, fund_flow = await container.session_clients().get()
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Configuration reseau immutable, derivee une seule fois
    endpoint = providers.Singleton(
        lambda settings: settings.endpoint_config(),
        config,
    )

    # Identite - un seul credential par processus
    credential_store = providers.Singleton(
        CredentialStore,
        cache_dir=config.provided.credential_dir,
    )
    auth_client = providers.Singleton(
        LoopbackAuthClient,
        store=credential_store,
        host=config.provided.callback_host,
        port=config.provided.callback_port,
    )
    session_manager = providers.Singleton(
        SessionManager,
        auth_client=auth_client,
        endpoint=endpoint,
    )

    # Clients canister - la fabrique ne cache rien, SessionClients cache par session
    client_factory = providers.Singleton(
        ClientFactory,
        session_manager=session_manager,
        endpoint=endpoint,
        backend_canister_id=config.provided.backend_canister_id,
        fund_flow_canister_id=config.provided.fund_flow_canister_id,
        timeout=config.provided.request_timeout,
        query_max_attempts=config.provided.query_max_attempts,
    )
    session_clients = providers.Singleton(
        SessionClients,
        factory=client_factory,
        session_manager=session_manager,
    )

    # Drapeau "occupe" des contributions, partage par les interfaces
    contribution_gate = providers.Singleton(ContributionGate)
