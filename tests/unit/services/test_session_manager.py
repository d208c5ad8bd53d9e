"""
Tests unitaires pour SessionManager.

Ces tests verifient:
- login suspend jusqu'au callback du fournisseur (succes ou erreur)
- login idempotent quand une session est deja authentifiee
- logout invalide la session et tous les clients qui en derivent
- is_authenticated ne leve jamais
- connection_status pour l'en-tete de l'interface
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from fundverse.core.errors import LoginError, NotAuthenticatedError
from fundverse.services.session_manager import (
    SESSION_MAX_TIME_TO_LIVE_NS,
    SessionManager,
    connection_status,
)


@pytest.fixture
def manager(fake_auth_client, endpoint) -> SessionManager:
    return SessionManager(auth_client=fake_auth_client, endpoint=endpoint)


class TestLogin:
    """Tests pour SessionManager.login."""

    @pytest.mark.asyncio
    async def test_login_success(self, manager, fake_auth_client, identity_factory) -> None:
        task = asyncio.create_task(manager.login())
        await asyncio.sleep(0)

        fake_auth_client.complete(identity_factory(principal="abcde-fgh"))
        assert await task is True

        assert manager.is_authenticated()
        assert manager.get_principal() == "abcde-fgh"

    @pytest.mark.asyncio
    async def test_login_waits_for_callback(self, manager, fake_auth_client) -> None:
        """Aucune limite de temps : login reste suspendu sans callback."""
        task = asyncio.create_task(manager.login())
        for _ in range(5):
            await asyncio.sleep(0)
        assert not task.done()

        fake_auth_client.complete()
        await task

    @pytest.mark.asyncio
    async def test_login_requests_provider_and_ttl(self, manager, fake_auth_client) -> None:
        task = asyncio.create_task(manager.login())
        await asyncio.sleep(0)
        fake_auth_client.complete()
        await task

        assert fake_auth_client.last_login_args == (
            "https://identity.ic0.app",
            SESSION_MAX_TIME_TO_LIVE_NS,
        )
        assert SESSION_MAX_TIME_TO_LIVE_NS == 604_800_000_000_000

    @pytest.mark.asyncio
    async def test_login_error_leaves_state_unchanged(self, manager, fake_auth_client) -> None:
        task = asyncio.create_task(manager.login())
        await asyncio.sleep(0)
        fake_auth_client.fail("UserInterrupt")

        with pytest.raises(LoginError, match="UserInterrupt"):
            await task

        assert not manager.is_authenticated()
        with pytest.raises(NotAuthenticatedError):
            manager.get_principal()

    @pytest.mark.asyncio
    async def test_login_when_authenticated_skips_provider(
        self, manager, fake_auth_client, identity_factory
    ) -> None:
        """Credential restaure : pas de nouvel echange avec le fournisseur."""
        fake_auth_client.identity = identity_factory()

        assert await manager.login() is True
        assert fake_auth_client.login_calls == 0

    @pytest.mark.asyncio
    async def test_second_login_is_idempotent(self, manager, fake_auth_client) -> None:
        task = asyncio.create_task(manager.login())
        await asyncio.sleep(0)
        fake_auth_client.complete()
        await task
        session = manager.current_session()

        assert await manager.login() is True
        assert fake_auth_client.login_calls == 1
        assert manager.current_session() is session


class TestLogout:
    """Tests pour SessionManager.logout."""

    @pytest.mark.asyncio
    async def test_logout_invalidates_session(
        self, manager, fake_auth_client, identity_factory
    ) -> None:
        fake_auth_client.identity = identity_factory()
        session = manager.current_session()

        await manager.logout()

        assert session.authenticated is False
        assert not manager.is_authenticated()
        with pytest.raises(NotAuthenticatedError):
            manager.get_principal()

    @pytest.mark.asyncio
    async def test_logout_without_session_is_safe(self, manager, fake_auth_client) -> None:
        await manager.logout()
        assert fake_auth_client.logout_calls == 1

    @pytest.mark.asyncio
    async def test_logout_propagates_provider_error_after_local_invalidation(
        self, manager, fake_auth_client, identity_factory
    ) -> None:
        fake_auth_client.identity = identity_factory()
        session = manager.current_session()
        fake_auth_client.logout_error = RuntimeError("provider unreachable")

        with pytest.raises(RuntimeError, match="provider unreachable"):
            await manager.logout()

        assert session.authenticated is False

    @pytest.mark.asyncio
    async def test_login_after_logout_opens_new_session(
        self, manager, fake_auth_client, identity_factory
    ) -> None:
        fake_auth_client.identity = identity_factory()
        first = manager.current_session()
        await manager.logout()

        task = asyncio.create_task(manager.login())
        await asyncio.sleep(0)
        fake_auth_client.complete()
        await task

        second = manager.current_session()
        assert second is not first
        assert second.authenticated
        assert not first.authenticated


class TestSessionState:
    """Tests pour is_authenticated et current_session."""

    def test_is_authenticated_swallows_errors(self, endpoint) -> None:
        auth_client = MagicMock()
        auth_client.is_authenticated.side_effect = OSError("storage unavailable")
        manager = SessionManager(auth_client=auth_client, endpoint=endpoint)

        assert manager.is_authenticated() is False

    def test_current_session_opens_lazily(
        self, manager, fake_auth_client, identity_factory
    ) -> None:
        fake_auth_client.identity = identity_factory(principal="restored-principal")

        session = manager.current_session()

        assert session.principal == "restored-principal"
        assert session.identity is fake_auth_client.identity
        assert manager.current_session() is session

    def test_expired_credential_invalidates_session(
        self, manager, fake_auth_client, identity_factory
    ) -> None:
        fake_auth_client.identity = identity_factory()
        session = manager.current_session()

        fake_auth_client.identity = None

        with pytest.raises(NotAuthenticatedError):
            manager.current_session()
        assert session.authenticated is False


class TestConnectionStatus:
    """Tests pour connection_status."""

    def test_disconnected(self, manager) -> None:
        assert connection_status(manager) == (False, None)

    def test_connected(self, manager, fake_auth_client, identity_factory) -> None:
        fake_auth_client.identity = identity_factory(principal="abcde-fgh")
        assert connection_status(manager) == (True, "abcde-fgh")

    def test_error_reports_disconnected(self) -> None:
        manager = MagicMock()
        manager.is_authenticated.return_value = True
        manager.get_principal.side_effect = RuntimeError("boom")

        assert connection_status(manager) == (False, None)
