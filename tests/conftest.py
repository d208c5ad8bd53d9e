"""
Fixtures pytest partagees pour les tests FundVerse.

Ce module contient les fixtures communes utilisees dans les tests:
- Mocks des ports canister (IBackendService, IFundFlowService)
- Faux client du fournisseur d'identite pilotable
- Settings de test avec chemins temporaires
"""

import time
from pathlib import Path
from typing import Callable, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from fundverse.adapters.identity.delegation import DelegationIdentity
from fundverse.config import Settings
from fundverse.core.entities import Campaign
from fundverse.core.ports.canisters import CallResult, IBackendService, IFundFlowService
from fundverse.core.ports.identity import IAuthClient, IIdentity
from fundverse.core.value_objects import EndpointConfig

BACKEND_ID = "be2us-64aaa-aaaaa-qaabq-cai"
FUND_FLOW_ID = "bkyz2-fmaaa-aaaaa-qaaaq-cai"
PRINCIPAL = "2vxsx-fae2v-xsxfa-e2vxs-xfae2-vxsxf-aeqae"


def make_identity(
    principal: str = PRINCIPAL,
    delegation: str = "delegation-token",
    ttl_seconds: int = 3600,
) -> DelegationIdentity:
    """Cree une delegation valide pendant ttl_seconds."""
    return DelegationIdentity(
        principal_text=principal,
        delegation=delegation,
        expiration_ns=time.time_ns() + ttl_seconds * 1_000_000_000,
    )


def make_campaign(
    id: int = 1,
    goal: int = 1_000_000_000,
    amount_raised: int = 0,
    end_date: int = 2_000_000_000,
    category: str = "Technology",
    title: str = "Solar Kiosk",
) -> Campaign:
    """Cree une campagne de test."""
    return Campaign(
        id=id,
        title=title,
        goal=goal,
        amount_raised=amount_raised,
        end_date=end_date,
        category=category,
        idea_id=id,
    )


class FakeAuthClient(IAuthClient):
    """
    Faux fournisseur d'identite.

    login() memorise les callbacks : le test decide ensuite de
    l'issue avec complete() ou fail().
    """

    def __init__(self, identity: Optional[IIdentity] = None) -> None:
        self.identity = identity
        self.login_calls = 0
        self.logout_calls = 0
        self.logout_error: Optional[Exception] = None
        self._on_success: Optional[Callable[[], None]] = None
        self._on_error: Optional[Callable[[str], None]] = None
        self.last_login_args: Optional[tuple[str, int]] = None

    def login(self, identity_provider, max_time_to_live, on_success, on_error) -> None:
        self.login_calls += 1
        self.last_login_args = (identity_provider, max_time_to_live)
        self._on_success = on_success
        self._on_error = on_error

    def complete(self, identity: Optional[IIdentity] = None) -> None:
        self.identity = identity or make_identity()
        self._on_success()

    def fail(self, message: str) -> None:
        self._on_error(message)

    def is_authenticated(self) -> bool:
        return self.identity is not None

    def get_identity(self) -> IIdentity:
        from fundverse.core.errors import NotAuthenticatedError

        if self.identity is None:
            raise NotAuthenticatedError()
        return self.identity

    async def logout(self) -> None:
        self.logout_calls += 1
        self.identity = None
        if self.logout_error is not None:
            raise self.logout_error


@pytest.fixture
def endpoint() -> EndpointConfig:
    """Configuration reseau mainnet."""
    return EndpointConfig(
        is_local=False,
        remote_host="https://ic0.app",
        identity_provider_url="https://identity.ic0.app",
    )


@pytest.fixture
def local_endpoint() -> EndpointConfig:
    """Configuration reseau de developpement local."""
    return EndpointConfig(
        is_local=True,
        remote_host="http://localhost:4943",
        identity_provider_url="http://rdmx6-jaaaa-aaaaa-aaadq-cai.localhost:4943",
    )


@pytest.fixture
def fake_auth_client() -> FakeAuthClient:
    """Fournisseur d'identite sans credential."""
    return FakeAuthClient()


@pytest.fixture
def mock_backend() -> MagicMock:
    """
    Mock de IBackendService pour les tests.

    Les methodes async sont des AsyncMock ; les valeurs de retour
    doivent etre configurees dans chaque test.
    """
    mock = MagicMock(spec=IBackendService)
    mock.canister_id = BACKEND_ID
    mock.create_idea = AsyncMock(return_value=7)
    mock.create_campaign = AsyncMock(return_value=CallResult(ok=3))
    mock.get_campaign_cards = AsyncMock(return_value=[])
    mock.get_campaign_cards_by_status = AsyncMock(return_value=[])
    mock.get_campaign_meta = AsyncMock(return_value=None)
    mock.get_campaign_total_funding = AsyncMock(return_value=0)
    return mock


@pytest.fixture
def mock_fund_flow() -> MagicMock:
    """
    Mock de IFundFlowService pour le parcours nominal.

    register_user, contribute_icp et confirm_payment reussissent.
    """
    mock = MagicMock(spec=IFundFlowService)
    mock.canister_id = FUND_FLOW_ID
    mock.register_user = AsyncMock(return_value=CallResult(ok=None))
    mock.is_registered = AsyncMock(return_value=True)
    mock.get_my_profile = AsyncMock(return_value=None)
    mock.contribute_icp = AsyncMock(return_value=CallResult(ok=42))
    mock.confirm_payment = AsyncMock(return_value=CallResult(ok=None))
    mock.get_escrow_summary = AsyncMock()
    mock.get_contributions_by_user = AsyncMock(return_value=[])
    mock.get_campaign_contributions = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings de test avec repertoires temporaires.

    Les chemins pointent vers tmp_path pour l'isolation des tests.
    """
    return Settings(
        credential_dir=tmp_path / "identity",
        log_file=tmp_path / "logs" / "fundverse.log",
        backend_canister_id=BACKEND_ID,
        fund_flow_canister_id=FUND_FLOW_ID,
    )


@pytest.fixture
def campaign_factory() -> Callable[..., Campaign]:
    """Fabrique de campagnes (voir make_campaign)."""
    return make_campaign


@pytest.fixture
def identity_factory() -> Callable[..., DelegationIdentity]:
    """Fabrique de delegations (voir make_identity)."""
    return make_identity
