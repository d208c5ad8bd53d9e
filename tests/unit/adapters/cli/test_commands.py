"""
Tests unitaires pour les commandes CLI.

Tests couvrant:
- login / logout / whoami : session et etat de connexion
- campaigns / stats / escrow : affichage des campagnes
- contribute : parcours de contribution et codes de sortie
- create-project / contributions
- info / version via CliRunner
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import typer
from typer.testing import CliRunner

from fundverse.adapters.cli.commands.campaign_commands import (
    _campaigns_async,
    _escrow_async,
    _stats_async,
)
from fundverse.adapters.cli.commands.contribution_commands import (
    _contribute_async,
    _contributions_async,
    _create_project_async,
)
from fundverse.adapters.cli.commands.session_commands import (
    _login_async,
    _logout_async,
    _whoami_async,
)
from fundverse.core.entities import CampaignMeta, CampaignStatus, EscrowSummary
from fundverse.core.errors import CanisterRejectError, LoginError, NotAuthenticatedError
from fundverse.core.ports.canisters import CallResult
from fundverse.services.contribution import ContributionGate
from fundverse.services.project_creation import ProjectDraft

# Chemins de patch pour les sous-modules
_HELPERS = "fundverse.adapters.cli.helpers"
_SESSION = "fundverse.adapters.cli.commands.session_commands"
_CAMPAIGN = "fundverse.adapters.cli.commands.campaign_commands"
_CONTRIB = "fundverse.adapters.cli.commands.contribution_commands"

runner = CliRunner()


def _printed(mock_console) -> str:
    return "\n".join(str(call) for call in mock_console.print.call_args_list)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def mock_container(mock_backend, mock_fund_flow):
    """Mock le Container pour les tests.

    Patche Container dans helpers.py car c'est la que le decorateur
    @with_container() l'importe et l'instancie.
    """
    with patch(f"{_HELPERS}.Container") as mock_cls:
        container_instance = MagicMock()
        mock_cls.return_value = container_instance
        clients = container_instance.session_clients.return_value
        clients.get = AsyncMock(return_value=(mock_backend, mock_fund_flow))
        clients.close = AsyncMock()
        container_instance.contribution_gate.return_value = ContributionGate()
        container_instance.config.return_value = MagicMock(max_contribution_icp=10000.0)
        container_instance.session_manager.return_value.logout = AsyncMock()
        container_instance.session_manager.return_value.login = AsyncMock(return_value=True)
        yield container_instance


# ============================================================================
# Tests session
# ============================================================================


class TestSessionCommands:

    @pytest.mark.asyncio
    async def test_login_already_connected(self, mock_container):
        manager = mock_container.session_manager.return_value
        manager.is_authenticated.return_value = True
        manager.get_principal.return_value = "abcde-fgh"

        with patch(f"{_SESSION}.console") as mock_console:
            await _login_async()

        manager.login.assert_not_awaited()
        assert "Deja connecte" in _printed(mock_console)

    @pytest.mark.asyncio
    async def test_login_success(self, mock_container):
        manager = mock_container.session_manager.return_value
        manager.is_authenticated.return_value = False
        manager.get_principal.return_value = "abcde-fgh"

        with patch(f"{_SESSION}.console") as mock_console:
            await _login_async()

        manager.login.assert_awaited_once()
        assert "abcde-fgh" in _printed(mock_console)

    @pytest.mark.asyncio
    async def test_login_failure_exits(self, mock_container):
        manager = mock_container.session_manager.return_value
        manager.is_authenticated.return_value = False
        manager.login.side_effect = LoginError("UserInterrupt")

        with patch(f"{_SESSION}.console"):
            with pytest.raises(typer.Exit):
                await _login_async()

    @pytest.mark.asyncio
    async def test_logout(self, mock_container):
        with patch(f"{_SESSION}.console"):
            await _logout_async()

        mock_container.session_manager.return_value.logout.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_whoami_disconnected(self, mock_container):
        mock_container.session_manager.return_value.is_authenticated.return_value = False

        with patch(f"{_SESSION}.console") as mock_console:
            await _whoami_async()

        assert "Non connecte" in _printed(mock_console)

    @pytest.mark.asyncio
    async def test_clients_closed_after_command(self, mock_container):
        with patch(f"{_SESSION}.console"):
            await _logout_async()

        mock_container.session_clients.return_value.close.assert_awaited_once()


# ============================================================================
# Tests consultation
# ============================================================================


class TestCampaignCommands:

    @pytest.mark.asyncio
    async def test_campaigns_empty(self, mock_container):
        with patch(f"{_CAMPAIGN}.console") as mock_console:
            await _campaigns_async(None)

        assert "Aucune campagne" in _printed(mock_console)

    @pytest.mark.asyncio
    async def test_campaigns_by_status(self, mock_container, mock_backend, campaign_factory):
        mock_backend.get_campaign_cards_by_status.return_value = [campaign_factory()]

        with patch(f"{_CAMPAIGN}.console") as mock_console:
            await _campaigns_async(CampaignStatus.ACTIVE)

        mock_backend.get_campaign_cards_by_status.assert_awaited_once_with(CampaignStatus.ACTIVE)
        mock_console.print.assert_called_once()

    @pytest.mark.asyncio
    async def test_campaigns_requires_login(self, mock_container):
        mock_container.session_clients.return_value.get.side_effect = NotAuthenticatedError()

        with patch(f"{_HELPERS}.console") as mock_console:
            with pytest.raises(typer.Exit):
                await _campaigns_async(None)

        assert "fundverse login" in _printed(mock_console)

    @pytest.mark.asyncio
    async def test_stats(self, mock_container, mock_backend, campaign_factory):
        mock_backend.get_campaign_cards.return_value = [
            campaign_factory(id=1, category="Arts"),
            campaign_factory(id=2, category="Food"),
        ]

        with patch(f"{_CAMPAIGN}.console") as mock_console:
            await _stats_async()

        assert "Campagnes : 2" in _printed(mock_console)

    @pytest.mark.asyncio
    async def test_escrow_unknown_campaign(self, mock_container, mock_backend):
        mock_backend.get_campaign_meta.return_value = None

        with patch(f"{_CAMPAIGN}.console"):
            with pytest.raises(typer.Exit):
                await _escrow_async(99)

    @pytest.mark.asyncio
    async def test_escrow(self, mock_container, mock_backend, mock_fund_flow):
        mock_backend.get_campaign_meta.return_value = CampaignMeta(
            campaign_id=1, goal=100_000_000, amount_raised=50_000_000, end_date_secs=0
        )
        mock_fund_flow.get_escrow_summary.return_value = EscrowSummary(
            campaign_id=1, total_held=50_000_000
        )

        with patch(f"{_CAMPAIGN}.console") as mock_console:
            await _escrow_async(1)

        assert "0.50000000" in _printed(mock_console)


# ============================================================================
# Tests financement
# ============================================================================


class TestContributionCommands:

    @pytest.mark.asyncio
    async def test_contribute_success(self, mock_container, mock_fund_flow):
        with patch(f"{_CONTRIB}.console") as mock_console:
            await _contribute_async(1, "0.5")

        mock_fund_flow.contribute_icp.assert_awaited_once()
        assert "Contribution confirmee" in _printed(mock_console)

    @pytest.mark.asyncio
    async def test_contribute_failure_exits(self, mock_container, mock_fund_flow):
        mock_fund_flow.contribute_icp.return_value = CallResult(err="campaign already ended")

        with patch(f"{_CONTRIB}.console") as mock_console:
            with pytest.raises(typer.Exit):
                await _contribute_async(1, "0.5")

        assert "Campaign has already ended" in _printed(mock_console)

    @pytest.mark.asyncio
    async def test_contribute_pending_after_confirmation_failure(
        self, mock_container, mock_fund_flow
    ):
        mock_fund_flow.confirm_payment.return_value = CallResult(err="unauthorized")

        with patch(f"{_CONTRIB}.console") as mock_console:
            with pytest.raises(typer.Exit):
                await _contribute_async(1, "0.5")

        assert "#42 reste en attente" in _printed(mock_console)

    @pytest.mark.asyncio
    async def test_contribute_invalid_amount(self, mock_container, mock_fund_flow):
        with patch(f"{_CONTRIB}.console") as mock_console:
            with pytest.raises(typer.Exit):
                await _contribute_async(1, "-2")

        mock_fund_flow.register_user.assert_not_awaited()
        assert "Montant invalide" in _printed(mock_console)

    @pytest.mark.asyncio
    async def test_contribute_above_configured_maximum(self, mock_container, mock_fund_flow):
        with patch(f"{_CONTRIB}.console"):
            with pytest.raises(typer.Exit):
                await _contribute_async(1, "10001")

        mock_fund_flow.register_user.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_contributions_empty(self, mock_container):
        with patch(f"{_CONTRIB}.console") as mock_console:
            await _contributions_async()

        assert "Aucune contribution" in _printed(mock_console)

    @pytest.mark.asyncio
    async def test_create_project(self, mock_container, mock_backend):
        draft = ProjectDraft(
            title="Solar Kiosk",
            description="Off-grid charging",
            funding_goal="10",
            legal_entity="Solar SARL",
            contact_info="team@solar.example",
            category="Environment",
        )

        with patch(f"{_CONTRIB}.console") as mock_console:
            await _create_project_async(draft)

        mock_backend.create_idea.assert_awaited_once()
        assert "campagne #3" in _printed(mock_console)

    @pytest.mark.asyncio
    async def test_create_project_missing_field(self, mock_container):
        draft = ProjectDraft(
            title="",
            description="d",
            funding_goal="10",
            legal_entity="l",
            contact_info="c",
            category="Arts",
        )

        with patch(f"{_CONTRIB}.console"):
            with pytest.raises(typer.Exit):
                await _create_project_async(draft)

    @pytest.mark.asyncio
    async def test_create_project_remote_failure(self, mock_container, mock_backend):
        mock_backend.create_idea.side_effect = CanisterRejectError("Canister trapped: out of cycles")
        draft = ProjectDraft(
            title="Solar Kiosk",
            description="Off-grid charging",
            funding_goal="10",
            legal_entity="Solar SARL",
            contact_info="team@solar.example",
            category="Environment",
        )

        with patch(f"{_CONTRIB}.console") as mock_console:
            with pytest.raises(typer.Exit) as exc_info:
                await _create_project_async(draft)

        assert exc_info.value.exit_code == 1
        assert "Creation impossible" in _printed(mock_console)
        assert "out of cycles" in _printed(mock_console)
        mock_backend.create_campaign.assert_not_awaited()


# ============================================================================
# Tests CliRunner
# ============================================================================


class TestMainApp:

    def test_version(self):
        from fundverse.main import app

        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "FundVerse v" in result.output

    def test_info(self):
        from fundverse.config import Settings
        from fundverse.main import app

        with patch("fundverse.main.get_config") as mock_get_config:
            mock_get_config.return_value = Settings(dfx_network="local")
            result = runner.invoke(app, ["info"])

        assert result.exit_code == 0
        assert "http://localhost:4943" in result.output

    def test_contribute_rejects_non_integer_campaign(self):
        from fundverse.main import app

        result = runner.invoke(app, ["contribute", "abc", "1"])

        assert result.exit_code != 0
