"""Sous-package CLI commands - re-exporte les commandes publiques."""

from fundverse.adapters.cli.commands.session_commands import (
    login,
    logout,
    whoami,
)
from fundverse.adapters.cli.commands.campaign_commands import (
    campaigns,
    escrow,
    stats,
)
from fundverse.adapters.cli.commands.contribution_commands import (
    contribute,
    contributions,
    create_project,
)

__all__ = [
    # session
    "login",
    "logout",
    "whoami",
    # consultation
    "campaigns",
    "escrow",
    "stats",
    # financement
    "contribute",
    "contributions",
    "create_project",
]
