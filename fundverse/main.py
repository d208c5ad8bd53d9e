"""
Point d'entrée CLI de FundVerse.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

from typing import Annotated

import typer
from loguru import logger

from . import __version__
from .adapters.cli.commands import (
    campaigns,
    contribute,
    contributions,
    create_project,
    escrow,
    login,
    logout,
    stats,
    whoami,
)
from .config import Settings
from .container import Container
from .logging_config import configure_logging

app = typer.Typer(
    name="fundverse",
    help="Client de la plateforme de financement participatif FundVerse",
)
container = Container()

# Etat global pour les options de verbosite
state = {"verbose": 0, "quiet": False}


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Augmenter la verbosite (-v, -vv)"
        ),
    ] = 0,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Mode silencieux (erreurs uniquement)"),
    ] = False,
) -> None:
    """FundVerse - Financement participatif sur Internet Computer."""
    if quiet:
        state["quiet"] = True
    else:
        state["verbose"] = verbose


# Session
app.command()(login)
app.command()(logout)
app.command()(whoami)

# Consultation
app.command()(campaigns)
app.command()(stats)
app.command()(escrow)

# Financement
app.command()(contribute)
app.command()(contributions)
app.command(name="create-project")(create_project)


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    endpoint = config.endpoint_config()
    logger.info("Configuration FundVerse")
    typer.echo(f"Réseau : {'local' if endpoint.is_local else 'mainnet'}")
    typer.echo(f"Replica : {endpoint.remote_host}")
    typer.echo(f"Fournisseur d'identité : {endpoint.identity_provider_url}")
    typer.echo(f"Canister backend : {config.backend_canister_id or 'non configuré'}")
    typer.echo(f"Canister Fund_Flow : {config.fund_flow_canister_id or 'non configuré'}")
    typer.echo(f"Credential : {config.credential_dir}")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"FundVerse v{__version__}")


def main() -> None:
    """Point d'entrée de l'application."""
    # Charge la configuration et configure le logging
    settings = container.config()
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )

    logger.info("Démarrage de FundVerse", version=__version__)

    # Lance la CLI
    app()


if __name__ == "__main__":
    main()
