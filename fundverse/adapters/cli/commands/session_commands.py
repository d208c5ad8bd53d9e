"""
Commandes CLI de session : login, logout, whoami.
"""

import asyncio

import typer

from fundverse.adapters.cli.helpers import console, with_container
from fundverse.core.errors import LoginError
from fundverse.services.campaign_views import format_principal
from fundverse.services.session_manager import connection_status


def login() -> None:
    """Connecte l'utilisateur via le fournisseur d'identite (navigateur)."""
    asyncio.run(_login_async())


@with_container()
async def _login_async(container) -> None:
    """Implementation async de la commande login."""
    manager = container.session_manager()
    if manager.is_authenticated():
        console.print(f"[green]Deja connecte[/green] : {manager.get_principal()}")
        return

    endpoint = container.endpoint()
    console.print(f"[cyan]Connexion via[/cyan] {endpoint.identity_provider_url}")
    console.print("[dim]Terminez la connexion dans le navigateur...[/dim]")
    try:
        await manager.login()
    except LoginError as e:
        console.print(f"[red]Echec de la connexion[/red] : {e}")
        raise typer.Exit(code=1) from e
    console.print(f"[green]Connecte[/green] : {manager.get_principal()}")


def logout() -> None:
    """Deconnecte l'utilisateur et supprime le credential stocke."""
    asyncio.run(_logout_async())


@with_container()
async def _logout_async(container) -> None:
    """Implementation async de la commande logout."""
    await container.session_manager().logout()
    console.print("[green]Deconnecte.[/green]")


def whoami() -> None:
    """Affiche l'etat de connexion et le principal courant."""
    asyncio.run(_whoami_async())


@with_container()
async def _whoami_async(container) -> None:
    """Implementation async de la commande whoami."""
    connected, principal = connection_status(container.session_manager())
    if not connected:
        console.print("[yellow]Non connecte.[/yellow] Lancez [bold]fundverse login[/bold].")
        return
    console.print(f"[green]Connecte[/green] : {format_principal(principal)}")
    console.print(f"[dim]{principal}[/dim]")
