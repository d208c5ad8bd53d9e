"""
Commandes CLI de consultation : campagnes, statistiques et sequestre.
"""

import asyncio
import time
from typing import Annotated, Optional

import typer
from rich.table import Table

from fundverse.adapters.cli.helpers import console, open_clients, suppress_loguru, with_container
from fundverse.core.entities import CampaignStatus
from fundverse.core.value_objects.amount import format_e8s
from fundverse.services.campaign_views import derive_view, summarize


def campaigns(
    status: Annotated[
        Optional[CampaignStatus],
        typer.Option("--status", "-s", help="Filtrer par statut (Active, Ended)"),
    ] = None,
) -> None:
    """Liste les campagnes avec leur progression."""
    asyncio.run(_campaigns_async(status))


@with_container()
async def _campaigns_async(container, status: Optional[CampaignStatus]) -> None:
    """Implementation async de la commande campaigns."""
    backend, _ = await open_clients(container)
    with suppress_loguru():
        if status is None:
            items = await backend.get_campaign_cards()
        else:
            items = await backend.get_campaign_cards_by_status(status)

    if not items:
        console.print("[yellow]Aucune campagne.[/yellow]")
        return

    now = time.time()
    table = Table(title="Campagnes", show_header=True)
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Titre")
    table.add_column("Categorie")
    table.add_column("Collecte (ICP)", justify="right")
    table.add_column("Objectif (ICP)", justify="right")
    table.add_column("Progression", justify="right")
    table.add_column("Jours restants", justify="right")

    for campaign in items:
        view = derive_view(campaign, now)
        progress_style = "green" if view.is_funded else "white"
        table.add_row(
            str(campaign.id),
            campaign.title,
            campaign.category,
            format_e8s(campaign.amount_raised),
            format_e8s(campaign.goal),
            f"[{progress_style}]{view.progress_percent:.1f}%[/{progress_style}]",
            str(view.days_left) if view.is_active else "[dim]terminee[/dim]",
        )
    console.print(table)


def stats() -> None:
    """Affiche les statistiques globales du tableau de bord."""
    asyncio.run(_stats_async())


@with_container()
async def _stats_async(container) -> None:
    """Implementation async de la commande stats."""
    backend, _ = await open_clients(container)
    with suppress_loguru():
        items = await backend.get_campaign_cards()
    summary = summarize(items)

    console.print("\n[bold]Tableau de bord[/bold]\n")
    console.print(f"  Campagnes : {summary.total_campaigns}")
    console.print(f"  Actives : [green]{summary.active_campaigns}[/green]")
    console.print(f"  Financees : [cyan]{summary.funded_campaigns}[/cyan]")
    console.print(f"  Objectif cumule : {format_e8s(summary.total_goal)} ICP")
    console.print(f"  Collecte cumulee : {format_e8s(summary.total_raised)} ICP")

    if summary.categories:
        table = Table(title="Par categorie", show_header=True)
        table.add_column("Categorie", style="cyan")
        table.add_column("Campagnes", justify="right")
        table.add_column("Collecte (ICP)", justify="right")
        for category in summary.categories:
            table.add_row(category.category, str(category.count), format_e8s(category.raised))
        console.print(table)


def escrow(
    campaign_id: Annotated[int, typer.Argument(help="Identifiant de la campagne")],
) -> None:
    """Affiche le sequestre et les contributions d'une campagne."""
    asyncio.run(_escrow_async(campaign_id))


@with_container()
async def _escrow_async(container, campaign_id: int) -> None:
    """Implementation async de la commande escrow."""
    backend, fund_flow = await open_clients(container)
    with suppress_loguru():
        meta = await backend.get_campaign_meta(campaign_id)
        if meta is None:
            console.print(f"[red]Campagne introuvable[/red] : {campaign_id}")
            raise typer.Exit(code=1)
        summary = await fund_flow.get_escrow_summary(campaign_id)
        contributions = await fund_flow.get_campaign_contributions(campaign_id)

    console.print(f"\n[bold]Campagne {campaign_id}[/bold]")
    console.print(f"  Objectif : {format_e8s(meta.goal)} ICP")
    console.print(f"  Collecte : {format_e8s(meta.amount_raised)} ICP")
    console.print(f"  En attente : [yellow]{format_e8s(summary.total_pending)}[/yellow] ICP")
    console.print(f"  Sequestre : [cyan]{format_e8s(summary.total_held)}[/cyan] ICP")
    console.print(f"  Libere : [green]{format_e8s(summary.total_released)}[/green] ICP")
    console.print(f"  Rembourse : {format_e8s(summary.total_refunded)} ICP")
    console.print(f"  Contributions : {len(contributions)}")
