"""
Commandes CLI de financement : contribute, contributions, create-project.
"""

import asyncio
from typing import Annotated

import typer
from rich.table import Table

from fundverse.adapters.cli.helpers import console, open_clients, suppress_loguru, with_container
from fundverse.core.errors import ContributionInProgressError, InvalidAmountError, TypedError
from fundverse.core.value_objects.amount import format_e8s, format_icp
from fundverse.services.campaign_views import truncate_address
from fundverse.services.contribution import WorkflowState, run_contribution
from fundverse.services.project_creation import (
    CATEGORIES,
    ProjectCreationService,
    ProjectDraft,
)

_STEP_LABELS = {
    WorkflowState.REGISTERING: "Enregistrement de l'utilisateur...",
    WorkflowState.CONTRIBUTING: "Creation de la contribution...",
    WorkflowState.CONFIRMING: "Confirmation du paiement...",
}


def _show_step(state: WorkflowState) -> None:
    label = _STEP_LABELS.get(state)
    if label:
        console.print(f"[dim]{label}[/dim]")


def contribute(
    campaign_id: Annotated[int, typer.Argument(help="Identifiant de la campagne")],
    amount: Annotated[str, typer.Argument(help="Montant en ICP (ex: 0.5)")],
) -> None:
    """Contribue a une campagne (enregistrement, contribution, confirmation)."""
    asyncio.run(_contribute_async(campaign_id, amount))


@with_container()
async def _contribute_async(container, campaign_id: int, amount: str) -> None:
    """Implementation async de la commande contribute."""
    settings = container.config()
    backend, fund_flow = await open_clients(container)
    gate = container.contribution_gate()

    try:
        outcome = await gate.submit(
            campaign_id,
            lambda: run_contribution(
                backend,
                fund_flow,
                campaign_id,
                amount,
                max_amount=settings.max_contribution_icp,
                on_transition=_show_step,
            ),
        )
    except InvalidAmountError as e:
        console.print(f"[red]Montant invalide[/red] : {e}")
        raise typer.Exit(code=1) from e
    except ContributionInProgressError as e:
        console.print(f"[yellow]{e}[/yellow]")
        raise typer.Exit(code=1) from e

    if outcome.succeeded:
        console.print(
            f"[green]Contribution confirmee[/green] : {format_icp(amount)} "
            f"sur la campagne {campaign_id} (contribution #{outcome.contribution_id})"
        )
        return

    console.print(f"[red]Echec ({outcome.failed_step.value})[/red] : {outcome.error.message}")
    if outcome.contribution_id is not None:
        console.print(
            f"[dim]La contribution #{outcome.contribution_id} reste en attente.[/dim]"
        )
    raise typer.Exit(code=1)


def contributions() -> None:
    """Liste les contributions de l'utilisateur connecte."""
    asyncio.run(_contributions_async())


@with_container()
async def _contributions_async(container) -> None:
    """Implementation async de la commande contributions."""
    _, fund_flow = await open_clients(container)
    with suppress_loguru():
        items = await fund_flow.get_contributions_by_user()

    if not items:
        console.print("[yellow]Aucune contribution.[/yellow]")
        return

    table = Table(title="Mes contributions", show_header=True)
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Campagne", justify="right")
    table.add_column("Montant (ICP)", justify="right")
    table.add_column("Statut")
    table.add_column("Contributeur", style="dim")
    for contribution in items:
        table.add_row(
            str(contribution.id),
            str(contribution.campaign_id),
            format_e8s(contribution.amount),
            contribution.status.value,
            truncate_address(contribution.backer),
        )
    console.print(table)


def create_project(
    title: Annotated[str, typer.Option("--title", prompt="Titre")],
    description: Annotated[str, typer.Option("--description", prompt="Description")],
    goal: Annotated[str, typer.Option("--goal", prompt="Objectif (ICP)")],
    legal_entity: Annotated[str, typer.Option("--legal-entity", prompt="Entite legale")],
    contact_info: Annotated[str, typer.Option("--contact", prompt="Contact")],
    category: Annotated[
        str,
        typer.Option("--category", prompt="Categorie", help=", ".join(CATEGORIES)),
    ] = "Technology",
    business_registration: Annotated[
        int, typer.Option("--business-registration", help="Numero d'enregistrement (0-255)")
    ] = 0,
) -> None:
    """Cree un projet : une idee puis sa campagne de 30 jours."""
    draft = ProjectDraft(
        title=title,
        description=description,
        funding_goal=goal,
        legal_entity=legal_entity,
        contact_info=contact_info,
        category=category,
        business_registration=business_registration,
    )
    asyncio.run(_create_project_async(draft))


@with_container()
async def _create_project_async(container, draft: ProjectDraft) -> None:
    """Implementation async de la commande create-project."""
    backend, _ = await open_clients(container)
    service = ProjectCreationService(backend)
    try:
        created = await service.create_project(draft)
    except (ValueError, TypedError) as e:
        console.print(f"[red]Creation impossible[/red] : {e}")
        raise typer.Exit(code=1) from e

    console.print(
        f"[green]Projet cree[/green] : idee #{created.idea_id}, "
        f"campagne #{created.campaign_id} ({format_e8s(created.goal_e8s)} ICP)"
    )
