"""
Création d'un projet : une idée puis sa campagne.

Le canister backend sépare l'idée (description, porteur, catégorie) de la
campagne (objectif, date de fin). La création d'un projet enchaîne les
deux appels avec le même objectif et une date de fin à 30 jours.
"""

import time
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from fundverse.core.ports.canisters import IBackendService, as_nat
from fundverse.core.value_objects.amount import AmountInput, to_e8s
from fundverse.services.error_classifier import classify

CAMPAIGN_DURATION_SECONDS = 30 * 24 * 60 * 60

CATEGORIES = (
    "Technology",
    "Healthcare",
    "Education",
    "Environment",
    "Arts",
    "Sports",
    "Food",
    "Travel",
    "Finance",
    "Other",
)


@dataclass(frozen=True)
class ProjectDraft:
    """Saisie du formulaire de création de projet (objectif en ICP)."""

    title: str
    description: str
    funding_goal: AmountInput
    legal_entity: str
    contact_info: str
    category: str
    business_registration: int = 0

    def missing_fields(self) -> list[str]:
        return [
            name
            for name in ("title", "description", "legal_entity", "contact_info", "category")
            if not str(getattr(self, name)).strip()
        ]


@dataclass(frozen=True)
class CreatedProject:
    idea_id: int
    campaign_id: int
    goal_e8s: int
    end_date: int


class ProjectCreationService:
    """Enchaîne create_idea et create_campaign sur le canister backend."""

    def __init__(self, backend: IBackendService) -> None:
        self._backend = backend

    async def create_project(
        self, draft: ProjectDraft, now: Optional[float] = None
    ) -> CreatedProject:
        """
        Crée l'idée puis la campagne associée.

        Raises:
            ValueError: Champ obligatoire vide
            InvalidAmountError: Objectif invalide
            TypedError: Échec classifié de la création de l'idée ou de la campagne
        """
        missing = draft.missing_fields()
        if missing:
            raise ValueError(f"Missing required fields: {', '.join(missing)}")
        goal_e8s = to_e8s(draft.funding_goal)

        try:
            idea_id = await self._backend.create_idea(
                draft.title,
                draft.description,
                goal_e8s,
                draft.legal_entity,
                draft.contact_info,
                draft.category,
                draft.business_registration & 0xFF,
            )
        except Exception as e:
            logger.warning("Idea creation failed: {}", e)
            raise classify(e) from e

        if now is None:
            now = time.time()
        end_date = int(now) + CAMPAIGN_DURATION_SECONDS

        try:
            result = await self._backend.create_campaign(idea_id, goal_e8s, end_date)
        except Exception as e:
            logger.warning("Campaign creation failed: {}", e, idea_id=idea_id)
            raise classify(e) from e
        if not result.is_ok:
            logger.warning("Campaign creation failed: {}", result.err, idea_id=idea_id)
            raise classify(result.err)

        try:
            campaign_id = as_nat(result.ok)
        except ValueError as e:
            raise classify(f"Unexpected campaign id: {result.ok!r}") from e
        logger.info("Project created", idea_id=idea_id, campaign_id=campaign_id)
        return CreatedProject(
            idea_id=idea_id, campaign_id=campaign_id, goal_e8s=goal_e8s, end_date=end_date
        )
