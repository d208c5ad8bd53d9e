"""
Dérivation des vues de campagne.

Fonctions pures, synchrones et sans effet de bord qui transforment les
campagnes brutes en informations d'affichage : progression, jours
restants, statut actif et financé, statistiques du tableau de bord.
Toutes sont totales pour des entiers u64 positifs.
"""

import math
import time
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Optional

from fundverse.core.entities import Campaign

SECONDS_PER_DAY = 24 * 60 * 60


def progress_percent(amount_raised: int, goal: int) -> float:
    """Pourcentage de l'objectif atteint, plafonné à 100 (0 si goal == 0)."""
    if goal == 0:
        return 0.0
    return min(amount_raised / goal * 100, 100.0)


def days_left(end_date: int, now: Optional[float] = None) -> int:
    """
    Nombre de jours restants avant la fin, arrondi au supérieur.

    Une campagne qui se termine dans 1 seconde a encore 1 jour ; une
    campagne terminée renvoie une valeur nulle ou négative.

    Args:
        end_date: Date de fin (secondes epoch)
        now: Instant de référence (secondes epoch), time.time() par défaut
    """
    if now is None:
        now = time.time()
    # Division entiere : math.ceil sur des flottants perd en precision pour u64
    return -((math.floor(now) - end_date) // SECONDS_PER_DAY)


def is_active(remaining_days: int) -> bool:
    return remaining_days > 0


def is_funded(amount_raised: int, goal: int) -> bool:
    return amount_raised >= goal


@dataclass(frozen=True)
class CampaignView:
    """
    Campagne enrichie des informations calculées (jamais persistée).

    Attributes:
        campaign: Campagne source
        progress_percent: Progression en pourcentage (0-100)
        days_left: Jours restants (<= 0 si terminée)
        is_active: True si days_left > 0
        is_funded: True si l'objectif est atteint
    """

    campaign: Campaign
    progress_percent: float
    days_left: int
    is_active: bool
    is_funded: bool


def derive_view(campaign: Campaign, now: Optional[float] = None) -> CampaignView:
    """Calcule la vue d'une campagne à l'instant donné."""
    remaining = days_left(campaign.end_date, now)
    return CampaignView(
        campaign=campaign,
        progress_percent=progress_percent(campaign.amount_raised, campaign.goal),
        days_left=remaining,
        is_active=is_active(remaining),
        is_funded=is_funded(campaign.amount_raised, campaign.goal),
    )


@dataclass(frozen=True)
class CategoryStats:
    """Agrégat d'une catégorie : nombre de campagnes et montant collecté."""

    category: str
    count: int
    raised: int


@dataclass(frozen=True)
class DashboardStats:
    """Statistiques globales affichées par le tableau de bord."""

    total_campaigns: int = 0
    active_campaigns: int = 0
    funded_campaigns: int = 0
    total_goal: int = 0
    total_raised: int = 0
    categories: tuple[CategoryStats, ...] = field(default_factory=tuple)


def summarize(campaigns: Iterable[Campaign], now: Optional[float] = None) -> DashboardStats:
    """
    Agrège les campagnes pour le tableau de bord.

    Les catégories sont restituées dans l'ordre de première apparition.
    """
    if now is None:
        now = time.time()
    views = [derive_view(c, now) for c in campaigns]

    counts: dict[str, int] = defaultdict(int)
    raised: dict[str, int] = defaultdict(int)
    for view in views:
        counts[view.campaign.category] += 1
        raised[view.campaign.category] += view.campaign.amount_raised

    return DashboardStats(
        total_campaigns=len(views),
        active_campaigns=sum(1 for v in views if v.is_active),
        funded_campaigns=sum(1 for v in views if v.is_funded),
        total_goal=sum(v.campaign.goal for v in views),
        total_raised=sum(v.campaign.amount_raised for v in views),
        categories=tuple(
            CategoryStats(category=name, count=counts[name], raised=raised[name])
            for name in counts
        ),
    )


def format_principal(principal: str) -> str:
    """Abrège un principal : 6 premiers et 6 derniers caractères au-delà de 12."""
    if len(principal) <= 12:
        return principal
    return f"{principal[:6]}...{principal[-6:]}"


def truncate_address(address: str, length: int = 8) -> str:
    if len(address) <= length * 2:
        return address
    return f"{address[:length]}...{address[-length:]}"
