"""
Configuration du logging de l'application via loguru.

Trois sorties :
- console (stderr) : lisible, colorée, suffixée par la campagne, la contribution
  ou le principal concernés quand l'enregistrement les porte
- fichier : JSON sérialisé avec rotation, toutes les traces
- journal des contributions : JSON restreint aux enregistrements liés à une
  campagne ou une contribution, pour retrouver après coup quelle étape a échoué
"""

import sys
from pathlib import Path
from typing import Any, Optional

from loguru import logger

# Champs "extra" mis en avant sur la console, dans cet ordre
CONTEXT_FIELDS = ("campaign_id", "contribution_id", "principal")

_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
    "<level>{message}</level>"
)


def console_format(record: dict[str, Any]) -> str:
    """Format console : message puis contexte FundVerse présent dans `extra`."""
    fields = [key for key in CONTEXT_FIELDS if key in record["extra"]]
    context = " ".join(f"{key}={{extra[{key}]}}" for key in fields)
    suffix = f" <magenta>[{context}]</magenta>" if context else ""
    return _CONSOLE_FORMAT + suffix + "\n{exception}"


def has_contribution_context(record: dict[str, Any]) -> bool:
    """Filtre du journal des contributions."""
    extra = record["extra"]
    return "campaign_id" in extra or "contribution_id" in extra


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/fundverse.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
    contributions_file: Optional[Path] = None,
) -> None:
    """Configure les handlers loguru de l'application.

    Args :
        log_level : Niveau minimum pour la console (DEBUG, INFO, WARNING, ERROR)
        log_file : Chemin du fichier de log JSON
        rotation_size : Taille maximale avant rotation (ex: "10 MB")
        retention_count : Nombre de fichiers rotatifs conservés
        contributions_file : Journal des contributions, par défaut
            `contributions.log` à côté de `log_file`
    """
    logger.remove()

    logger.add(sys.stderr, level=log_level, format=console_format, colorize=True)

    # Le fichier capture tout, y compris les appels canister journalisés en DEBUG
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,
    )

    if contributions_file is None:
        contributions_file = log_file.with_name("contributions.log")
    contributions_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        contributions_file,
        level="DEBUG",
        format="{message}",
        filter=has_contribution_context,
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,
    )

    logger.debug(
        "Logging configured",
        log_file=str(log_file),
        contributions_file=str(contributions_file),
        level=log_level,
    )
