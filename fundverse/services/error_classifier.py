"""
Classification des échecs distants en erreurs typées.

Point unique de correspondance entre les messages textuels renvoyés par
les canisters (ou les exceptions de transport) et les catégories
ErrorKind. La recherche est sensible à la casse, par sous-chaîne, et la
première règle qui correspond l'emporte.
"""

from typing import Any

from fundverse.core.errors import ErrorKind, TypedError

# (motifs, categorie, message utilisateur) - l'ordre compte
_RULES: tuple[tuple[tuple[str, ...], ErrorKind, str], ...] = (
    (("insufficient funds",), ErrorKind.INSUFFICIENT_FUNDS, "Insufficient funds for this operation"),
    (("not authorized", "unauthorized"), ErrorKind.NOT_AUTHORIZED, "You are not authorized to perform this action"),
    (("campaign not found",), ErrorKind.CAMPAIGN_NOT_FOUND, "Campaign not found"),
    (("campaign already ended",), ErrorKind.CAMPAIGN_ENDED, "Campaign has already ended"),
)

# Echecs d'enregistrement equivalents a un succes (utilisateur deja connu)
_ALREADY_REGISTERED_PATTERNS = ("already registered", "already exists")

UNKNOWN_ERROR_MESSAGE = "Unknown error"


def _extract_message(raw: Any) -> str:
    """Retourne le texte d'un échec quelle que soit sa forme."""
    if raw is None:
        return UNKNOWN_ERROR_MESSAGE
    if isinstance(raw, str):
        return raw or UNKNOWN_ERROR_MESSAGE
    if isinstance(raw, dict) and "Err" in raw:
        return str(raw["Err"]) or UNKNOWN_ERROR_MESSAGE
    if isinstance(raw, BaseException):
        return str(raw) or type(raw).__name__
    return str(raw) or UNKNOWN_ERROR_MESSAGE


def classify(raw: Any) -> TypedError:
    """
    Classe un échec dans l'ensemble fermé ErrorKind.

    Args:
        raw: Exception, message texte, payload {"Err": ...} ou TypedError

    Returns:
        TypedError correspondant. Un TypedError en entrée est renvoyé
        tel quel (la même instance).
    """
    if isinstance(raw, TypedError):
        return raw

    message = _extract_message(raw)
    for patterns, kind, user_message in _RULES:
        if any(pattern in message for pattern in patterns):
            return TypedError(kind, user_message)
    return TypedError(ErrorKind.UNKNOWN, message)


def is_already_registered(raw: Any) -> bool:
    """
    Indique si un échec d'enregistrement signifie "utilisateur déjà connu".

    Seul ce cas peut être absorbé par le parcours de contribution ; tout
    autre échec d'enregistrement doit être classifié et remonté.
    """
    if isinstance(raw, TypedError):
        return False
    message = _extract_message(raw)
    return any(pattern in message for pattern in _ALREADY_REGISTERED_PATTERNS)
