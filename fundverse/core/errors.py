"""
Hiérarchie d'exceptions du client FundVerse.

Deux familles coexistent :
- TypedError : échec classifié, remonté tel quel à l'interface utilisateur
  sous forme d'une paire stable (kind, message). Seul le classifieur
  (services/error_classifier.py) en construit.
- Exceptions techniques (session, configuration, validation) levées avant
  ou autour des appels distants.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Ensemble fermé des catégories d'erreur présentées à l'utilisateur."""

    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    NOT_AUTHORIZED = "NOT_AUTHORIZED"
    CAMPAIGN_NOT_FOUND = "CAMPAIGN_NOT_FOUND"
    CAMPAIGN_ENDED = "CAMPAIGN_ENDED"
    UNKNOWN = "UNKNOWN"


class TypedError(Exception):
    """
    Échec classifié avec une catégorie stable.

    Attributes:
        kind: Catégorie de l'erreur
        message: Message destiné à l'utilisateur
    """

    def __init__(self, kind: ErrorKind, message: str) -> None:
        self.kind = kind
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"TypedError(kind={self.kind.value}, message={self.message!r})"


class FundVerseError(Exception):
    """Classe de base des erreurs techniques non classifiées."""


class ConfigurationError(FundVerseError):
    """Paramètre obligatoire absent (ex: identifiant de canister)."""


class NotAuthenticatedError(FundVerseError):
    """Aucun credential valide n'est disponible."""

    def __init__(self, message: str = "Not authenticated. Call login() first.") -> None:
        super().__init__(message)


class SessionInvalidatedError(FundVerseError):
    """Un client a été utilisé après l'invalidation de sa session."""

    def __init__(self, message: str = "Session was invalidated; recreate the client.") -> None:
        super().__init__(message)


class LoginError(FundVerseError):
    """Le fournisseur d'identité a signalé un échec de connexion."""


class InvalidAmountError(FundVerseError, ValueError):
    """Montant de contribution rejeté avant tout appel distant."""


class ContributionInProgressError(FundVerseError):
    """Une contribution est déjà en cours pour cette intention."""


class CanisterRejectError(FundVerseError):
    """
    Le replica a rejeté l'appel (trap du canister, méthode inconnue...).

    Attributes:
        reject_code: Code de rejet renvoyé par le replica, si présent
    """

    def __init__(self, message: str, reject_code: int | None = None) -> None:
        self.reject_code = reject_code
        super().__init__(message)
