"""
Interfaces ports pour l'authentification.

Le fournisseur d'identité est une boîte noire : une connexion par
redirection qui finit par appeler un callback de succès ou d'erreur.
Le port IAuthClient expose ce contrat à callbacks tel quel ; son
adaptation en une seule opération awaitable est faite par le
SessionManager.
"""

from abc import ABC, abstractmethod
from typing import Callable


class IIdentity(ABC):
    """Credential opaque permettant d'autoriser les appels aux canisters."""

    @property
    @abstractmethod
    def principal(self) -> str:
        """Retourne le principal (texte) associé au credential."""
        ...

    @abstractmethod
    def auth_headers(self) -> dict[str, str]:
        """Retourne les headers HTTP autorisant un appel au nom du principal."""
        ...


class IAuthClient(ABC):
    """
    Client du fournisseur d'identité.

    Les implémentations conservent un seul credential à la fois et le
    restaurent au démarrage si un credential non expiré a été stocké.
    """

    @abstractmethod
    def login(
        self,
        identity_provider: str,
        max_time_to_live: int,
        on_success: Callable[[], None],
        on_error: Callable[[str], None],
    ) -> None:
        """
        Démarre l'échange de connexion sans attendre sa fin.

        Args:
            identity_provider: URL du fournisseur d'identité
            max_time_to_live: Durée de validité maximale demandée (nanosecondes)
            on_success: Appelé une fois le credential stocké
            on_error: Appelé avec un message si le fournisseur échoue
        """
        ...

    @abstractmethod
    def is_authenticated(self) -> bool:
        """Indique si un credential valide (non expiré) est stocké."""
        ...

    @abstractmethod
    def get_identity(self) -> IIdentity:
        """Retourne le credential stocké (lève une erreur s'il n'y en a pas)."""
        ...

    @abstractmethod
    async def logout(self) -> None:
        """Supprime le credential stocké."""
        ...
