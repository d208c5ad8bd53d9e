"""
Objet session : liaison entre un credential et son principal.

Contrairement aux autres objets valeur, Session est mutable sur un seul
champ : `authenticated` passe à False lors de l'invalidation, ce qui rend
inutilisables tous les clients qui en ont été dérivés. Seul le
SessionManager modifie ce champ.
"""

from dataclasses import dataclass, field

from fundverse.core.ports.identity import IIdentity


@dataclass(eq=False)
class Session:
    """
    Session authentifiée.

    Attributs :
        identity : Credential opaque, référencé et jamais copié
        principal : Identifiant stable de l'utilisateur
        authenticated : False une fois la session invalidée
    """

    identity: IIdentity = field(repr=False)
    principal: str
    authenticated: bool = True

    def invalidate(self) -> None:
        """Marque la session comme invalide (irréversible)."""
        self.authenticated = False
