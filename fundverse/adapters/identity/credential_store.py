"""
Stockage persistant du credential de connexion.

Le credential est conservé sur disque via diskcache pour survivre aux
redémarrages de l'application, avec une expiration alignée sur celle de
la délégation : une entrée expirée disparaît d'elle-même.

Les opérations sont synchrones : la vérification d'authentification doit
rester non suspensive.
"""

import time
from typing import Optional

from diskcache import Cache

from fundverse.adapters.identity.delegation import DelegationIdentity


class CredentialStore:
    """
    Emplacement unique du credential courant.

    Attributes:
        CREDENTIAL_KEY: Clé de stockage (un seul credential à la fois)

    Example:
        store = CredentialStore(cache_dir="~/.cache/fundverse/identity")
        store.save(identity)
        identity = store.load()
    """

    CREDENTIAL_KEY = "identity:delegation"

    def __init__(self, cache_dir: str = ".cache/identity") -> None:
        """
        Args:
            cache_dir: Répertoire du stockage (créé si inexistant)
        """
        self._cache = Cache(str(cache_dir))

    def save(self, identity: DelegationIdentity) -> None:
        """Remplace le credential stocké ; l'entrée expire avec la délégation."""
        ttl_seconds = max((identity.expiration_ns - time.time_ns()) / 1_000_000_000, 0)
        self._cache.set(self.CREDENTIAL_KEY, identity.to_dict(), expire=ttl_seconds)

    def load(self) -> Optional[DelegationIdentity]:
        """Retourne le credential stocké, ou None s'il est absent ou expiré."""
        data = self._cache.get(self.CREDENTIAL_KEY)
        if data is None:
            return None
        identity = DelegationIdentity.from_dict(data)
        if identity.is_expired():
            return None
        return identity

    def clear(self) -> None:
        self._cache.delete(self.CREDENTIAL_KEY)

    def close(self) -> None:
        """Ferme la connexion au stockage (à appeler à la fin)."""
        self._cache.close()
