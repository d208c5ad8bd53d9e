"""
Configuration des endpoints réseau.

Objet valeur immutable dérivé une seule fois des signaux d'environnement
(mode réseau dfx, nom d'hôte) par Settings.endpoint_config().
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class EndpointConfig:
    """
    Adresses réseau utilisées pendant toute la durée du processus.

    Attributs :
        is_local : True pour un replica de développement local
        remote_host : URL du replica (local ou mainnet)
        identity_provider_url : URL du fournisseur d'identité
    """

    is_local: bool
    remote_host: str
    identity_provider_url: str
