"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe FUNDVERSE_,
et peut optionnellement être fournie via un fichier .env.

Les identifiants de canister sont optionnels au chargement - les commandes qui en ont
besoin échouent avec une ConfigurationError explicite s'ils sont absents.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.value_objects import EndpointConfig

# Trouver le fichier .env à la racine du projet (parent de fundverse/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"

_LOCAL_HOSTNAMES = frozenset({"localhost", "127.0.0.1"})


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe FUNDVERSE_.
    Exemple : FUNDVERSE_DFX_NETWORK=local

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="FUNDVERSE_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Réseau (signaux d'environnement : mode dfx et nom d'hôte de l'UI)
    dfx_network: str = Field(default="ic")
    hostname: Optional[str] = Field(default=None)
    local_host: str = Field(default="http://localhost:4943")
    ic_host: str = Field(default="https://ic0.app")
    local_identity_provider_url: str = Field(
        default="http://rdmx6-jaaaa-aaaaa-aaadq-cai.localhost:4943"
    )
    identity_provider_url: str = Field(default="https://identity.ic0.app")

    # Canisters
    backend_canister_id: Optional[str] = Field(default=None)
    fund_flow_canister_id: Optional[str] = Field(default=None)

    # Appels distants
    request_timeout: float = Field(default=30.0, gt=0)
    query_max_attempts: int = Field(default=5, ge=1)

    # Identité (credential persistant + callback de connexion)
    credential_dir: Path = Field(default=Path("~/.cache/fundverse/identity"))
    callback_host: str = Field(default="127.0.0.1")
    callback_port: int = Field(default=8765, ge=1, le=65535)

    # Contributions
    max_contribution_icp: float = Field(default=10000.0, gt=0)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/fundverse.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("credential_dir", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @property
    def is_local(self) -> bool:
        """Vrai en développement local (réseau dfx local ou UI servie en localhost)."""
        return self.dfx_network == "local" or self.hostname in _LOCAL_HOSTNAMES

    def endpoint_config(self) -> EndpointConfig:
        """Dérive la configuration réseau immutable à partir des signaux d'environnement."""
        if self.is_local:
            return EndpointConfig(
                is_local=True,
                remote_host=self.local_host,
                identity_provider_url=self.local_identity_provider_url,
            )
        return EndpointConfig(
            is_local=False,
            remote_host=self.ic_host,
            identity_provider_url=self.identity_provider_url,
        )
