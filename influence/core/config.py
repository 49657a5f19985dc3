"""
configuration for influence.
all settings in one place, environment overrides via from_env().
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional, Mapping

from dotenv import load_dotenv, find_dotenv


DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173"
]


def normalize_origin(origin: Optional[str]) -> str:
    """strip whitespace and trailing slash."""
    origin = (origin or "").strip()
    if origin.endswith("/"):
        origin = origin[:-1]
    return origin


@dataclass
class ProviderConfig:
    """openalex settings."""
    base_url: str = "https://api.openalex.org/works"
    mailto: str = ""                      # polite pool contact, optional
    user_agent: str = "InfluenceEngine/1.0"
    timeout: float = 30.0
    batch_size: int = 40                  # ids per filter request


@dataclass
class ExpansionConfig:
    """graph expansion bounds."""
    default_depth: int = 2
    min_depth: int = 1
    max_depth: int = 3

    default_limit: int = 20
    min_limit: int = 1
    max_limit: int = 30

    # candidate fetch caps per parent
    max_reference_candidates: int = 200
    max_citer_candidates: int = 100
    citer_fetch_multiplier: int = 3


@dataclass
class ServerConfig:
    """http service settings."""
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))


@dataclass
class InfluenceConfig:
    """master configuration."""
    providers: ProviderConfig = field(default_factory=ProviderConfig)
    expansion: ExpansionConfig = field(default_factory=ExpansionConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    log_level: str = "INFO"

    @classmethod
    def default(cls) -> 'InfluenceConfig':
        """return default configuration."""
        return cls()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'InfluenceConfig':
        """build config from environment variables."""
        if environ is None:
            # .env in the working directory; real environment variables win
            load_dotenv(find_dotenv(usecwd=True))
        env = os.environ if environ is None else environ
        config = cls()

        providers = config.providers
        providers.base_url = env.get("OPENALEX_BASE_URL") or providers.base_url
        providers.mailto = env.get("OPENALEX_MAILTO") or providers.mailto
        providers.user_agent = env.get("OPENALEX_USER_AGENT") or providers.user_agent

        server = config.server
        server.host = env.get("HOST") or server.host
        port = env.get("PORT")
        if port:
            try:
                server.port = int(port)
            except ValueError as e:
                raise ValueError(f"PORT must be an integer, got {port!r}") from e

        origins = [
            normalize_origin(o) for o in (env.get("FRONTEND_ORIGINS") or "").split(",")
        ]
        origins = [o for o in origins if o]
        if origins:
            server.cors_origins = origins

        config.log_level = (env.get("LOG_LEVEL") or config.log_level).upper()
        return config
