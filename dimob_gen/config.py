"""Configuration management for dimob-gen.

Every setting has a default suitable for a local run; ``from_env`` overlays
environment variables on top of those defaults.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dimob_gen.exceptions import ConfigurationError

LOG_FORMATS = ("standard", "json")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes")


def _env_int(name: str, default: int | None) -> int | None:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from None


@dataclass
class PostgresConfig:
    """Connection settings of the read-only PostgreSQL data provider."""

    host: str = "localhost"
    port: int = 5432
    database: str = "imobiliaria"
    user: str = "postgres"
    password: str = "postgres"
    connect_timeout: int = 10

    @property
    def connection_string(self) -> str:
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class OutputConfig:
    """Where declaration files and JSON reports are written."""

    output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False
    write_report: bool = True


@dataclass
class DeclarationConfig:
    """Declaration generation settings.

    ``company_id`` identifies the declarant whose profile and late-payment
    policy are used; it has no default and must come from the environment or
    the command line.
    """

    company_id: str | None = None
    layout_version: str = "v1"
    encode_projected: bool = False
    max_workers: int = 4


@dataclass
class DimobGenConfig:
    """Main configuration for dimob-gen."""

    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    declaration: DeclarationConfig = field(default_factory=DeclarationConfig)
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "DimobGenConfig":
        """Create config from environment variables.

        Raises
        ------
        ConfigurationError
            If a numeric or enumerated variable holds an invalid value.
        """
        defaults = cls()
        config = cls(
            postgres=PostgresConfig(
                host=os.getenv("POSTGRES_HOST", defaults.postgres.host),
                port=_env_int("POSTGRES_PORT", defaults.postgres.port),
                database=os.getenv("POSTGRES_DB", defaults.postgres.database),
                user=os.getenv("POSTGRES_USER", defaults.postgres.user),
                password=os.getenv("POSTGRES_PASSWORD", defaults.postgres.password),
                connect_timeout=_env_int("POSTGRES_CONNECT_TIMEOUT", defaults.postgres.connect_timeout),
            ),
            output=OutputConfig(
                output_dir=Path(os.getenv("OUTPUT_DIR", str(defaults.output.output_dir))),
                pretty_json=_env_bool("PRETTY_JSON", defaults.output.pretty_json),
                write_report=_env_bool("WRITE_REPORT", defaults.output.write_report),
            ),
            declaration=DeclarationConfig(
                company_id=os.getenv("DIMOB_COMPANY_ID") or None,
                layout_version=os.getenv("DIMOB_LAYOUT_VERSION", defaults.declaration.layout_version),
                encode_projected=_env_bool("DIMOB_ENCODE_PROJECTED", defaults.declaration.encode_projected),
                max_workers=_env_int("DIMOB_MAX_WORKERS", defaults.declaration.max_workers),
            ),
            seed=_env_int("SEED", None),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level),
            log_format=os.getenv("LOG_FORMAT", defaults.log_format),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Check settings that would otherwise fail deep inside a run."""
        if self.declaration.max_workers < 1:
            raise ConfigurationError(f"max_workers must be at least 1, got {self.declaration.max_workers}")
        if self.log_format not in LOG_FORMATS:
            raise ConfigurationError(f"Unknown log format {self.log_format!r}; expected one of {LOG_FORMATS}")
