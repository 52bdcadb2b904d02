"""Runtime configuration loaded from the environment (prefix ``ZKBOND_``)."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the prover boundary and wallet defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ZKBOND_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    circuit_dir: Path = Field(default=Path("circuits/joinsplit"), description="Noir project directory")
    circuit_name: str = Field(default="joinsplit", description="Compiled circuit artifact name")
    witness_name: str = Field(default="joinsplit", description="Witness file name for nargo execute")
    nargo_binary: str = Field(default="nargo")
    bb_binary: str = Field(default="bb")
    oracle_hash: str = Field(default="keccak", description="bb --oracle_hash, keccak for EVM verifiers")
    prover_timeout: int = Field(default=600, gt=0, description="Seconds per toolchain step")
    asset_id: int = Field(default=1, ge=0, description="Asset id of newly issued bonds")
    log_level: str = Field(default="INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get or create settings instance."""
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Apply the configured level to the package logger."""
    settings = settings or get_settings()
    logging.getLogger("zkbond").setLevel(settings.log_level.upper())
