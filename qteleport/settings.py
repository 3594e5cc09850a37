# qteleport/settings.py
from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime settings for the qteleport simulators.
    """

    # --- Backend ---
    BACKEND: str = "statevector"  # "statevector" | "stim"

    # --- Simulation limits ---
    MAX_QUBITS: int = 24
    NORM_TOLERANCE: float = 1e-9

    # --- Reproducibility ---
    SEED: int | None = None

    # --- Logging ---
    LOG_LEVEL: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="QTP_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("MAX_QUBITS")
    @classmethod
    def _positive_cap(cls, v: int) -> int:
        if v < 1:
            raise ValueError("MAX_QUBITS must be at least 1")
        return v

    @field_validator("NORM_TOLERANCE")
    @classmethod
    def _positive_tolerance(cls, v: float) -> float:
        if not 0.0 < v < 1.0:
            raise ValueError("NORM_TOLERANCE must lie in (0, 1)")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
