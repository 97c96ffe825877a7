"""
Signer configuration.

Cost ceilings for keystore KDF parameters, an optional default chain id for
signing, and the package log level. Values can be loaded from
KEYSTORE_SIGNER_* environment variables.
"""

from __future__ import annotations
import os
from typing import Optional, Mapping, Dict, Any
from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "KEYSTORE_SIGNER_"


class SignerConfig(BaseModel):
    """
    Limits and defaults applied by the decryptor and signer.

    Keystores asking for more KDF work than the ceilings allow are
    rejected before any derivation starts.
    """
    max_scrypt_n: int = Field(default=2 ** 20, ge=2, description="Largest accepted scrypt N")
    max_scrypt_r: int = Field(default=32, ge=1, description="Largest accepted scrypt r")
    max_scrypt_p: int = Field(default=16, ge=1, description="Largest accepted scrypt p")
    max_pbkdf2_iterations: int = Field(
        default=10_000_000, ge=1, description="Largest accepted PBKDF2 iteration count"
    )
    default_chain_id: Optional[int] = Field(
        default=None, ge=1, lt=2 ** 64,
        description="Chain id applied when a transaction request carries none"
    )
    log_level: str = Field(default="WARNING", description="Package log level")

    model_config = {"frozen": True}

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> SignerConfig:
        """
        Build a configuration from KEYSTORE_SIGNER_* variables.

        Unset variables keep their defaults.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            SignerConfig instance
        """
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        for name in cls.model_fields:
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is not None and raw != "":
                values[name] = raw
        return cls.model_validate(values)


_default_config: Optional[SignerConfig] = None


def get_default_config() -> SignerConfig:
    """Get the process-wide default configuration, loading it from the environment once."""
    global _default_config
    if _default_config is None:
        _default_config = SignerConfig.from_env()
    return _default_config


__all__ = ["SignerConfig", "get_default_config", "ENV_PREFIX"]
