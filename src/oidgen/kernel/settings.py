"""
Generator settings - the knobs that shape freshly generated identifiers

Everything here has a sensible production default; the overrides exist so
tests and multi-tenant hosts can pin the machine fingerprint, start the
counter somewhere other than zero, or force a process-identity strategy.
"""

import os
import re
from typing import Literal

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "OIDGEN_"


class GeneratorSettings(BaseModel):
    """
    Configuration for a Generator

    The machine fingerprint normally comes from hashing the host name.
    Supplying ``machine_fingerprint`` directly bypasses the hash entirely.
    """

    hostname: str | None = Field(
        default=None,
        description="Host name to fingerprint (defaults to socket.gethostname())",
    )

    machine_fingerprint: str | None = Field(
        default=None,
        description="Explicit 3-byte machine fingerprint as 6 hex characters",
    )

    initial_counter: int = Field(
        default=0,
        ge=0,
        le=0xFFFFFF,
        description="Counter value before the first generation (first id uses +1)",
    )

    process_identity: Literal["auto", "os", "hashed"] = Field(
        default="auto",
        description="Process identity strategy: OS pid, hashed task identity, or auto-detect",
    )

    @field_validator("initial_counter", mode="before")
    @classmethod
    def _parse_counter(cls, value: object) -> object:
        # env values arrive as strings, possibly hex ("0xFFFFFE")
        if isinstance(value, str):
            try:
                return int(value, 0)
            except ValueError:
                raise ValueError(f"initial_counter must be an integer, got '{value}'") from None
        return value

    @field_validator("machine_fingerprint")
    @classmethod
    def _check_fingerprint(cls, value: str | None) -> str | None:
        if value is not None and not re.fullmatch(r"[0-9a-fA-F]{6}", value):
            raise ValueError(
                f"machine_fingerprint must be 6 hex characters, got '{value}'"
            )
        return value.lower() if value is not None else None

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "GeneratorSettings":
        """
        Build settings from OIDGEN_* environment variables

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Validated settings; unset variables fall back to defaults
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        for name in ("hostname", "machine_fingerprint", "process_identity"):
            raw = env.get(f"{ENV_PREFIX}{name.upper()}")
            if raw:
                values[name] = raw
        counter = env.get(f"{ENV_PREFIX}INITIAL_COUNTER")
        if counter:
            values["initial_counter"] = counter
        return cls(**values)
