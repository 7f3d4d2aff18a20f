from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RemapConfig:
    """Constants shared with the code generator that builds the synthetic unit."""

    file_suffix: str = "lib.rs"
    sentinel: str = "evcxr_variable_store"
    prologue_bytes: int = 20

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "RemapConfig":
        env = os.environ if environ is None else environ
        default = cls()
        return cls(
            file_suffix=env.get("DIAGMAP_FILE_SUFFIX", default.file_suffix),
            sentinel=env.get("DIAGMAP_SENTINEL", default.sentinel),
            prologue_bytes=int(env.get("DIAGMAP_PROLOGUE_BYTES", default.prologue_bytes)),
        )


DEFAULT_CONFIG = RemapConfig()
