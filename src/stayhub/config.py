"""Application settings loaded from the environment.

DATABASE_URL and the OIDC_* variables are read where they are used
(infra.db and api.auth); this module covers app wiring only.
"""

import os
from dataclasses import dataclass
from typing import Literal

StoreBackend = Literal["postgres", "memory"]

_BACKENDS = ("postgres", "memory")


@dataclass(frozen=True)
class Settings:
    store_backend: StoreBackend
    host_group: str


def load_settings() -> Settings:
    """Read STORE_BACKEND (default postgres) and HOST_GROUP (default hosts).

    Raises:
        RuntimeError: If STORE_BACKEND names an unknown backend.
    """
    backend = os.environ.get("STORE_BACKEND", "postgres").strip().lower()
    if backend not in _BACKENDS:
        raise RuntimeError(f"STORE_BACKEND must be one of {_BACKENDS}, got {backend!r}")

    return Settings(
        store_backend=backend,  # type: ignore[arg-type]
        host_group=os.environ.get("HOST_GROUP", "hosts").strip() or "hosts",
    )
