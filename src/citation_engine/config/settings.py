"""Central configuration via Pydantic Settings. All values driven by env vars."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Resolution cache
    memory_cache_max_entries: int = 2048
    durable_cache_enabled: bool = True
    durable_cache_db_path: str = "data/resolution_cache.db"

    # Redirect resolution
    extra_redirect_hosts: str = ""  # comma-separated list of additional indirection hosts

    # Citation placement
    renumber_by_appearance: bool = True
    default_offset_unit: Literal["char", "byte"] = "char"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = {"env_file": ".env", "env_prefix": "CITE_"}

    @property
    def redirect_hosts(self) -> list[str]:
        return [h.strip().lower() for h in self.extra_redirect_hosts.split(",") if h.strip()]
