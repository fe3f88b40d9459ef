"""Application configuration from environment."""
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Server settings with game defaults."""

    model_config = ConfigDict(env_prefix="SHIPPO_")

    # Server
    debug: bool = False
    redis_url: str = "redis://localhost:6379/0"

    # Protocol
    protocol_version: str = "1.0"

    # Catalog: JSON file with subjects/objects/verbs/jackpots, compiled-in default if unset
    catalog_path: str | None = None

    # Fixed seed for the service RNG (demo/replay only); secure RNG if unset
    rng_seed: int | None = None

    # Session persistence (Redis TTLs)
    session_ttl_seconds: int = 3600  # idle sessions expire after 1 hour

    # Lock TTL for per-session command lock
    lock_ttl_seconds: int = 10  # auto-expire lock if process crashes mid-command


settings = Settings()
