import os
from dataclasses import dataclass, field
from typing import List

# This file reads the backend configuration from the environment.

DEFAULT_ALLOWED_ORIGINS = [
    "https://vinayak-sweet-namkeens.onrender.com",
    "https://vinayak-sweet.onrender.com",
    "http://localhost:8080",
]


def _split_origins(raw: str) -> List[str]:
    return [o.strip().rstrip("/") for o in raw.split(",") if o.strip()]


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 5000
    allowed_origins: List[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS))
    store_path: str = ""
    recent_orders_limit: int = 50
    max_body_bytes: int = 50 * 1024 * 1024
    log_level: str = "INFO"
    log_dir: str = ""

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.environ.get("ALLOWED_ORIGINS")
        return cls(
            host=os.environ.get("HOST", "0.0.0.0"),
            port=int(os.environ.get("PORT", "5000")),
            allowed_origins=_split_origins(origins) if origins else list(DEFAULT_ALLOWED_ORIGINS),
            store_path=os.environ.get("STORE_PATH", ""),
            recent_orders_limit=int(os.environ.get("RECENT_ORDERS_LIMIT", "50")),
            max_body_bytes=int(os.environ.get("MAX_BODY_BYTES", str(50 * 1024 * 1024))),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            log_dir=os.environ.get("LOG_DIR", ""),
        )


settings = Settings.from_env()
