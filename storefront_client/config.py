import os
from dataclasses import dataclass

# Backend the dev server proxies /api to; used when API_URL is empty.
DEV_BACKEND_URL = "http://localhost:5000"


def resolve_base_url(raw: str) -> str:
    raw = (raw or "").strip().rstrip("/")
    return raw if raw else DEV_BACKEND_URL


@dataclass(frozen=True)
class ClientSettings:
    api_url: str = DEV_BACKEND_URL
    poll_interval: float = 15.0
    request_timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "ClientSettings":
        return cls(
            api_url=resolve_base_url(os.environ.get("API_URL", "")),
            poll_interval=float(os.environ.get("POLL_INTERVAL", "15")),
            request_timeout=float(os.environ.get("REQUEST_TIMEOUT", "10")),
        )
