import os
from functools import lru_cache
from pydantic import BaseModel, Field
from pathlib import Path as _Path

from dotenv import load_dotenv as _load_dotenv

# Load .env before any Settings instance reads the environment
_load_dotenv(dotenv_path=_Path(__file__).resolve().parent.parent / ".env", override=False)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Settings(BaseModel):
    # Support the legacy Mongo env var names alongside the gateway ones
    store_uri: str = Field(
        default_factory=lambda: (
            os.getenv("DOCUMENT_STORE_URI")
            or os.getenv("MONGO_URI")
            or os.getenv("MONGODB_URI")
            or ""
        )
    )
    # Optional: non-SRV fallback URI (e.g., mongodb://127.0.0.1:27017)
    store_alt_uri: str = Field(default_factory=lambda: os.getenv("DOCUMENT_STORE_ALT_URI", ""))
    # Static credential; the username is the account name for key-based accounts
    store_username: str = Field(default_factory=lambda: os.getenv("DOCUMENT_STORE_USERNAME", ""))
    store_key: str = Field(default_factory=lambda: os.getenv("DOCUMENT_STORE_KEY", ""))
    database_name: str = Field(default_factory=lambda: os.getenv("DOCUMENT_STORE_DATABASE", "documents"))
    store_direct: bool = Field(default_factory=lambda: _env_flag("DOCUMENT_STORE_DIRECT"))

    server_selection_timeout_ms: int = Field(
        default_factory=lambda: int(os.getenv("STORE_SERVER_SELECTION_TIMEOUT_MS", "3000"))
    )
    connect_timeout_ms: int = Field(default_factory=lambda: int(os.getenv("STORE_CONNECT_TIMEOUT_MS", "3000")))
    socket_timeout_ms: int = Field(default_factory=lambda: int(os.getenv("STORE_SOCKET_TIMEOUT_MS", "5000")))

    # Queries
    query_page_size: int = Field(default_factory=lambda: int(os.getenv("QUERY_PAGE_SIZE", "100")))
    query_max_items: int = Field(default_factory=lambda: int(os.getenv("QUERY_MAX_ITEMS", "1000")))

    # HTTP surface
    api_base_path: str = Field(default_factory=lambda: os.getenv("API_BASE_PATH", "/database"))
    cors_origins: str = Field(
        default_factory=lambda: os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
    )
    slow_request_ms: int = Field(default_factory=lambda: int(os.getenv("SLOW_REQUEST_MS", "800")))
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "8081")))


@lru_cache()
def get_settings() -> Settings:
    return Settings()
