"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for everything except
the Supabase project URL and key, which must be supplied before the
platform client is first used (see ``core.supabase``).
"""

import os
from dataclasses import dataclass, field
from typing import List


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Kanban Board API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Supabase project credentials.  ``supabase_key`` is the public anon
    # key; ``supabase_service_role_key`` bypasses row level security and
    # is only used for administrative operations (lists, notifications,
    # user search).  When it is empty the anon key is used instead.
    supabase_url: str = os.getenv("SUPABASE_URL", "")
    supabase_key: str = os.getenv("SUPABASE_KEY", "")
    supabase_service_role_key: str = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")

    # Origins allowed to call the API from a browser.  The default is the
    # Vite dev server used by the frontend.
    cors_origins: List[str] = field(
        default_factory=lambda: _split_csv(os.getenv("CORS_ORIGINS", "http://localhost:5173"))
    )

    # Uploads (avatars and card attachments) are capped at 10 MB.
    max_upload_bytes: int = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
    avatar_bucket: str = os.getenv("AVATAR_BUCKET", "avatars")
    attachment_bucket: str = os.getenv("ATTACHMENT_BUCKET", "attachments")

    notification_limit: int = int(os.getenv("NOTIFICATION_LIMIT", "50"))
    search_limit: int = int(os.getenv("SEARCH_LIMIT", "10"))

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
