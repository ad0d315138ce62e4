"""API dependencies."""

import os
from dataclasses import dataclass, field
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status

from comicgenius_core_schemas import PANEL_REQUEST_DELAY, VIDEO_POLL_INTERVAL, WizardError
from comicgenius_services import JobService, SessionService, get_job_service
from comicgenius_services.webhook import DEFAULT_APP_URL
from comicgenius_storage import SessionManager


# Configuration
@dataclass
class Settings:
    """API settings."""

    api_keys: set[str] = field(default_factory=set)  # Empty = no auth required
    require_auth: bool = False
    panel_delay: float = PANEL_REQUEST_DELAY
    video_poll_interval: float = VIDEO_POLL_INTERVAL
    whatsapp_verify_token: Optional[str] = None
    app_url: str = DEFAULT_APP_URL

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the environment."""
        api_keys = {
            key.strip()
            for key in os.environ.get("COMICGENIUS_API_KEYS", "").split(",")
            if key.strip()
        }
        return cls(
            api_keys=api_keys,
            require_auth=bool(api_keys),
            panel_delay=float(os.environ.get("COMICGENIUS_PANEL_DELAY", PANEL_REQUEST_DELAY)),
            video_poll_interval=float(
                os.environ.get("COMICGENIUS_VIDEO_POLL_INTERVAL", VIDEO_POLL_INTERVAL)
            ),
            whatsapp_verify_token=os.environ.get("WHATSAPP_VERIFY_TOKEN") or None,
            app_url=os.environ.get("APP_URL") or DEFAULT_APP_URL,
        )


settings = Settings()


def get_settings() -> Settings:
    """Get API settings."""
    return settings


def configure(new_settings: Settings) -> Settings:
    """Replace the active settings."""
    global settings
    settings = new_settings
    return settings


# Authentication
async def verify_token(
    authorization: Annotated[Optional[str], Header()] = None,
    settings: Settings = Depends(get_settings),
) -> Optional[str]:
    """Verify bearer token if auth is required.

    Returns:
        The token if valid, None if auth not required
    """
    if not settings.require_auth:
        return None

    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = parts[1]
    if settings.api_keys and token not in settings.api_keys:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid API key",
        )

    return token


# Session loading
def get_session_service() -> SessionService:
    return SessionService()


def get_session_manager(session_id: str) -> SessionManager:
    """Get the manager for a session ID.

    Raises:
        NotFoundError: If the session does not exist
    """
    return get_session_service().load(session_id)


COMIC_JOB = "comic_generation"


def ensure_no_comic_job(manager: SessionManager) -> None:
    """Reject changes while a comic job for the session is pending or running.

    Raises:
        WizardError: If a comic generation job is active
    """
    session = manager.session
    if get_job_service().has_active_job(COMIC_JOB, session.id):
        raise WizardError(
            "A comic is already being generated for this session",
            current_step=session.current_step,
        )


def get_jobs() -> JobService:
    """Get the job service."""
    return get_job_service()
