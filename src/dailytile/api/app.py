"""FastAPI application for the receiving side of dailytile."""

import secrets
from datetime import datetime
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .. import __version__
from ..core.errors import MalformedRecord
from ..core.model import DAILY_NOTE_PATH, CachedNote

NO_NOTE_TEXT = "Open phone app to sync"
EMPTY_EXCERPT_TEXT = "No entries yet"


def tile_view(note: CachedNote | None) -> dict[str, Any]:
    """Header and body text for the small tile."""
    if note is None:
        return {"date": None, "updated": None, "header": "No Note", "text": NO_NOTE_TEXT}

    updated = datetime.fromtimestamp(note.received_at / 1000).strftime("%H:%M")
    return {
        "date": note.date,
        "updated": updated,
        "header": f"{note.date} • {updated}",
        "text": note.excerpt if note.excerpt.strip() else EMPTY_EXCERPT_TEXT,
    }


def create_app(runtime: Any, token: str | None = None) -> FastAPI:
    """
    Create FastAPI application with runtime injected.

    Args:
        runtime: Runtime instance holding the SyncCache
        token: Bearer token for authentication (None to disable auth)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="dailytile receiver",
        description="Receives daily note snapshots and serves them to small displays",
        version=__version__,
        docs_url="/docs" if token is None else None,
        redoc_url="/redoc" if token is None else None,
    )

    if token:
        security_scheme = HTTPBearer(auto_error=False)

        async def verify_token(
            credentials: HTTPAuthorizationCredentials | None = Security(security_scheme),  # noqa: B008
        ) -> None:
            """Verify bearer token."""
            if credentials is None or credentials.credentials != token:
                raise HTTPException(status_code=401, detail="Invalid or missing token")
    else:

        async def verify_token() -> None:
            """No-op when auth is disabled."""
            return None

    @app.get("/health")  # type: ignore[misc]
    async def health(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok"}

    @app.put(DAILY_NOTE_PATH)  # type: ignore[misc]
    def put_daily_note(
        payload: dict[str, Any] = Body(...),  # noqa: B008
        auth: None = Depends(verify_token),
    ) -> dict[str, Any]:
        """Apply an incoming note; stale updates are acknowledged, not rejected."""
        try:
            accepted = runtime.cache.apply_mapping(payload)
        except MalformedRecord as e:
            raise HTTPException(status_code=422, detail=str(e)) from e
        return {"accepted": accepted}

    @app.get("/note")  # type: ignore[misc]
    async def get_note(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Get the cached note for the full-screen view."""
        note = runtime.cache.current
        if note is None:
            raise HTTPException(status_code=404, detail="No note cached")
        return note.to_dict()

    @app.get("/tile")  # type: ignore[misc]
    async def get_tile(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Get the excerpt for the tile."""
        return tile_view(runtime.cache.current)

    return app


def generate_token() -> str:
    """Generate a random bearer token."""
    return secrets.token_urlsafe(32)
