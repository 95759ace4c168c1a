from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse

from app.application.exceptions import RemoteError
from app.core.config import settings
from app.infrastructure.google.oauth_client import GoogleOAuthClient
from app.wiring.dependencies import get_google_oauth


router = APIRouter(prefix="/api/auth")
logger = logging.getLogger(__name__)


@router.get("/google")
def google_consent(oauth: GoogleOAuthClient = Depends(get_google_oauth)) -> RedirectResponse:
    if not oauth.configured:
        raise HTTPException(status_code=500, detail="Server configuration error - missing credentials")
    return RedirectResponse(oauth.consent_url())


@router.get("/callback/google")
def google_callback(
    code: str | None = Query(None),
    oauth: GoogleOAuthClient = Depends(get_google_oauth),
) -> dict[str, Any]:
    if not code:
        raise HTTPException(status_code=400, detail="No code provided")
    if not oauth.configured:
        logger.error("Missing Google OAuth credentials")
        raise HTTPException(status_code=500, detail="Server configuration error - missing credentials")

    try:
        tokens = oauth.exchange_code(code)
    except RemoteError as e:
        raise HTTPException(status_code=500, detail=f"Failed to exchange code for tokens: {e}")

    refresh_token = tokens.get("refresh_token")
    logger.info("Google OAuth completed", extra={"has_refresh": bool(refresh_token)})
    result: dict[str, Any] = {
        "has_tokens": True,
        "has_refresh": bool(refresh_token),
        "expires_in": tokens.get("expires_in"),
    }
    # The refresh token is shown once so it can be copied into GOOGLE_REFRESH_TOKEN
    if refresh_token and settings.ENV.lower() in {"dev", "local"}:
        result["refresh_token"] = refresh_token
    return result
