# auth.py
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from fastapi.concurrency import run_in_threadpool
from typing import Dict, Optional, Tuple
from urllib.parse import quote, urlencode
import logging
import secrets
import uuid

from config import SESSIONS, SESSION_COOKIE_NAME, whoop_client_id, whoop_redirect_uri
from pages import render_error
from whoop import AUTHORIZE_URL, SCOPES, WhoopAPIError, exchange_code

router = APIRouter()

# Configure logging
logger = logging.getLogger(__name__)
logger.setLevel(logging.DEBUG)
handler = logging.StreamHandler()
formatter = logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s")
handler.setFormatter(formatter)
if not logger.handlers:
    logger.addHandler(handler)


def get_session(request: Request) -> Optional[Dict]:
    """Return the session record for the request's cookie, if any."""
    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    if not session_id:
        return None
    return SESSIONS.get(session_id)


def get_or_create_session(request: Request) -> Tuple[str, Dict]:
    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    if session_id and session_id in SESSIONS:
        return session_id, SESSIONS[session_id]

    session_id = str(uuid.uuid4())
    SESSIONS[session_id] = {}
    logger.info("Session created: %s", session_id)
    return session_id, SESSIONS[session_id]


def get_access_token(request: Request) -> Optional[str]:
    session = get_session(request) or {}
    token = session.get("token") or {}
    return token.get("access_token")


def build_authorize_url(state: str) -> str:
    params = {
        "response_type": "code",
        "client_id": whoop_client_id(),
        "redirect_uri": whoop_redirect_uri(),
        "scope": SCOPES,
        "state": state,
    }
    return f"{AUTHORIZE_URL}?{urlencode(params, quote_via=quote)}"


def _set_session_cookie(response, session_id: str):
    response.set_cookie(
        SESSION_COOKIE_NAME,
        session_id,
        httponly=True,
        samesite="lax",
    )


@router.get("/auth/whoop")
def auth_redirect(request: Request):
    """Redirect user to WHOOP authorization"""
    logger.info("Initiating WHOOP OAuth flow")

    state = secrets.token_urlsafe(16)
    url = build_authorize_url(state)

    session_id, session = get_or_create_session(request)
    session["state"] = state

    logger.debug("Redirecting to WHOOP OAuth URL: %s", url)
    response = RedirectResponse(url, status_code=302)
    _set_session_cookie(response, session_id)
    return response


@router.get("/auth/whoop/callback")
async def auth_callback(request: Request, code: Optional[str] = None, state: Optional[str] = None):
    """Handle WHOOP OAuth callback"""
    if not code:
        logger.warning("OAuth callback without code")
        return PlainTextResponse("Missing ?code in callback URL", status_code=400)

    # Only a session started by /auth/whoop can complete a login
    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    session = get_session(request)
    if session is None:
        logger.warning("OAuth callback without a known session")
        return PlainTextResponse("Invalid OAuth state", status_code=400)

    expected_state = session.pop("state", None)
    if not state or not expected_state or not secrets.compare_digest(state, expected_state):
        logger.warning("OAuth state mismatch for session: %s", session_id)
        return PlainTextResponse("Invalid OAuth state", status_code=400)

    logger.info("Received OAuth callback for session: %s", session_id)

    try:
        tokens = await run_in_threadpool(exchange_code, code)
    except WhoopAPIError as e:
        return HTMLResponse(render_error("Token exchange failed", e.as_dict()), status_code=500)

    # A new login replaces whatever token the session held
    session["token"] = tokens
    logger.info("Token stored for session: %s", session_id)

    response = RedirectResponse("/dashboard", status_code=302)
    _set_session_cookie(response, session_id)
    return response
