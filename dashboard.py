# dashboard.py
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, PlainTextResponse
from fastapi.concurrency import run_in_threadpool
import asyncio
import logging

from auth import get_access_token
from pages import NO_TOKEN_PAGE, render_dashboard, render_error, render_json
from whoop import (
    PROFILE_PATH,
    RECOVERY_PATH,
    SLEEP_PATH,
    WORKOUT_PATH,
    WhoopAPIError,
    fetch_resource,
)

# Configure logging
logger = logging.getLogger(__name__)
logger.setLevel(logging.DEBUG)
handler = logging.StreamHandler()
formatter = logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s")
handler.setFormatter(formatter)
# avoid duplicate handlers in reload environments
if not logger.handlers:
    logger.addHandler(handler)
else:
    logger.handlers = [handler]

router = APIRouter()

# Display order of the dashboard, independent of which fetch returns first
DASHBOARD_SECTIONS = [
    ("Recovery", RECOVERY_PATH),
    ("Sleep", SLEEP_PATH),
    ("Workouts", WORKOUT_PATH),
]


@router.get("/me")
async def profile(request: Request):
    """Show the basic WHOOP profile of the logged-in session."""
    logger.info("profile called")

    access_token = get_access_token(request)
    if not access_token:
        logger.warning("No access token in session for /me")
        return PlainTextResponse("Missing access_token", status_code=400)

    try:
        data = await run_in_threadpool(fetch_resource, PROFILE_PATH, access_token)
    except WhoopAPIError as e:
        return HTMLResponse(render_json(e.as_dict()), status_code=500)

    return HTMLResponse(render_json(data))


@router.get("/dashboard")
async def dashboard(request: Request):
    """
    Fetch recovery, sleep and workouts concurrently and render them together.
    If any fetch fails, only that failure is shown and its upstream status is
    mirrored; the other results are dropped.
    """
    logger.info("dashboard called")

    access_token = get_access_token(request)
    if not access_token:
        logger.info("Dashboard requested before login")
        return HTMLResponse(NO_TOKEN_PAGE)

    try:
        results = await asyncio.gather(*(
            run_in_threadpool(fetch_resource, path, access_token)
            for _, path in DASHBOARD_SECTIONS
        ))
    except WhoopAPIError as e:
        status_code = e.status or 500
        logger.error("Dashboard fetch failed with status %s", status_code)
        return HTMLResponse(render_error("WHOOP request failed", e.as_dict()), status_code=status_code)

    sections = [(heading, data) for (heading, _), data in zip(DASHBOARD_SECTIONS, results)]
    logger.info("Rendering dashboard with %d sections", len(sections))
    return HTMLResponse(render_dashboard(sections))
