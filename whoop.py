# whoop.py
"""Thin client for the WHOOP OAuth and developer endpoints."""
from typing import Any, Dict, Optional
import logging

import requests

from config import (
    http_timeout,
    whoop_client_id,
    whoop_client_secret,
    whoop_redirect_uri,
)

# Configure logging
logger = logging.getLogger(__name__)
logger.setLevel(logging.DEBUG)
handler = logging.StreamHandler()
formatter = logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s")
handler.setFormatter(formatter)
if not logger.handlers:
    logger.addHandler(handler)

AUTHORIZE_URL = "https://api.prod.whoop.com/oauth/oauth2/auth"
TOKEN_URL = "https://api.prod.whoop.com/oauth/oauth2/token"
API_BASE_URL = "https://api.prod.whoop.com/developer"

# Scopes must match the ones enabled for the app in the WHOOP dashboard
SCOPES = "read:recovery read:sleep read:workout read:profile offline"

PROFILE_PATH = "/v1/user/profile/basic"
RECOVERY_PATH = "/v2/recovery"
SLEEP_PATH = "/v2/activity/sleep"
WORKOUT_PATH = "/v2/activity/workout"


class WhoopAPIError(Exception):
    """A failed call to WHOOP: non-2xx answer, network error, or a token
    response without an access_token.

    ``status`` is the upstream HTTP status, or None when no response arrived.
    ``data`` is the decoded error body, or the exception message.
    """

    def __init__(self, status: Optional[int], data: Any):
        super().__init__(f"WHOOP request failed: {status}")
        self.status = status
        self.data = data

    def as_dict(self) -> Dict[str, Any]:
        return {"status": self.status, "data": self.data}


def _body(response: requests.Response) -> Any:
    """Decoded JSON body, or the raw text when the body is not JSON."""
    try:
        return response.json()
    except ValueError:
        return response.text


def exchange_code(code: str) -> Dict[str, Any]:
    """Exchange an authorization code for the token payload, returned verbatim."""
    # Config is resolved before anything goes on the wire
    data = {
        "grant_type": "authorization_code",
        "code": code,
        "redirect_uri": whoop_redirect_uri(),
        "client_id": whoop_client_id(),
        "client_secret": whoop_client_secret(),
    }
    logger.debug("Exchanging code for access token at %s", TOKEN_URL)

    try:
        resp = requests.post(TOKEN_URL, data=data, timeout=http_timeout())
    except requests.RequestException as e:
        logger.error("Token exchange failed: %s", e)
        raise WhoopAPIError(None, str(e)) from e

    tokens = _body(resp)
    if not resp.ok:
        logger.error("Token exchange failed: %s %s", resp.status_code, tokens)
        raise WhoopAPIError(resp.status_code, tokens)

    if not isinstance(tokens, dict) or not tokens.get("access_token"):
        logger.error("Token exchange returned no access_token: %s %s", resp.status_code, tokens)
        raise WhoopAPIError(resp.status_code, tokens)

    logger.debug(
        "Token payload received: keys=%s expires_in=%s",
        sorted(tokens), tokens.get("expires_in"),
    )
    return tokens


def fetch_resource(path: str, access_token: str) -> Any:
    """GET a developer API resource with a bearer token.

    Returns the decoded JSON, or the raw text for a 2xx body that is not JSON.
    """
    url = f"{API_BASE_URL}{path}"
    logger.debug("Fetching WHOOP resource: %s", url)

    try:
        resp = requests.get(
            url,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=http_timeout(),
        )
    except requests.RequestException as e:
        logger.error("HTTP request to WHOOP failed for %s: %s", path, e)
        raise WhoopAPIError(None, str(e)) from e

    body = _body(resp)
    if not resp.ok:
        logger.error("Failed to fetch %s: %s %s", path, resp.status_code, body)
        raise WhoopAPIError(resp.status_code, body)

    return body
