# backend/core/supabase_client.py
import logging
from typing import Optional, Dict, Any

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


def _auth_url(path: str) -> Optional[str]:
    base = getattr(settings, "SUPABASE_URL", None)
    if not base:
        return None
    return base.rstrip("/") + "/auth/v1/" + path.lstrip("/")


def _headers(access_token: str) -> Dict[str, str]:
    headers = {"Authorization": f"Bearer {access_token}"}
    anon_key = getattr(settings, "SUPABASE_ANON_KEY", None)
    if anon_key:
        headers["apikey"] = anon_key
    return headers


def supabase_user_info(access_token: str, timeout: float = 5.0) -> Optional[Dict[str, Any]]:
    """
    GET /auth/v1/user with the caller's access token.
    Returns the Supabase user JSON (id, email, user_metadata, ...) or None.
    """
    url = _auth_url("user")
    if not url or not access_token:
        return None
    try:
        r = requests.get(url, headers=_headers(access_token), timeout=timeout)
        if r.status_code == 200:
            return r.json()
        logger.debug("supabase_user_info: status=%s text=%s", r.status_code, r.text)
    except requests.RequestException as ex:
        logger.debug("supabase_user_info request exception: %s", ex)
    return None


def supabase_sign_out(access_token: str, timeout: float = 5.0) -> bool:
    """
    POST /auth/v1/logout: revokes the refresh tokens behind access_token.
    A 401 means the session was already gone, which is fine for a sign-out.
    """
    url = _auth_url("logout")
    if not url or not access_token:
        return False
    try:
        r = requests.post(url, headers=_headers(access_token), timeout=timeout)
    except requests.RequestException as ex:
        logger.warning("supabase_sign_out request exception: %s", ex)
        return False
    if r.status_code in (200, 204, 401):
        return True
    logger.warning("supabase_sign_out: status=%s text=%s", r.status_code, r.text)
    return False
