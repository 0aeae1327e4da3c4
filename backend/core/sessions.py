# backend/core/sessions.py
"""
Session context handed to the blog operations.

A Session is built per request from the bearer token (or the session/admin
login) and passed down explicitly; nothing reads a process-wide "current user".
Sign-in / sign-out notifications go out through the session_changed signal.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from django.dispatch import Signal

from .authentication import bearer_token
from .supabase_client import supabase_sign_out

logger = logging.getLogger(__name__)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"

# kwargs: event, session
session_changed = Signal()


@dataclass(frozen=True)
class Session:
    user: object
    access_token: Optional[str] = None

    @property
    def user_id(self):
        return self.user.pk

    @property
    def supabase_uid(self):
        profile = getattr(self.user, "profile", None)
        return getattr(profile, "supabase_uid", None)


def get_current_session(request) -> Optional[Session]:
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return None
    token = getattr(request, "auth", None)
    if not isinstance(token, str):
        token = bearer_token(request)
    return Session(user=user, access_token=token)


def on_session_change(callback: Callable, weak: bool = False) -> Callable:
    """
    Registers callback(event=..., session=...) for sign-in / sign-out.
    Returns a function that disconnects it again.
    """
    def receiver(sender, event, session, **kwargs):
        callback(event=event, session=session)

    session_changed.connect(receiver, weak=weak)

    def disconnect():
        session_changed.disconnect(receiver)

    return disconnect


def announce_sign_in(session: Session):
    logger.info("User %s signed in", session.user_id)
    session_changed.send(sender=Session, event=SIGNED_IN, session=session)


def sign_out(session: Session) -> bool:
    revoked = False
    if session.access_token:
        revoked = supabase_sign_out(session.access_token)
    logger.info("User %s signed out (revoked=%s)", session.user_id, revoked)
    session_changed.send(sender=Session, event=SIGNED_OUT, session=session)
    return revoked
