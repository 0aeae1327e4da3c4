# backend/core/authentication.py
from typing import Tuple, Optional

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AbstractBaseUser
from django.db import transaction
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication

from .supabase_client import supabase_user_info

UserModel = get_user_model()


def bearer_token(request) -> Optional[str]:
    auth = request.META.get("HTTP_AUTHORIZATION", "")
    parts = auth.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def user_from_supabase(user_info) -> AbstractBaseUser:
    """
    Maps a Supabase auth user onto the local user + profile, creating both on
    first sight and refreshing name/avatar from user_metadata.
    """
    from users.models import Profile

    uid = user_info.get("id")
    if not uid:
        raise exceptions.AuthenticationFailed("Supabase user has no id")
    email = user_info.get("email") or ""
    meta = user_info.get("user_metadata") or {}

    with transaction.atomic():
        profile = Profile.objects.select_related("user").filter(supabase_uid=uid).first()
        dirty = False
        if profile is None:
            username = meta.get("username") or (email.split("@")[0] if email else uid)
            user = UserModel.objects.filter(email__iexact=email).first() if email else None
            if user is None:
                user = UserModel.objects.create(username=f"{username}-{uid[:8]}", email=email, is_active=True)
                user.set_unusable_password()
                user.save()
            profile, _ = Profile.objects.get_or_create(user=user, defaults={"username": username})
            profile.supabase_uid = uid
            profile.username = username
            dirty = True

        for field, key in (("full_name", "full_name"), ("avatar_url", "avatar_url"), ("username", "username")):
            value = meta.get(key)
            if value and getattr(profile, field) != value:
                setattr(profile, field, value)
                dirty = True
        if dirty:
            profile.save()

    return profile.user


class SupabaseBearerAuthentication(BaseAuthentication):
    """
    Accept Authorization: Bearer <supabase_access_token>.
    Calls Supabase /auth/v1/user and maps to a Django user (creates if absent).
    After this, request.user is a standard Django user and request.auth the token.
    """

    def authenticate(self, request) -> Optional[Tuple[AbstractBaseUser, str]]:
        token = bearer_token(request)
        if not token:
            return None

        user_info = supabase_user_info(token)
        if not user_info:
            raise exceptions.AuthenticationFailed("Invalid Supabase token")

        user = user_from_supabase(user_info)
        if not user.is_active:
            raise exceptions.AuthenticationFailed("User inactive")
        return (user, token)

    def authenticate_header(self, request):
        return 'Bearer realm="api"'
