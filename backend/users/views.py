# backend/users/views.py
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.sessions import announce_sign_in, get_current_session, sign_out

from .models import Profile
from .serializers import ProfileSerializer


class SessionView(APIView):
    """
    GET    /api/auth/session/ -> {"user": profile | null} (navbar)
    POST   /api/auth/session/ -> confirm a Supabase sign-in (Bearer token), returns the profile
    DELETE /api/auth/session/ -> sign out at Supabase
    """

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated()]

    def _profile_data(self, user):
        profile, _ = Profile.objects.get_or_create(user=user, defaults={"username": user.get_username()})
        return ProfileSerializer(profile).data

    def get(self, request):
        session = get_current_session(request)
        if session is None:
            return Response({"user": None})
        return Response({"user": self._profile_data(session.user)})

    def post(self, request):
        session = get_current_session(request)
        announce_sign_in(session)
        return Response({"user": self._profile_data(session.user)})

    def delete(self, request):
        session = get_current_session(request)
        sign_out(session)
        return Response(status=status.HTTP_204_NO_CONTENT)
