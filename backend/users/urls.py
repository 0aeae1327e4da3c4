# backend/users/urls.py
from django.urls import path

from .views import SessionView

app_name = "users"

urlpatterns = [
    path("session/", SessionView.as_view(), name="session"),
]
