# backend/blog/urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import DashboardView, EditorViewSet, PostViewSet

app_name = 'blog'

router = DefaultRouter()
router.register(r'posts', PostViewSet, basename='post')
router.register(r'editor', EditorViewSet, basename='editor')

urlpatterns = [
    path('', include(router.urls)),
    path('dashboard/', DashboardView.as_view(), name='dashboard'),
]
