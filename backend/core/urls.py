# backend/core/urls.py
import logging
from django.conf import settings
from django.contrib import admin
from django.urls import path, include
from django.http import HttpResponseNotFound, JsonResponse

logger = logging.getLogger(__name__)


def custom_404_view(request, exception=None):
    return HttpResponseNotFound("Page not found")


def health_check(request):
    return JsonResponse({"status": "ok"})


urlpatterns = [
    path('grappelli/', include('grappelli.urls')),
    path('admin/', admin.site.urls),

    # Blog API: listing, post page, dashboard, editor
    path('api/blog/', include(('blog.urls', 'blog'), namespace='blog')),
    # Supabase session bridge
    path('api/auth/', include(('users.urls', 'users'), namespace='users')),

    path('health/', health_check, name='health-check'),
]

# Serve static files in DEBUG
if settings.DEBUG:
    from django.conf.urls.static import static
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)

handler404 = custom_404_view
