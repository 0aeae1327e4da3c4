# backend/core/settings.py
import os
from pathlib import Path
import dj_database_url
from dotenv import load_dotenv

load_dotenv()

env = os.environ.get

BASE_DIR = Path(__file__).resolve().parent.parent

# ========== SUPABASE ==========
SUPABASE_URL = env("SUPABASE_URL", "").strip() or None
SUPABASE_KEY = env("SUPABASE_KEY", "").strip() or None
SUPABASE_SERVICE_ROLE_KEY = env("SUPABASE_SERVICE_ROLE_KEY", "").strip() or None
SUPABASE_ANON_KEY = (env("SUPABASE_ANON_KEY", "") or env("VITE_SUPABASE_PUBLISHABLE_KEY", "")).strip() or None
SUPABASE_BUCKET = env("SUPABASE_BUCKET", "blog-images")

# ========== BLOG ==========
BLOG_BLOB_STORE = env("BLOG_BLOB_STORE", "blog.storages.SupabaseBlobStore")
BLOG_IMAGE_MAX_UPLOAD_SIZE = int(env("BLOG_IMAGE_MAX_UPLOAD_SIZE", 5 * 1024 * 1024))
BLOG_LIST_PAGE_SIZE = int(env("BLOG_LIST_PAGE_SIZE", 10))
FRONTEND_URL = env("FRONTEND_URL", "http://localhost:8080")
SIGN_IN_URL = env("SIGN_IN_URL", f"{FRONTEND_URL.rstrip('/')}/auth")

# ========== GRAPPELLI ==========
GRAPPELLI_ADMIN_TITLE = 'BlogCMS Admin'
GRAPPELLI_CLEAN_INPUT_TYPES = True

SECRET_KEY = env('SECRET_KEY', 'dev-only-secret-key-change-me')
DEBUG = env("DEBUG", "False") == "True"

ALLOWED_HOSTS = [h for h in env("ALLOWED_HOSTS", "").split(",") if h] + ["localhost", "127.0.0.1"]

RENDER_EXTERNAL_HOSTNAME = env('RENDER_EXTERNAL_HOSTNAME')
if RENDER_EXTERNAL_HOSTNAME:
    ALLOWED_HOSTS.append(RENDER_EXTERNAL_HOSTNAME)

CSRF_TRUSTED_ORIGINS = [o for o in env("CSRF_TRUSTED_ORIGINS", "").split(",") if o] + [
    "http://localhost:8080", "http://127.0.0.1:8080",
]

CORS_ALLOWED_ORIGINS = [o for o in env("CORS_ALLOWED_ORIGINS", "").split(",") if o] + [
    FRONTEND_URL.rstrip('/'), "http://127.0.0.1:8080",
]

CORS_ALLOW_ALL_ORIGINS = False
CORS_ALLOW_CREDENTIALS = True
CORS_ALLOW_METHODS = ['DELETE', 'GET', 'OPTIONS', 'PATCH', 'POST', 'PUT']
CORS_ALLOW_HEADERS = [
    'accept', 'accept-encoding', 'authorization', 'content-type',
    'dnt', 'origin', 'user-agent', 'x-csrftoken', 'x-requested-with',
]

SESSION_COOKIE_SAMESITE = 'None' if not DEBUG else 'Lax'
SESSION_COOKIE_SECURE = not DEBUG
CSRF_COOKIE_SAMESITE = 'None' if not DEBUG else 'Lax'
CSRF_COOKIE_SECURE = not DEBUG

# ========== STATIC ==========
STATIC_URL = "/static/"
STATIC_ROOT = os.path.join(BASE_DIR, "staticfiles")
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedStaticFilesStorage"},
}

# ========== DATABASE ==========
DATABASES = {
    'default': dj_database_url.config(
        default=env('DATABASE_URL') or f"sqlite:///{BASE_DIR / 'db.sqlite3'}",
        conn_max_age=600,
        conn_health_checks=True,
    )
}

# ========== MIDDLEWARE ==========
MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

# ========== APPS ==========
INSTALLED_APPS = [
    "grappelli",

    # Django core apps
    "django.contrib.auth",
    "django.contrib.admin",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",

    # Local apps
    "users.apps.UsersConfig",
    "blog.apps.BlogConfig",

    # Third-party apps
    "rest_framework",
    "corsheaders",
    "whitenoise.runserver_nostatic",
    'django_filters',
]

ROOT_URLCONF = "core.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "core.wsgi.application"

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ========== REST FRAMEWORK ==========
REST_FRAMEWORK = {
    'DEFAULT_FILTER_BACKENDS': ['django_filters.rest_framework.DjangoFilterBackend'],
    'DEFAULT_AUTHENTICATION_CLASSES': [
        # first class decides the 401 WWW-Authenticate header
        'core.authentication.SupabaseBearerAuthentication',
        'rest_framework.authentication.SessionAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': ['rest_framework.permissions.AllowAny'],
    'DEFAULT_PAGINATION_CLASS': 'rest_framework.pagination.PageNumberPagination',
    'PAGE_SIZE': BLOG_LIST_PAGE_SIZE,
    'EXCEPTION_HANDLER': 'blog.exceptions.api_exception_handler',
}

# ========== SECURITY ==========
if not DEBUG:
    SECURE_SSL_REDIRECT = env("SECURE_SSL_REDIRECT", "True") == "True"
    SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
    SECURE_CONTENT_TYPE_NOSNIFF = True
    SECURE_HSTS_SECONDS = 31536000
    SECURE_HSTS_INCLUDE_SUBDOMAINS = True
    SECURE_HSTS_PRELOAD = True

# Logging
LOG_LEVEL = env("LOG_LEVEL", "INFO" if DEBUG else "WARNING")
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {'format': '%(asctime)s %(levelname)s %(name)s: %(message)s'},
    },
    'handlers': {
        'console': {"class": 'logging.StreamHandler', 'formatter': 'simple'},
    },
    'root': {'handlers': ['console'], 'level': LOG_LEVEL},
    'loggers': {
        'blog': {'handlers': ['console'], 'level': env("BLOG_LOG_LEVEL", "INFO"), 'propagate': False},
        'core': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
    },
}
