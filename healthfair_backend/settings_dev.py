"""
Development settings for the HealthFair backend (SQLite).

Usage:
    export DJANGO_SETTINGS_MODULE=healthfair_backend.settings_dev
    python manage.py migrate
    python manage.py seed
    python manage.py runserver
"""

from .settings import *

# ---------------------------------------------------------
# DEVELOPMENT SETTINGS
# ---------------------------------------------------------

DEBUG = True

ALLOWED_HOSTS = ['localhost', '127.0.0.1', '[::1]', '*']

# ---------------------------------------------------------
# DATABASES: SQLite for local development
# ---------------------------------------------------------

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'dev.sqlite3',
        'OPTIONS': {
            'timeout': 20,
        },
    },
}

# ---------------------------------------------------------
# CORS for the local frontend
# ---------------------------------------------------------

INSTALLED_APPS = INSTALLED_APPS + ['corsheaders']

MIDDLEWARE = ['corsheaders.middleware.CorsMiddleware'] + MIDDLEWARE  # must come before CommonMiddleware

CORS_ALLOW_ALL_ORIGINS = True  # DEV only!
CORS_ALLOW_CREDENTIALS = True

CSRF_TRUSTED_ORIGINS = [
    'http://localhost:5173',
    'http://127.0.0.1:5173',
    'http://localhost:8000',
    'http://127.0.0.1:8000',
]

# ---------------------------------------------------------
# REST FRAMEWORK: Browsable API in development
# ---------------------------------------------------------

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': (
        'rest_framework_simplejwt.authentication.JWTAuthentication',
        'rest_framework.authentication.SessionAuthentication',  # Browsable API
    ),
    'DEFAULT_PERMISSION_CLASSES': (
        'rest_framework.permissions.IsAuthenticated',
    ),
    'DEFAULT_RENDERER_CLASSES': (
        'rest_framework.renderers.JSONRenderer',
        'rest_framework.renderers.BrowsableAPIRenderer',
    ),
}

SIMPLE_JWT = {
    **SIMPLE_JWT,
    'ACCESS_TOKEN_LIFETIME': timedelta(hours=2),  # longer for DEV
}

# ---------------------------------------------------------
# LOGGING: verbose in development
# ---------------------------------------------------------

LOGGING['loggers']['healthfair_backend']['level'] = 'DEBUG'
LOGGING['loggers']['django.db.backends'] = {
    'handlers': ['console'],
    'level': 'WARNING',  # DEBUG shows SQL queries
    'propagate': False,
}
