"""
Test settings: in-memory SQLite, process-local cache, fast password hashing.

Used by pytest-django (see pyproject.toml) and by
``python manage.py test --settings=healthfair_backend.settings_test``.
"""

from .settings import *

DEBUG = False

ALLOWED_HOSTS = ['localhost', 'testserver', '127.0.0.1']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    },
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'healthfair-tests',
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

LOGGING['loggers']['healthfair_backend']['level'] = 'WARNING'
