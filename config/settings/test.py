"""Test settings for the car rental project.

Fast, self-contained configuration for pytest: SQLite by default, in-memory
file storage, eager Celery and a cheap password hasher. SQLite has no row
locks, so lock helpers degrade to plain reads there and the concurrent
booking tests are skipped; set DB_ENGINE and friends to run them.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

# Point DB_ENGINE at PostgreSQL to run the row-lock tests
DATABASES = {
    'default': {
        'ENGINE': os.environ.get('DB_ENGINE', 'django.db.backends.sqlite3'),  # noqa: F405
        'NAME': os.environ.get('DB_NAME', ':memory:'),  # noqa: F405
        'USER': os.environ.get('DB_USER', ''),  # noqa: F405
        'PASSWORD': os.environ.get('DB_PASSWORD', ''),  # noqa: F405
        'HOST': os.environ.get('DB_HOST', ''),  # noqa: F405
        'PORT': os.environ.get('DB_PORT', ''),  # noqa: F405
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.InMemoryStorage',
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

RENTAL_TAX_RATE = '0.07'
RENTAL_PICKUP_GRACE_MINUTES = 60
RENTAL_PENDING_HOLDS_SLOT = True
RENTAL_PENDING_EXPIRY_MINUTES = 30
