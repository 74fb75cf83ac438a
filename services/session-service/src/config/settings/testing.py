"""
Testing settings for Session Service.
"""

from .base import *

# Testing mode
DEBUG = True
TESTING = True

# Use in-memory SQLite for tests
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

# Faster password hashing for tests
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

# Disable migrations for faster tests
class DisableMigrations:
    def __contains__(self, item):
        return True

    def __getitem__(self, item):
        return None

MIGRATION_MODULES = DisableMigrations()

# Cache
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

# JWT
JWT_SETTINGS = {
    **JWT_SETTINGS,
    'SIGNING_KEY': 'test-jwt-secret',
    'VERIFYING_KEY': 'test-jwt-secret',
    'ISSUER': 'coach-platform-test',
}

# PayPal (sandbox credentials never reach the network in tests)
PAYPAL_CLIENT_ID = 'test-client-id'
PAYPAL_CLIENT_SECRET = 'test-client-secret'
PAYPAL_ENVIRONMENT = 'sandbox'
PAYMENT_GATEWAY_CLASS = 'apps.core.gateways.payment.FakePaymentGateway'
FRONTEND_URL = 'http://testserver'

EVENT_PUBLISHING_ENABLED = False

# Logging - minimal for tests
LOGGING = {
    'version': 1,
    'disable_existing_loggers': True,
    'handlers': {
        'null': {
            'class': 'logging.NullHandler',
        },
    },
    'root': {
        'handlers': ['null'],
        'level': 'CRITICAL',
    },
}
