"""Base settings for Session Service."""
import os
import sys
from datetime import timedelta
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent
sys.path.insert(0, str(BASE_DIR.parent.parent.parent))

SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key')
DEBUG = os.environ.get('DEBUG', 'True').lower() == 'true'
ALLOWED_HOSTS = os.environ.get('ALLOWED_HOSTS', '*').split(',')

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'rest_framework',
    'corsheaders',
    'django_filters',
    'apps.core',
    'apps.api',
]

MIDDLEWARE = [
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'shared.common.middleware.RequestIDMiddleware',
    'shared.common.middleware.LoggingMiddleware',
]

ROOT_URLCONF = 'config.urls'
TEMPLATES = [{'BACKEND': 'django.template.backends.django.DjangoTemplates', 'DIRS': [], 'APP_DIRS': True, 'OPTIONS': {'context_processors': ['django.template.context_processors.debug', 'django.template.context_processors.request', 'django.contrib.auth.context_processors.auth', 'django.contrib.messages.context_processors.messages']}}]
WSGI_APPLICATION = 'config.wsgi.application'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': os.environ.get('DB_NAME', 'session_service_db'),
        'USER': os.environ.get('DB_USER', 'session_service_user'),
        'PASSWORD': os.environ.get('DB_PASSWORD', 'session_service_password'),
        'HOST': os.environ.get('DB_HOST', 'pgbouncer'),
        'PORT': os.environ.get('DB_PORT', '6432'),
    }
}

AUTH_PASSWORD_VALIDATORS = [{'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'}]
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True
STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': ['shared.common.authentication.JWTAuthentication'],
    'DEFAULT_PERMISSION_CLASSES': ['rest_framework.permissions.IsAuthenticated'],
    'DEFAULT_FILTER_BACKENDS': ['django_filters.rest_framework.DjangoFilterBackend'],
    'EXCEPTION_HANDLER': 'shared.common.exceptions.custom_exception_handler',
}

CORS_ALLOW_ALL_ORIGINS = DEBUG
CACHES = {'default': {'BACKEND': 'django.core.cache.backends.locmem.LocMemCache'}}

# JWT Configuration (tokens are issued by the identity service)
JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY', SECRET_KEY)
JWT_SETTINGS = {
    'ALGORITHM': os.environ.get('JWT_ALGORITHM', 'HS256'),
    'SIGNING_KEY': JWT_SECRET_KEY,
    'VERIFYING_KEY': os.environ.get('JWT_VERIFYING_KEY', JWT_SECRET_KEY),
    'ISSUER': os.environ.get('JWT_ISSUER', 'coach-platform'),
    'ACCESS_TOKEN_LIFETIME': timedelta(minutes=int(os.environ.get('JWT_ACCESS_TOKEN_LIFETIME_MINUTES', '60'))),
}

# PayPal Configuration
PAYPAL_CLIENT_ID = os.environ.get('PAYPAL_CLIENT_ID', '')
PAYPAL_CLIENT_SECRET = os.environ.get('PAYPAL_CLIENT_SECRET', '')
PAYPAL_ENVIRONMENT = os.environ.get('PAYPAL_ENVIRONMENT', 'sandbox')
PAYPAL_TIMEOUT_SECONDS = float(os.environ.get('PAYPAL_TIMEOUT_SECONDS', '10'))
PAYMENT_GATEWAY_CLASS = os.environ.get('PAYMENT_GATEWAY_CLASS', 'apps.core.gateways.payment.PayPalGateway')
CALENDAR_PROVIDER_CLASS = os.environ.get('CALENDAR_PROVIDER_CLASS', 'apps.core.gateways.calendar.MockCalendarProvider')
FRONTEND_URL = os.environ.get('FRONTEND_URL', 'http://localhost:3000')
DEFAULT_CURRENCY = os.environ.get('DEFAULT_CURRENCY', 'USD')

# Booking rules
MAX_PENDING_BOOKINGS = int(os.environ.get('MAX_PENDING_BOOKINGS', '3'))
PAYMENT_PENDING_WINDOW_MINUTES = int(os.environ.get('PAYMENT_PENDING_WINDOW_MINUTES', '30'))

# Events
EVENT_PUBLISHING_ENABLED = os.environ.get('EVENT_PUBLISHING_ENABLED', 'True').lower() == 'true'

SERVICE_NAME = 'session-service'

LOGGING = {'version': 1, 'disable_existing_loggers': False, 'filters': {'request_id': {'()': 'shared.common.middleware.RequestIDLogFilter'}}, 'formatters': {'json': {'()': 'pythonjsonlogger.jsonlogger.JsonFormatter', 'format': '%(asctime)s %(levelname)s %(name)s %(request_id)s %(message)s'}}, 'handlers': {'console': {'class': 'logging.StreamHandler', 'formatter': 'json', 'filters': ['request_id']}}, 'root': {'handlers': ['console'], 'level': os.environ.get('LOG_LEVEL', 'INFO')}}
