"""
Base Django settings for meduaid_portal.
Common settings shared between development and production.
"""
import os
import sys
from datetime import timedelta
from pathlib import Path
import environ

# Build paths
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Check if running tests
TESTING = 'test' in sys.argv or 'pytest' in sys.modules

# Environment variables
env = environ.Env(
    DEBUG=(bool, False),
    ALLOWED_HOSTS=(list, ['*']),
)
environ.Env.read_env(os.path.join(BASE_DIR, '.env'))

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = env('SECRET_KEY', default='django-insecure-change-me-in-production')

# Django admin lives under a non-default path
SECRET_ADMIN_URL = env('SECRET_ADMIN_URL', default='manage-portal')

# Application definition
INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    # Third-party apps
    'axes',
    # Project apps
    'core.apps.CoreConfig',
    'portal.apps.PortalConfig',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    # Django-axes rate limiting (must be after AuthenticationMiddleware)
    'axes.middleware.AxesMiddleware',
    # Domain errors -> JSON responses
    'core.middleware.ApiErrorMiddleware',
    # Referrer, permissions and CSP headers
    'core.middleware.SecurityHeadersMiddleware',
]

ROOT_URLCONF = 'meduaid_portal.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'meduaid_portal.wsgi.application'

# Custom user model
AUTH_USER_MODEL = 'core.User'

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator',
     'OPTIONS': {'min_length': 8}},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

# Internationalization
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

# Static files
STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

# Default primary key field type
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Session settings (the SPA authenticates with the session cookie)
SESSION_COOKIE_AGE = 60 * 60 * 24
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = 'Lax'

# ==========================================================================
# PORTAL SETTINGS
# ==========================================================================
# Allowed drift between a supplied total_marks and the computed sum
PORTAL_TOTAL_MARKS_TOLERANCE = 0.01
# Rows shown in the dashboard "recent" lists
PORTAL_RECENT_LIMIT = 5

# ==========================================================================
# LOGGING
# ==========================================================================
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': '%(asctime)s %(levelname)s %(name)s %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'standard',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': env('LOG_LEVEL', default='WARNING' if TESTING else 'INFO'),
    },
    'loggers': {
        'meduaid.audit': {'handlers': ['console'], 'level': 'INFO', 'propagate': False},
        'meduaid.auth': {'handlers': ['console'], 'level': 'INFO', 'propagate': False},
        'meduaid.scoring': {'handlers': ['console'], 'level': 'INFO', 'propagate': False},
    },
}
if TESTING:
    for _logger in LOGGING['loggers'].values():
        _logger['level'] = 'WARNING'

# ==========================================================================
# DJANGO-AXES RATE LIMITING
# ==========================================================================
if TESTING:
    # Don't use axes in tests (it requires request object)
    AUTHENTICATION_BACKENDS = [
        'django.contrib.auth.backends.ModelBackend',
    ]
else:
    AUTHENTICATION_BACKENDS = [
        'axes.backends.AxesBackend',  # AxesBackend with ModelBackend fallback
        'django.contrib.auth.backends.ModelBackend',
    ]

# Lock out after 5 failed attempts
AXES_FAILURE_LIMIT = 5
# Lock out for 15 minutes
AXES_COOLOFF_TIME = timedelta(minutes=15)
# Lock based on username and IP for better security
AXES_LOCKOUT_PARAMETERS = ['username', 'ip_address']
# The login form posts "email", not "username"
AXES_USERNAME_FORM_FIELD = 'email'
# Reset attempts on successful login
AXES_RESET_ON_SUCCESS = True
AXES_ENABLED = not TESTING
