"""
Django settings for hirenest project.
"""

from pathlib import Path
import os

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent


# -------------------------
# Basic / environment
# -------------------------
SECRET_KEY = os.environ.get('HIRENEST_SECRET_KEY', 'django-insecure-dev-secret-for-local')

DEBUG = os.environ.get('HIRENEST_DEBUG', 'True').lower() in ('1', 'true', 'yes')

ALLOWED_HOSTS = (
    os.environ.get('HIRENEST_ALLOWED_HOSTS', '')
    .split(',') if os.environ.get('HIRENEST_ALLOWED_HOSTS') else []
)


# -------------------------
# Installed apps / middleware
# -------------------------
INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # project apps
    'accounts',
    'jobs',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'hirenest.middleware.IdentityMiddleware',
    'hirenest.middleware.ApiErrorMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'hirenest.urls'


# -------------------------
# Templates (admin site only, the API speaks JSON)
# -------------------------
TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]


WSGI_APPLICATION = 'hirenest.wsgi.application'


# -------------------------
# Database (sqlite for dev)
# -------------------------
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.environ.get('HIRENEST_DB_PATH', BASE_DIR / 'db.sqlite3'),
    }
}


# -------------------------
# Password validation
# -------------------------
AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {
        'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator',
        'OPTIONS': {'min_length': 6},
    },
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]


# -------------------------
# Internationalization
# -------------------------
LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.environ.get('HIRENEST_TIME_ZONE', 'UTC')
USE_I18N = True
USE_TZ = True


# -------------------------
# Static & media (media is the blob store for photos and resumes)
# -------------------------
STATIC_URL = '/static/'
STATIC_ROOT = os.environ.get('HIRENEST_STATIC_ROOT', os.path.join(BASE_DIR, 'staticfiles'))

MEDIA_URL = '/media/'
MEDIA_ROOT = os.environ.get('HIRENEST_MEDIA_ROOT', os.path.join(BASE_DIR, 'media'))


# -------------------------
# Auth
# -------------------------
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'
AUTH_USER_MODEL = 'accounts.User'

# Operator tokens: signed, expiring credentials for out-of-band admin access.
# Leaving the secret empty disables the operator path entirely.
OPERATOR_TOKEN_SECRET = os.environ.get('HIRENEST_OPERATOR_SECRET', '')
OPERATOR_TOKEN_MAX_AGE = int(os.environ.get('HIRENEST_OPERATOR_TOKEN_MAX_AGE', 8 * 60 * 60))
OPERATOR_TOKEN_HEADER = 'HTTP_X_OPERATOR_TOKEN'


# -------------------------
# Uploads
# -------------------------
ASSET_UPLOAD_RULES = {
    'photo': {
        'folder': 'photos',
        'content_types': ('image/jpeg', 'image/png', 'image/webp'),
        'max_bytes': int(os.environ.get('HIRENEST_PHOTO_MAX_MB', 5)) * 1024 * 1024,
        'profile_field': 'photo_url',
    },
    'resume': {
        'folder': 'resumes',
        'content_types': ('application/pdf',),
        'max_bytes': int(os.environ.get('HIRENEST_RESUME_MAX_MB', 10)) * 1024 * 1024,
        'profile_field': 'resume_url',
    },
}


# -------------------------
# Listing defaults
# -------------------------
JOBS_PAGE_SIZE = 12
ADMIN_USERS_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
FEED_PAGE_SIZE = 50


# -------------------------
# Logging (basic)
# -------------------------
LOG_LEVEL = os.environ.get('HIRENEST_LOG_LEVEL', 'INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {'format': '%(asctime)s %(levelname)s %(name)s: %(message)s'},
    },
    'handlers': {
        'console': {'class': 'logging.StreamHandler', 'formatter': 'simple'},
    },
    'root': {
        'handlers': ['console'],
        'level': LOG_LEVEL,
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO' if DEBUG else 'WARNING',
            'propagate': False,
        },
        'accounts': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'jobs': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'hirenest': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
    },
}


# -------------------------
# Security (production suggestions)
# -------------------------
# In production, you should set these via environment variables:
# SECURE_HSTS_SECONDS = 31536000
# SECURE_SSL_REDIRECT = True
# SESSION_COOKIE_SECURE = True
# CSRF_COOKIE_SECURE = True
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = 'Lax'
