import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'automata-development-key')

DEBUG = os.environ.get('DJANGO_DEBUG', '1') == '1'

ALLOWED_HOSTS = ['localhost', '127.0.0.1', 'testserver']

INSTALLED_APPS = [
    'django.contrib.sessions',
    'automata',
]

MIDDLEWARE = [
    'django.middleware.common.CommonMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
]

ROOT_URLCONF = 'automata_site.urls'

# Automata live only as long as the browser session; no database is involved
DATABASES = {}
SESSION_ENGINE = 'django.contrib.sessions.backends.signed_cookies'

USE_TZ = True

AUTOMATA = {
    'NFA_MAX_PATHS': int(os.environ.get('AUTOMATA_NFA_MAX_PATHS', 10000)),
    'NFA_DEDUPLICATE_PATHS': os.environ.get('AUTOMATA_NFA_DEDUPLICATE_PATHS', '0') == '1',
    'SESSION_KEY': 'automaton',
}

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'automata': {
            'handlers': ['console'],
            'level': os.environ.get('AUTOMATA_LOG_LEVEL', 'WARNING'),
            'propagate': False,
        },
    },
}
