from .base import *

DEBUG = False

SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

ALLOWED_HOSTS = ['testserver']

# admin tests create superusers
PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

# status changes log at INFO; keep test output quiet
LOGGING['loggers']['maksuturva']['level'] = 'WARNING'
