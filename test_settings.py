from dumpsync.default_settings import *  # noqa
from dumpsync.default_settings import LOGGING

DUMPSYNC_BUCKET = 'test-bucket'

DUMPSYNC_OBJECT_STORE = {
    'ENGINE': 'dumpsync.storage.dummy.DummyObjectStore',
    'NAME': 'Dummy Store',
}

DUMPSYNC_DAILY_ROOT = 'canvas-data/daily'
DUMPSYNC_CURRENT_TERM_ROOT = 'canvas-data/current-term'

DUMPSYNC_TRANSFER_WORKERS = 2

MANAGERS = ADMINS = ()

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

# Replace file logging with output to stderr.
for key, handler in LOGGING['handlers'].items():
    if handler['class'] == 'logging.handlers.WatchedFileHandler':
        handler['class'] = 'logging.StreamHandler'
        del handler['filename']
        del handler['delay']

SECRET_KEY = 'T3$TK3Y'
