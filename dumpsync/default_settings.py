import os

TIME_ZONE = 'America/Los_Angeles'
LANGUAGE_CODE = 'en-us'

USE_I18N = False
USE_TZ = True  # must be True for Django-Q

# Make this unique, and don't share it with anybody.
SECRET_KEY = None

DEFAULT_AUTO_FIELD = 'django.db.models.AutoField'

INSTALLED_APPS = (
    'dumpsync',

    'django.contrib.contenttypes',

    'django_q',
)

# The bucket all data-dump files are mirrored into.
DUMPSYNC_BUCKET = None

# Day-partitioned tables end up in:
#   <DAILY_ROOT>/<md5(date[+salt])>-<date>/<table>/<filename>
# The current-term table ends up in:
#   <CURRENT_TERM_ROOT>/<table>/<filename>
# and is pruned against the manifest on every sync.
DUMPSYNC_DAILY_ROOT = 'canvas-data/daily'
DUMPSYNC_CURRENT_TERM_ROOT = 'canvas-data/current-term'
DUMPSYNC_CURRENT_TERM_TABLE = 'requests'
DUMPSYNC_PARTITION_SALT = ''

# Keys per batch delete; the object store accepts at most 1000.
DUMPSYNC_DELETE_BATCH_SIZE = 999

# Threads streaming provider responses into the object store.
DUMPSYNC_TRANSFER_WORKERS = 4

# By default a provider error status (403 on an expired url, 404, ...) is
# logged and the file is skipped. Set to True to raise a StatusError from
# ensure_uploaded instead.
DUMPSYNC_STRICT_PROVIDER_STATUS = False

DUMPSYNC_OBJECT_STORE = {
    'ENGINE': 'dumpsync.storage.s3.S3ObjectStore',
    'REGION': None,
    'ACCELERATE': True,
    'CONNECT_TIMEOUT': 60,
    'READ_TIMEOUT': 60,
}

DUMPSYNC_PROVIDER = {
    'CONNECT_TIMEOUT': 60,
    'READ_TIMEOUT': 60,
}

# Q_CLUSTER_QUEUE is the queue the qcluster worker should process.
Q_MAIN_QUEUE = 'main'
Q_CLUSTER_QUEUE = os.environ.get('Q_CLUSTER_QUEUE', Q_MAIN_QUEUE)

Q_CLUSTER = {
    'name': 'dumpsync',  # redis prefix AND default broker
    'workers': 2,       # a sync has its own transfer threads
    'timeout': 86300,   # almost a day
    'retry': 86400,     # an entire day, never retry a running sync
    'max_attempts': 1,  # no retries: the next sync picks up missed files
    'catch_up': False,  # no catching up of missed scheduled tasks
    'compress': False,  # don't care about payload size
    'save_limit': 250,
    'label': 'Task Queue',
    'redis': {
        'host': '127.0.0.1',
        'port': 6379,
        'db': 0,
    },
}


LOGGING = {
    'version': 1,
    'disable_existing_loggers': True,
    'filters': {
        'require_debug_false': {
            '()': 'django.utils.log.RequireDebugFalse',
        },
        'require_debug_true': {
            '()': 'django.utils.log.RequireDebugTrue',
        },
    },
    'formatters': {
        'simple': {
            'format': (
                '%(asctime)s [dumpsync/%(process)5d:%(threadName)-10.10s] '
                '[%(levelname)-3.3s] %(message)s (%(name)s)'),
        },
    },
    'handlers': {
        'null': {
            'level': 'DEBUG',
            'class': 'logging.NullHandler',
        },
        'mail_admins_err': {
            'level': 'ERROR',
            'filters': ['require_debug_false'],
            'class': 'django.utils.log.AdminEmailHandler',
        },
        'console': {
            'level': 'DEBUG',
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
            'filters': ['require_debug_true'],
        },
        'logfile': {
            'level': 'INFO',
            'class': 'logging.handlers.WatchedFileHandler',
            'formatter': 'simple',
            'filename': '/var/log/dumpsync/core.log',
            # Delay, so management commands don't try to open these
            # unless they have to.
            'delay': True,
        },
        'djangoqlogfile': {
            'level': 'DEBUG',
            'class': 'logging.handlers.WatchedFileHandler',
            'formatter': 'simple',
            'filename': '/var/log/dumpsync/queue.log',
            'delay': True,
        },
    },
    'loggers': {
        'dumpsync': {
            'handlers': ['console', 'logfile', 'mail_admins_err'],
            'level': 'DEBUG',
            'propagate': False,
        },
        'botocore': {
            'handlers': ['logfile'],
            'level': 'WARNING',
        },
        'django-q': {
            'handlers': ['djangoqlogfile'],
            'level': 'DEBUG',
        },
        'django': {
            'handlers': ['console'],
        },
        'py.warnings': {
            'handlers': ['console'],
        },
    }
}
