from dumpsync.default_settings import *  # noqa
from dumpsync.default_settings import LOGGING  # fix flake warning

# Make this unique, and don't share it with anybody.
SECRET_KEY = 'FIXMEFIXMEFIXME'

# The bucket the data-dump files are mirrored into.
DUMPSYNC_BUCKET = 'my-data-lake'

# Object store engine. ENGINE is required, the other keys are passed to the
# store class in the config parameter.
# Leave the credentials out to use the boto3 lookup (environment variables,
# ~/.aws/credentials, instance profile).
DUMPSYNC_OBJECT_STORE = {
    'ENGINE': 'dumpsync.storage.s3.S3ObjectStore',
    'REGION': 'us-west-2',
    # 'ACCESS_KEY_ID': 'AKIA...',
    # 'SECRET_ACCESS_KEY': '...',
    # Non-AWS S3 (e.g. Minio) needs an endpoint and no acceleration.
    # 'ENDPOINT': 'https://minio.example.com',
    'ACCELERATE': True,
    'CONNECT_TIMEOUT': 60,
    'READ_TIMEOUT': 60,
    # Memory use of a transfer is about MULTIPART_CHUNKSIZE * MAX_CONCURRENCY.
    'MULTIPART_CHUNKSIZE': 8 * 1024 * 1024,
    'MAX_CONCURRENCY': 4,
}

# Where the files end up in the bucket.
DUMPSYNC_DAILY_ROOT = 'canvas-data/daily'
DUMPSYNC_CURRENT_TERM_ROOT = 'canvas-data/current-term'

MANAGERS = ADMINS = (
    # ('My Name', 'myname@example.com'),
)
DEFAULT_FROM_EMAIL = 'support@example.com'
SERVER_EMAIL = 'dumpsync@example.com'
EMAIL_SUBJECT_PREFIX = '[DumpSync] '

# The database only holds the django-q task results.
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': '/var/lib/dumpsync/dumpsync.sqlite3',
    }
}

# Log to stderr instead of to files.
# for key, handler in LOGGING['handlers'].items():
#     if handler['class'] == 'logging.handlers.WatchedFileHandler':
#         handler['class'] = 'logging.StreamHandler'
#         del handler['filename']
#         del handler['delay']
