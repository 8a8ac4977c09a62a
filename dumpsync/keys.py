from hashlib import md5

from django.conf import settings
from django.utils import timezone

PARTITION_DATE_FORMAT = '%Y-%m-%d'


def derive_partition_key(now=None, salt=''):
    '''
    Return the per-day partition identifier: md5 of the fields, followed by
    the plain date for readability.

    The key is stable for a calendar day and shared by every file
    processed that day; the md5 is not used for any security purpose.
    '''
    if now is None:
        now = timezone.localdate()
    date = now.strftime(PARTITION_DATE_FORMAT)
    fields = [date]
    if salt:
        fields.append(salt)
    digest = md5(''.join(fields).encode('utf-8')).hexdigest()
    return '{}-{}'.format(digest, date)


def derive_storage_key(
        file, partition_key, daily_root, current_term_root,
        current_term_table='requests'):
    # Current-term files accumulate in one flat path, the Reconciler
    # prunes them. All other tables get a fresh folder every day.
    if file.table != current_term_table:
        return '{}/{}/{}/{}'.format(
            daily_root, partition_key, file.table, file.filename)
    return '{}/{}/{}'.format(current_term_root, file.table, file.filename)


class StorageLayout:
    '''
    The object-store paths of a deployment.
    '''
    def __init__(
            self, daily_root, current_term_root, current_term_table='requests',
            salt=''):
        self.daily_root = daily_root
        self.current_term_root = current_term_root
        self.current_term_table = current_term_table
        self.salt = salt

    @classmethod
    def from_settings(cls):
        return cls(
            daily_root=settings.DUMPSYNC_DAILY_ROOT,
            current_term_root=settings.DUMPSYNC_CURRENT_TERM_ROOT,
            current_term_table=settings.DUMPSYNC_CURRENT_TERM_TABLE,
            salt=settings.DUMPSYNC_PARTITION_SALT)

    def __repr__(self):
        return '<StorageLayout({!r}, {!r}, {!r})>'.format(
            self.daily_root, self.current_term_root, self.current_term_table)

    def partition_key(self, now=None):
        return derive_partition_key(now, salt=self.salt)

    def storage_key(self, file, partition_key):
        return derive_storage_key(
            file, partition_key, self.daily_root, self.current_term_root,
            self.current_term_table)

    @property
    def current_term_prefix(self):
        return '{}/{}/'.format(self.current_term_root, self.current_term_table)

    def filename_from_key(self, key):
        prefix = self.current_term_prefix
        assert key.startswith(prefix), (key, prefix)
        return key[len(prefix):]
