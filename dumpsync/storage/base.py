import logging

from dumpsync.exceptions import DumpSyncError, StatusError, TransportError

logger = logging.getLogger(__name__)

# Most object stores (S3 included) refuse batch deletes of more keys.
MAX_DELETE_BATCH = 1000


class StoreError(DumpSyncError):
    pass


class StoreStatusError(StoreError, StatusError):
    '''
    The store answered with an error status.
    '''
    def __init__(self, status, message=''):
        StatusError.__init__(self, status, message)

    @property
    def status(self):
        return self.code

    @property
    def is_not_found(self):
        return self.code == 404


class StoreTransportError(StoreError, TransportError):
    '''
    The store could not be reached, or failed without a status.
    '''
    pass


class StoreBatchError(StoreError):
    '''
    A batch delete was accepted, but some keys could not be deleted.
    '''
    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__('{} keys could not be deleted, first: {!r}'.format(
            len(self.errors), self.errors[0] if self.errors else None))


class ObjectStore(object):
    '''
    Private/friend parts for object store backends.

    Backends translate their client errors into StoreStatusError (the
    store returned a status) or StoreTransportError (it did not) so
    callers never have to inspect library specific exceptions.
    '''
    @classmethod
    def ensure_defaults(cls, config):
        config.setdefault('NAME', cls.__name__)

    def __init__(self, config, bucket):
        self.config = config
        self.name = config['NAME']
        self.bucket = bucket

    def __str__(self):
        return '{}({})'.format(self.name, self.bucket)

    def close(self):
        pass

    def head(self, key):
        '''
        Return a dict of object metadata if the key exists.

        Raises StoreStatusError with status 404 if it does not.
        '''
        raise NotImplementedError()

    def put_stream(self, key, stream, metadata):
        '''
        Consume the file-like stream into a new object at key.

        Blocks until the upload has completed. metadata holds the
        ContentType, ContentEncoding and ServerSideEncryption values.
        '''
        raise NotImplementedError()

    def list_by_prefix(self, prefix):
        '''
        Return an iterator over all keys starting with prefix, in the order
        the store lists them. Pagination is handled here.
        '''
        raise NotImplementedError()

    def delete_batch(self, keys):
        '''
        Delete up to MAX_DELETE_BATCH keys in a single request.
        '''
        raise NotImplementedError()

    def check_batch(self, keys):
        if len(keys) > MAX_DELETE_BATCH:
            raise StoreStatusError(400, (
                'batch delete of {} keys exceeds the maximum of {}'.format(
                    len(keys), MAX_DELETE_BATCH)))
