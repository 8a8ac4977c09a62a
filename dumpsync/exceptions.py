from .status import ErrorKind, classify_status


class DumpSyncError(Exception):
    pass


class TransportError(DumpSyncError):
    '''
    The provider or the object store could not be reached at all.
    '''
    kind = ErrorKind.TRANSPORT


class StatusError(DumpSyncError):
    '''
    A request was answered with an unexpected status code.
    '''
    def __init__(self, code, message=''):
        super().__init__(code, message)
        self.code = code
        self.message = message

    @property
    def kind(self):
        return classify_status(self.code)

    def __str__(self):
        return '{} ({}): {}'.format(self.code, self.kind.value, self.message)


class UploadError(DumpSyncError):
    '''
    The existence check refused to tell whether a file was uploaded, so no
    upload was attempted. status is None for transport failures.
    '''
    def __init__(self, kind, status, message):
        super().__init__(kind, status, message)
        self.kind = kind
        self.status = status
        self.message = message

    def __str__(self):
        return '{} ({}): {}'.format(self.status, self.kind.value, self.message)


class ListError(DumpSyncError):
    pass


class DeleteError(DumpSyncError):
    '''
    A batch delete failed. keys holds the chunk that failed; deleted is the
    number of keys that were removed by earlier chunks (and stay removed).
    '''
    def __init__(self, message, keys=(), deleted=0):
        super().__init__(message)
        self.keys = list(keys)
        self.deleted = deleted
