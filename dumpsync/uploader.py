from collections import namedtuple
from concurrent.futures import Future
from enum import Enum
import logging
import time

from .exceptions import StatusError, TransportError, UploadError
from .status import ErrorKind, classify_status
from .storage.base import StoreStatusError, StoreTransportError
from .utils import human_duration

logger = logging.getLogger(__name__)

'''
Uploads run in two steps:
 - ensure_uploaded: synchronous. HEAD the storage key; when the object is
   absent, GET the file from the provider and, on a 200, submit the
   streaming upload to the executor.
 - _stream: runs on the executor. Pipes the response body into the object
   store and resolves the Transfer.

The caller is acknowledged as soon as the upload is submitted. A non-200
provider status is logged and acknowledged too (the file is simply not
uploaded) unless the uploader is strict; the Transfer records what
happened either way.
'''

UPLOAD_METADATA = {
    'ContentType': 'text/plain',
    'ContentEncoding': 'gzip',
    'ServerSideEncryption': 'AES256',
}

_HEAD_FAILURE_MESSAGES = {
    ErrorKind.FORBIDDEN: (
        'Possible object store authorization failure. Check permissions'),
    ErrorKind.BAD_REQUEST: (
        'Possible bad request or object store params failure. Check if '
        'multi part uploads or transfer acceleration is enabled'),
    ErrorKind.TRANSPORT: 'Unable to reach the object store',
}


class UploadOutcome(Enum):
    ALREADY_PRESENT = 'already_present'
    UPLOAD_STARTED = 'upload_started'


class TransferState(Enum):
    UPLOADED = 'uploaded'
    SKIPPED = 'skipped'     # provider did not answer 200
    FAILED = 'failed'       # transport or streaming failure


class TransferResult:
    def __init__(
            self, file, key, state, kind=None, status=None, error=None,
            duration=None):
        self.file = file
        self.key = key
        self.state = state
        self.kind = kind
        self.status = status
        self.error = error
        self.duration = duration

    def __repr__(self):
        return '<TransferResult({}, {}, {})>'.format(
            self.file, self.state.value, self.kind and self.kind.value)


class Transfer:
    '''
    Handle on a (possibly still running) upload.
    '''
    def __init__(self, file, key, future):
        self.file = file
        self.key = key
        self.future = future

    @classmethod
    def resolved(cls, result):
        future = Future()
        future.set_result(result)
        return cls(result.file, result.key, future)

    def done(self):
        return self.future.done()

    def wait(self, timeout=None):
        '''
        Block until the upload has finished and return its TransferResult.
        Raises concurrent.futures.TimeoutError if it did not finish in time.
        '''
        return self.future.result(timeout)


class UploadResult(namedtuple('UploadResult', 'file key outcome transfer')):
    __slots__ = ()


class ExistenceGatedUploader:
    def __init__(self, store, source, layout, executor, strict=False):
        self.store = store
        self.source = source
        self.layout = layout
        self.executor = executor
        self.strict = strict

    def ensure_uploaded(self, file, partition_key=None):
        '''
        Upload file unless its storage key already exists.

        Returns an UploadResult; raises UploadError if the existence check
        failed with anything other than "not found".
        '''
        if partition_key is None:
            partition_key = self.layout.partition_key()
        key = self.layout.storage_key(file, partition_key)

        try:
            self.store.head(key)
        except StoreStatusError as e:
            if not e.is_not_found:
                raise self.refused(file, key, e.kind, e.status, e) from e
        except StoreTransportError as e:
            raise self.refused(file, key, ErrorKind.TRANSPORT, None, e) from e
        else:
            logger.info('[%s] File already exists. Skipping', file)
            return UploadResult(
                file, key, UploadOutcome.ALREADY_PRESENT, None)

        logger.info(
            '[%s] File not uploaded previously. Uploading to %s', file, key)
        transfer = self.start_transfer(file, key)
        return UploadResult(file, key, UploadOutcome.UPLOAD_STARTED, transfer)

    def refused(self, file, key, kind, status, exc):
        message = _HEAD_FAILURE_MESSAGES.get(
            kind, 'Possibly internal server errors. Refer status code')
        logger.error('[%s] %s (status %s): %s', file, message, status, exc)
        return UploadError(kind, status, str(exc))

    def start_transfer(self, file, key):
        try:
            response = self.source.open(file.url)
        except TransportError as e:
            logger.error(
                '[%s] %s: %s', file, ErrorKind.TRANSPORT.provider_message, e)
            if self.strict:
                raise
            return Transfer.resolved(TransferResult(
                file, key, TransferState.FAILED, kind=ErrorKind.TRANSPORT,
                error=e))

        if response.status_code != 200:
            response.close()
            kind = classify_status(response.status_code)
            logger.error(
                '[%s] Provider returned %d: %s', file, response.status_code,
                kind.provider_message)
            if self.strict:
                raise StatusError(response.status_code, kind.provider_message)
            return Transfer.resolved(TransferResult(
                file, key, TransferState.SKIPPED, kind=kind,
                status=response.status_code))

        try:
            future = self.executor.submit(self._stream, file, key, response)
        except RuntimeError:
            # Executor shut down; _stream will never close the response.
            response.close()
            raise
        logger.info('[%s] Uploading new data dump to %s', file, key)
        return Transfer(file, key, future)

    def _stream(self, file, key, response):
        start = time.monotonic()
        try:
            self.store.put_stream(key, response.raw, UPLOAD_METADATA)
        except Exception as e:
            # Runs on the executor: the failure is reported through the
            # TransferResult. No retry, no cleanup of partial uploads.
            duration = time.monotonic() - start
            logger.error(
                '[%s] Error streaming file to %s: %s', file, key, e)
            return TransferResult(
                file, key, TransferState.FAILED,
                kind=_error_kind(e),
                status=getattr(e, 'code', None), error=e, duration=duration)
        finally:
            response.close()

        duration = time.monotonic() - start
        logger.info(
            '[%s] Finished multi part upload to %s in %s', file, key,
            human_duration(duration))
        return TransferResult(
            file, key, TransferState.UPLOADED, duration=duration)


def _error_kind(exc):
    kind = getattr(exc, 'kind', None)
    if kind is not None:
        return kind
    if isinstance(exc, OSError):
        return ErrorKind.TRANSPORT
    return ErrorKind.UNHANDLED_STATUS
