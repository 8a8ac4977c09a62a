from concurrent.futures import ThreadPoolExecutor
import logging

from django.conf import settings

from .exceptions import (
    DumpSyncError, StatusError, TransportError, UploadError)
from .keys import StorageLayout
from .provider import ProviderSource
from .reconcile import BatchDeleter, DELETE_BATCH_SIZE, Reconciler
from .storage import load_object_store
from .uploader import ExistenceGatedUploader, TransferState, UploadOutcome

logger = logging.getLogger(__name__)


class SyncReport:
    """
    Counters for one or more sync runs.

    >>> r = SyncReport()
    >>> r.failures
    0
    >>> r.failed += 1
    >>> sum([r, r]).failed
    2
    """
    __slots__ = (
        'already_present', 'started', 'uploaded', 'skipped', 'failed',
        'upload_errors', 'obsolete', 'deleted', 'cleanup_error')

    def __init__(self):
        for attr in self.__slots__:
            setattr(self, attr, 0)
        self.cleanup_error = None

    @property
    def failures(self):
        return (
            self.skipped + self.failed + self.upload_errors
            + int(self.cleanup_error is not None))

    def __add__(self, other):
        "Add, so we can sum() these"
        new = self.__class__()
        for attr in self.__slots__[:-1]:
            setattr(new, attr, getattr(self, attr) + getattr(other, attr))
        new.cleanup_error = self.cleanup_error or other.cleanup_error
        return new

    def __radd__(self, other):
        "Reverse add, to make the sum() initial element work"
        assert other == 0, ('expected [0 + SyncReport()]', other)
        return self.__add__(self.__class__())

    def as_dict(self):
        ret = dict((attr, getattr(self, attr)) for attr in self.__slots__)
        ret['failures'] = self.failures
        if self.cleanup_error is not None:
            ret['cleanup_error'] = str(self.cleanup_error)
        return ret

    def __str__(self):
        return '{{{}}}'.format(', '.join(
            '{}: {}'.format(attr, value)
            for attr, value in self.as_dict().items()))

    def __repr__(self):
        return '<SyncReport({})>'.format(str(self))


class DumpSync:
    '''
    Mirrors provider files into the object store and prunes the
    current-term objects the provider no longer lists.

    DumpSync owns its collaborators: use it as a context manager (or call
    close()) so the transfers are awaited and the clients released.
    '''
    def __init__(
            self, store, source, layout, executor=None,
            batch_size=DELETE_BATCH_SIZE, strict=False):
        self.store = store
        self.source = source
        self.layout = layout
        self.executor = executor or ThreadPoolExecutor(
            max_workers=4, thread_name_prefix='dumpsync')
        self.uploader = ExistenceGatedUploader(
            store, source, layout, self.executor, strict=strict)
        self.reconciler = Reconciler(store, layout)
        self.deleter = BatchDeleter(store, batch_size=batch_size)

    @classmethod
    def from_settings(cls):
        executor = ThreadPoolExecutor(
            max_workers=settings.DUMPSYNC_TRANSFER_WORKERS,
            thread_name_prefix='dumpsync')
        return cls(
            store=load_object_store(),
            source=ProviderSource.from_settings(),
            layout=StorageLayout.from_settings(),
            executor=executor,
            batch_size=settings.DUMPSYNC_DELETE_BATCH_SIZE,
            strict=settings.DUMPSYNC_STRICT_PROVIDER_STATUS)

    def __enter__(self):
        return self

    def __exit__(self, type, value, traceback):
        self.close()

    def close(self):
        # Waits for running transfers; they need the store and the source.
        self.executor.shutdown(wait=True)
        self.source.close()
        self.store.close()

    def sync_files(self, files, now=None):
        '''
        Ensure every file is uploaded. Returns (report, results); the
        results hold the transfers that may still be running.
        '''
        report = SyncReport()
        results = []
        partition_key = self.layout.partition_key(now)
        logger.info(
            'Syncing %d files, partition %s', len(files), partition_key)

        for file in files:
            try:
                result = self.uploader.ensure_uploaded(file, partition_key)
            except UploadError:
                # Already logged; no retries here.
                report.upload_errors += 1
                continue
            except StatusError:
                # Strict uploader: the provider refused the file.
                report.skipped += 1
                continue
            except TransportError:
                report.failed += 1
                continue
            if result.outcome == UploadOutcome.ALREADY_PRESENT:
                report.already_present += 1
            else:
                report.started += 1
            results.append(result)

        return report, results

    def wait(self, results, report, timeout=None):
        '''
        Wait for the transfers in results and count how they ended.
        '''
        for result in results:
            if result.transfer is None:
                continue
            transfer_result = result.transfer.wait(timeout)
            if transfer_result.state == TransferState.UPLOADED:
                report.uploaded += 1
            elif transfer_result.state == TransferState.SKIPPED:
                report.skipped += 1
            else:
                report.failed += 1
        return report

    def clean_up(self, manifest, report=None):
        '''
        Delete the current-term objects that are not in manifest.

        Raises ListError or DeleteError; the report records the error too.
        '''
        if report is None:
            report = SyncReport()
        try:
            obsolete = self.reconciler.find_obsolete(manifest)
            report.obsolete += len(obsolete)
            report.deleted += self.deleter.delete_all(obsolete)
        except DumpSyncError as e:
            if hasattr(e, 'deleted'):
                report.deleted += e.deleted
            report.cleanup_error = e
            raise
        return report

    def run(self, files, manifest=None, cleanup=True, timeout=None):
        '''
        Upload files, wait for the transfers, then prune obsolete
        current-term objects. The manifest defaults to the filenames of
        files.

        Cleanup errors are logged and left in the report, so the caller
        decides whether a partial cleanup is fatal.
        '''
        files = list(files)
        report, results = self.sync_files(files)
        self.wait(results, report, timeout)

        if cleanup:
            if manifest is None:
                manifest = [i.filename for i in files]
            try:
                self.clean_up(manifest, report)
            except DumpSyncError as e:
                logger.error('Clean up of obsolete files failed: %s', e)

        logger.info('Sync done: %s', report)
        return report
