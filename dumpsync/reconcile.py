import logging

from .exceptions import DeleteError, ListError
from .storage.base import StoreError
from .utils import chunked

logger = logging.getLogger(__name__)

# One below the store maximum of 1000 keys per batch delete.
DELETE_BATCH_SIZE = 999


class Reconciler:
    '''
    Finds current-term objects that the provider no longer lists.
    '''
    def __init__(self, store, layout):
        self.store = store
        self.layout = layout

    def find_obsolete(self, manifest):
        '''
        Return the keys under the current-term prefix whose filename is not
        in manifest, in listing order. Raises ListError if the listing
        fails; nothing is reconciled in that case.
        '''
        prefix = self.layout.current_term_prefix
        try:
            keys = list(self.store.list_by_prefix(prefix))
        except StoreError as e:
            logger.error('Could not list the objects under %s: %s', prefix, e)
            raise ListError(
                'listing {} in {} failed: {}'.format(prefix, self.store, e)
            ) from e
        logger.info('Got %d objects with prefix %s', len(keys), prefix)

        current = frozenset(manifest)
        obsolete = [
            key for key in keys
            if self.layout.filename_from_key(key) not in current]
        logger.info(
            'Marked %d of %d objects as obsolete', len(obsolete), len(keys))
        return obsolete


class BatchDeleter:
    '''
    Deletes keys in sequential batches, stopping at the first failure.
    '''
    def __init__(self, store, batch_size=DELETE_BATCH_SIZE):
        if not (1 <= batch_size <= DELETE_BATCH_SIZE):
            raise ValueError(
                'batch size must be between 1 and {}, got {!r}'.format(
                    DELETE_BATCH_SIZE, batch_size))
        self.store = store
        self.batch_size = batch_size

    def delete_all(self, keys):
        '''
        Delete all keys and return how many were deleted.

        Raises DeleteError when a batch fails. Earlier batches stay
        deleted, later batches are not attempted.
        '''
        if not keys:
            logger.info('No obsolete files found')
            return 0

        chunks = chunked(keys, self.batch_size)
        logger.info(
            'No. of obsolete files marked for batch deletion: %d '
            '(%d batches)', len(keys), len(chunks))

        deleted = 0
        for index, chunk in enumerate(chunks, 1):
            try:
                self.store.delete_batch(chunk)
            except StoreError as e:
                logger.error(
                    'Batch %d/%d of %d keys failed after deleting %d: %s',
                    index, len(chunks), len(chunk), deleted, e)
                raise DeleteError(
                    'batch {}/{} failed: {}'.format(index, len(chunks), e),
                    keys=chunk, deleted=deleted) from e
            deleted += len(chunk)
            logger.info(
                'Deleted batch %d/%d (%d keys)', index, len(chunks),
                len(chunk))

        logger.info('Completed clean up of %d obsolete files', deleted)
        return deleted
