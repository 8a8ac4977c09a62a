from unittest.mock import patch

from dumpsync.exceptions import DeleteError, ListError
from dumpsync.reconcile import BatchDeleter, Reconciler
from dumpsync.storage.base import (
    StoreBatchError, StoreStatusError, StoreTransportError)
from dumpsync.tests.base import DumpSyncTestCase


class ReconcilerTestCase(DumpSyncTestCase):
    def setUp(self):
        super().setUp()
        self.store = self.get_dummy_store()
        self.reconciler = Reconciler(self.store, self.layout)

    def test_scenario(self):
        for name in ('foo.gz', 'bar.gz', 'baz.gz'):
            self.store.add('current-term/requests/{}'.format(name))
        # Other prefixes are never touched.
        self.store.add('daily/abc-2024-03-01/courses/bar.gz')
        self.store.add('current-term/requestsx/bar.gz')

        obsolete = self.reconciler.find_obsolete({'foo.gz', 'baz.gz'})
        self.assertEqual(obsolete, ['current-term/requests/bar.gz'])
        self.assertIn(
            ('list_by_prefix', 'current-term/requests/'), self.store.calls)

    def test_completeness(self):
        names = ['requests-{:03d}.gz'.format(i) for i in range(25)]
        for name in names:
            self.store.add('current-term/requests/{}'.format(name))
        manifest = names[::3] + ['not-in-the-store.gz']
        manifest += manifest  # duplicates do not matter

        obsolete = self.reconciler.find_obsolete(manifest)
        kept = [
            'current-term/requests/{}'.format(name) for name in names
            if name in manifest]
        # Every listed key is either kept or obsolete, exactly once.
        self.assertEqual(len(obsolete) + len(kept), len(names))
        self.assertFalse(set(obsolete) & set(kept))
        self.assertEqual(obsolete, [
            'current-term/requests/{}'.format(name) for name in names
            if name not in manifest])

    def test_listing_order(self):
        keys = ['current-term/requests/{}'.format(i) for i in 'cab']
        with patch.object(self.store, 'list_by_prefix', return_value=keys):
            self.assertEqual(self.reconciler.find_obsolete([]), keys)

    def test_empty(self):
        self.assertEqual(self.reconciler.find_obsolete(['a.gz']), [])

    def test_list_failure(self):
        def broken_listing(prefix):
            yield 'current-term/requests/first-page.gz'
            raise StoreTransportError('connection reset')

        for side_effect in (
                StoreStatusError(403, 'Access Denied'), broken_listing):
            with patch.object(
                    self.store, 'list_by_prefix', side_effect=side_effect), \
                    self.assertLogs('dumpsync.reconcile', level='ERROR'), \
                    self.assertRaises(ListError):
                self.reconciler.find_obsolete([])


class BatchDeleterTestCase(DumpSyncTestCase):
    def setUp(self):
        super().setUp()
        self.store = self.get_dummy_store()
        self.keys = ['current-term/requests/{:05d}.gz'.format(i)
                     for i in range(2500)]
        for key in self.keys:
            self.store.add(key)

    def test_nothing_to_delete(self):
        with patch.object(self.store, 'delete_batch') as m:
            self.assertEqual(BatchDeleter(self.store).delete_all([]), 0)
        m.assert_not_called()

    def test_chunks(self):
        deleted = BatchDeleter(self.store).delete_all(self.keys)

        self.assertEqual(deleted, 2500)
        self.assertEqual(self.store.objects, {})
        batches = [i[1] for i in self.store.calls if i[0] == 'delete_batch']
        self.assertEqual([len(i) for i in batches], [999, 999, 502])
        self.assertEqual([key for i in batches for key in i], self.keys)

    def test_short_circuit(self):
        calls = []
        real_delete_batch = self.store.delete_batch

        def delete_batch(keys):
            calls.append(keys)
            if len(calls) == 2:
                raise StoreStatusError(503, 'Slow Down')
            real_delete_batch(keys)

        with patch.object(self.store, 'delete_batch', new=delete_batch), \
                self.assertLogs('dumpsync.reconcile', level='ERROR'), \
                self.assertRaises(DeleteError) as cm:
            BatchDeleter(self.store).delete_all(self.keys)

        # The third chunk was never attempted.
        self.assertEqual(len(calls), 2)
        self.assertEqual(cm.exception.deleted, 999)
        self.assertEqual(cm.exception.keys, self.keys[999:1998])
        self.assertIsInstance(cm.exception.__cause__, StoreStatusError)
        # The first chunk is gone for good, the rest is still there.
        self.assertEqual(list(self.store.objects), self.keys[999:])

    def test_partial_batch_errors(self):
        errors = [{'Key': self.keys[0], 'Code': 'AccessDenied'}]
        with patch.object(
                self.store, 'delete_batch',
                side_effect=StoreBatchError(errors)), \
                self.assertLogs('dumpsync.reconcile', level='ERROR'), \
                self.assertRaises(DeleteError) as cm:
            BatchDeleter(self.store).delete_all(self.keys)
        self.assertEqual(cm.exception.deleted, 0)

    def test_batch_size(self):
        BatchDeleter(self.store, batch_size=1000 - 1)
        with self.assertRaises(ValueError):
            BatchDeleter(self.store, batch_size=1000)
        with self.assertRaises(ValueError):
            BatchDeleter(self.store, batch_size=0)

        BatchDeleter(self.store, batch_size=1000 - 1).delete_all(
            self.keys[:10])
        deleter = BatchDeleter(self.store, batch_size=4)
        self.assertEqual(deleter.delete_all(self.keys[10:20]), 10)
        batches = [i[1] for i in self.store.calls if i[0] == 'delete_batch']
        self.assertEqual([len(i) for i in batches], [10, 4, 4, 2])
