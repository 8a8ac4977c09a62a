from io import BytesIO
from unittest.mock import Mock, patch

from botocore.exceptions import ClientError, EndpointConnectionError
from django.core.exceptions import ImproperlyConfigured
from django.test import override_settings

from dumpsync.storage import load_object_store
from dumpsync.storage.base import (
    StoreBatchError, StoreStatusError, StoreTransportError)
from dumpsync.storage.dummy import DummyObjectStore
from dumpsync.storage.s3 import S3ObjectStore
from dumpsync.tests.base import DumpSyncTestCase


def client_error(status, code, operation='HeadObject'):
    return ClientError({
        'Error': {'Code': code, 'Message': ''},
        'ResponseMetadata': {'HTTPStatusCode': status},
    }, operation)


class ObjectStoreLoadingTestCase(DumpSyncTestCase):
    def test_config_loading(self):
        for config in ([], {}, {'NAME': 'no engine'}):
            with override_settings(DUMPSYNC_OBJECT_STORE=config), \
                    self.assertRaises(ImproperlyConfigured):
                load_object_store()

        with override_settings(DUMPSYNC_BUCKET=''), \
                self.assertRaises(ImproperlyConfigured):
            load_object_store()

    def test_load(self):
        store = load_object_store()
        self.assertIsInstance(store, DummyObjectStore)
        self.assertEqual(store.bucket, 'test-bucket')
        self.assertEqual(str(store), 'Dummy Store(test-bucket)')

        store = load_object_store({
            'ENGINE': 'dumpsync.storage.s3.S3ObjectStore',
            'BUCKET': 'other-bucket'})
        self.assertIsInstance(store, S3ObjectStore)
        self.assertEqual(store.bucket, 'other-bucket')
        self.assertEqual(store.name, 'S3ObjectStore')
        self.assertEqual(store.config['MAX_CONCURRENCY'], 4)


class DummyObjectStoreTestCase(DumpSyncTestCase):
    def test_objects(self):
        store = self.get_dummy_store()
        with self.assertRaises(StoreStatusError) as cm:
            store.head('a')
        self.assertTrue(cm.exception.is_not_found)

        store.put_stream('a', BytesIO(b'x' * 10000), {'ContentType': 'a/b'})
        self.assertEqual(
            store.head('a'), {'ContentType': 'a/b', 'ContentLength': 10000})
        # Another instance on the same bucket sees the object.
        self.assertIn('a', self.get_dummy_store().objects)
        self.assertNotIn('a', self.get_dummy_store('other').objects)

    def test_listing_and_delete(self):
        store = self.get_dummy_store()
        for key in ('p/c', 'p/a', 'q/a', 'p/b'):
            store.add(key)
        self.assertEqual(
            list(store.list_by_prefix('p/')), ['p/a', 'p/b', 'p/c'])

        store.delete_batch(['p/a', 'p/missing'])
        self.assertEqual(list(store.objects), ['p/c', 'q/a', 'p/b'])

        with self.assertRaises(StoreStatusError) as cm:
            store.delete_batch(['p/b'] * 1001)
        self.assertEqual(cm.exception.status, 400)
        self.assertIn('p/b', store.objects)


class S3ObjectStoreTestCase(DumpSyncTestCase):
    def setUp(self):
        super().setUp()
        config = {'BUCKET': 'data-lake'}
        S3ObjectStore.ensure_defaults(config)
        self.store = S3ObjectStore(config, 'data-lake')
        self.client = Mock()
        # The client is a cached property.
        self.store.__dict__['client'] = self.client

    def test_head(self):
        self.client.head_object.return_value = {
            'ResponseMetadata': {'HTTPHeaders': {'content-length': '3'}}}
        self.assertEqual(self.store.head('k'), {'content-length': '3'})
        self.client.head_object.assert_called_once_with(
            Bucket='data-lake', Key='k')

    def test_head_errors(self):
        for status, code in ((404, '404'), (403, '403'), (500, 'Internal')):
            self.client.head_object.side_effect = client_error(status, code)
            with self.assertRaises(StoreStatusError) as cm:
                self.store.head('k')
            self.assertEqual(cm.exception.status, status)
            self.assertEqual(cm.exception.is_not_found, status == 404)

        # Some S3 implementations only put the status in the code.
        self.client.head_object.side_effect = ClientError(
            {'Error': {'Code': '404'}}, 'HeadObject')
        with self.assertRaises(StoreStatusError) as cm:
            self.store.head('k')
        self.assertTrue(cm.exception.is_not_found)

        self.client.head_object.side_effect = EndpointConnectionError(
            endpoint_url='https://s3.example')
        with self.assertRaises(StoreTransportError):
            self.store.head('k')

    def test_put_stream(self):
        stream = BytesIO(b'data')
        metadata = {'ContentType': 'text/plain', 'ContentEncoding': 'gzip'}
        self.store.put_stream('k', stream, metadata)
        args, kwargs = self.client.upload_fileobj.call_args
        self.assertEqual(args, (stream, 'data-lake', 'k'))
        self.assertEqual(kwargs['ExtraArgs'], metadata)
        self.assertEqual(
            kwargs['Config'].multipart_chunksize, 8 * 1024 * 1024)

        self.client.upload_fileobj.side_effect = client_error(
            403, 'AccessDenied', 'PutObject')
        with self.assertRaises(StoreStatusError):
            self.store.put_stream('k', stream, metadata)

    def test_list_by_prefix(self):
        self.client.list_objects_v2.side_effect = [
            {'Contents': [{'Key': 'p/a'}, {'Key': 'p/b'}],
             'NextContinuationToken': 'page2'},
            {'Contents': [{'Key': 'p/c'}]},
        ]
        self.assertEqual(
            list(self.store.list_by_prefix('p/')), ['p/a', 'p/b', 'p/c'])
        calls = self.client.list_objects_v2.call_args_list
        self.assertEqual(len(calls), 2)
        self.assertNotIn('ContinuationToken', calls[0][1])
        self.assertEqual(calls[1][1]['ContinuationToken'], 'page2')
        self.assertEqual(calls[1][1]['Prefix'], 'p/')

    def test_list_empty(self):
        self.client.list_objects_v2.return_value = {'KeyCount': 0}
        self.assertEqual(list(self.store.list_by_prefix('p/')), [])

    def test_delete_batch(self):
        self.client.delete_objects.return_value = {}
        self.store.delete_batch(['a', 'b'])
        self.client.delete_objects.assert_called_once_with(
            Bucket='data-lake', Delete={
                'Objects': [{'Key': 'a'}, {'Key': 'b'}], 'Quiet': True})

        self.client.delete_objects.return_value = {
            'Errors': [{'Key': 'b', 'Code': 'AccessDenied'}]}
        with self.assertRaises(StoreBatchError) as cm:
            self.store.delete_batch(['a', 'b'])
        self.assertEqual(cm.exception.errors[0]['Key'], 'b')

        with self.assertRaises(StoreStatusError):
            self.store.delete_batch(['a'] * 1001)

    def test_close(self):
        self.store.close()
        self.client.close.assert_called_once_with()
        self.assertNotIn('client', self.store.__dict__)

        with patch('dumpsync.storage.s3.S3Client') as m:
            self.assertIs(self.store.client, m.return_value)
        self.assertEqual(m.call_args[0], ('s3',))
