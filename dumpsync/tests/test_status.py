from unittest import TestCase

from dumpsync.exceptions import (
    DeleteError, StatusError, TransportError, UploadError)
from dumpsync.status import ErrorKind, classify_status
from dumpsync.storage.base import (
    StoreBatchError, StoreError, StoreStatusError, StoreTransportError)


class ClassifyStatusTestCase(TestCase):
    def test_known_codes(self):
        self.assertEqual(classify_status(400), ErrorKind.BAD_REQUEST)
        self.assertEqual(classify_status(403), ErrorKind.FORBIDDEN)
        self.assertEqual(classify_status(404), ErrorKind.NOT_FOUND)
        self.assertEqual(classify_status(500), ErrorKind.INTERNAL_ERROR)
        self.assertEqual(classify_status(502), ErrorKind.BAD_GATEWAY)
        self.assertEqual(
            classify_status(503), ErrorKind.SERVICE_UNAVAILABLE)

    def test_default_arm(self):
        for code in (None, 201, 301, 401, 409, 429, 504, 599):
            self.assertEqual(
                classify_status(code), ErrorKind.UNHANDLED_STATUS, code)

    def test_every_kind_has_a_message(self):
        for kind in ErrorKind:
            self.assertTrue(kind.provider_message)


class ExceptionTestCase(TestCase):
    def test_status_error(self):
        e = StatusError(503, 'down')
        self.assertEqual(e.code, 503)
        self.assertEqual(e.kind, ErrorKind.SERVICE_UNAVAILABLE)
        self.assertEqual(str(e), '503 (service_unavailable): down')

    def test_store_errors_are_discriminated(self):
        status_error = StoreStatusError(403, 'Forbidden')
        self.assertIsInstance(status_error, StoreError)
        self.assertIsInstance(status_error, StatusError)
        self.assertNotIsInstance(status_error, TransportError)
        self.assertEqual(status_error.status, 403)
        self.assertFalse(status_error.is_not_found)
        self.assertTrue(StoreStatusError(404).is_not_found)

        transport_error = StoreTransportError('connection reset')
        self.assertIsInstance(transport_error, StoreError)
        self.assertIsInstance(transport_error, TransportError)
        self.assertNotIsInstance(transport_error, StatusError)
        self.assertEqual(transport_error.kind, ErrorKind.TRANSPORT)

    def test_upload_error(self):
        e = UploadError(ErrorKind.FORBIDDEN, 403, 'Access Denied')
        self.assertEqual(str(e), '403 (forbidden): Access Denied')

    def test_delete_error(self):
        e = DeleteError('failed', keys=('a', 'b'), deleted=999)
        self.assertEqual(e.keys, ['a', 'b'])
        self.assertEqual(e.deleted, 999)

    def test_batch_error(self):
        e = StoreBatchError([{'Key': 'a', 'Code': 'AccessDenied'}])
        self.assertIn('1 keys could not be deleted', str(e))
