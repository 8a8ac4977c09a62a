from collections import OrderedDict
from threading import Lock

from .base import ObjectStore, StoreStatusError


class DummyObjectStore(ObjectStore):
    '''
    DummyObjectStore is a simple in-memory store. Buckets are shared by all
    instances in the process, so a store constructed from the settings
    sees what another instance wrote. Call reset() to start afresh.
    '''
    _buckets = {}
    _lock = Lock()

    # Small pages, so pagination is exercised.
    PAGE_SIZE = 2

    @classmethod
    def reset(cls):
        with cls._lock:
            cls._buckets.clear()

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = []
        with self._lock:
            self._objects = self._buckets.setdefault(
                self.bucket, OrderedDict())

    @property
    def objects(self):
        return self._objects

    def add(self, key, data=b'', **metadata):
        with self._lock:
            self._objects[key] = (data, metadata)

    def head(self, key):
        self.calls.append(('head', key))
        with self._lock:
            try:
                data, metadata = self._objects[key]
            except KeyError:
                raise StoreStatusError(404, 'Not Found')
        return dict(metadata, ContentLength=len(data))

    def put_stream(self, key, stream, metadata):
        self.calls.append(('put_stream', key))
        parts = []
        while True:
            part = stream.read(8192)
            if not part:
                break
            parts.append(part)
        self.add(key, b''.join(parts), **metadata)

    def list_by_prefix(self, prefix):
        self.calls.append(('list_by_prefix', prefix))
        with self._lock:
            keys = sorted(i for i in self._objects if i.startswith(prefix))
        for offset in range(0, len(keys), self.PAGE_SIZE):
            for key in keys[offset:(offset + self.PAGE_SIZE)]:
                yield key

    def delete_batch(self, keys):
        self.calls.append(('delete_batch', list(keys)))
        self.check_batch(keys)
        with self._lock:
            for key in keys:
                self._objects.pop(key, None)
