from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string


def load_object_store(config=None):
    '''
    Construct the object store engine configured in DUMPSYNC_OBJECT_STORE.

    The caller owns the returned store and should close() it.
    '''
    if config is None:
        config = settings.DUMPSYNC_OBJECT_STORE
    if not isinstance(config, dict) or 'ENGINE' not in config:
        raise ImproperlyConfigured(
            'The DUMPSYNC_OBJECT_STORE setting must be a dict with an '
            'ENGINE, check the example settings reference.')
    config = dict(config)
    StoreImpl = import_string(config['ENGINE'])
    StoreImpl.ensure_defaults(config)
    bucket = config.get('BUCKET') or settings.DUMPSYNC_BUCKET
    if not bucket:
        raise ImproperlyConfigured('DUMPSYNC_BUCKET is not set')
    return StoreImpl(config, bucket)
