from django.conf import settings
from django.core.checks import Critical

from .reconcile import DELETE_BATCH_SIZE

_dumpsync_settings_checks = []
_is_dumpsync_settings_check = (
    lambda x: _dumpsync_settings_checks.append(x) or x)


def check_dumpsync_settings(app_configs, **kwargs):
    errors = []
    for checkfunc in _dumpsync_settings_checks:
        errors.extend(checkfunc())
    return errors


@_is_dumpsync_settings_check
def _settings__dumpsync_bucket():
    bucket = (
        getattr(settings, 'DUMPSYNC_OBJECT_STORE', None) or {}).get('BUCKET')
    if not (bucket or settings.DUMPSYNC_BUCKET):
        return [Critical(
            'settings.DUMPSYNC_BUCKET is not set', id='dumpsync.E001')]
    return []


@_is_dumpsync_settings_check
def _settings__dumpsync_roots():
    errors = []
    for name in ('DUMPSYNC_DAILY_ROOT', 'DUMPSYNC_CURRENT_TERM_ROOT'):
        value = getattr(settings, name)
        if not value or value.startswith('/') or value.endswith('/'):
            errors.append(Critical(
                'settings.{} is invalid'.format(name),
                hint='Use a non-empty path without leading/trailing slash',
                id='dumpsync.E002'))
    return errors


@_is_dumpsync_settings_check
def _settings__dumpsync_delete_batch_size():
    size = settings.DUMPSYNC_DELETE_BATCH_SIZE
    if not isinstance(size, int) or not (1 <= size <= DELETE_BATCH_SIZE):
        return [Critical(
            'settings.DUMPSYNC_DELETE_BATCH_SIZE is invalid',
            hint='Must be between 1 and {}'.format(DELETE_BATCH_SIZE),
            id='dumpsync.E003')]
    return []


@_is_dumpsync_settings_check
def _settings__dumpsync_object_store():
    config = settings.DUMPSYNC_OBJECT_STORE
    if not isinstance(config, dict) or not config.get('ENGINE'):
        return [Critical(
            'settings.DUMPSYNC_OBJECT_STORE must be a dict with an ENGINE',
            id='dumpsync.E004')]
    return []


@_is_dumpsync_settings_check
def _settings__dumpsync_current_term_table():
    table = settings.DUMPSYNC_CURRENT_TERM_TABLE
    if not table or '/' in table:
        return [Critical(
            'settings.DUMPSYNC_CURRENT_TERM_TABLE must be a plain table name',
            id='dumpsync.E005')]
    return []
