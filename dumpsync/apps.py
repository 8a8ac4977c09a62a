from django.apps import AppConfig
from django.core import checks


class DumpSyncAppConfig(AppConfig):
    name = 'dumpsync'
    verbose_name = 'DumpSync'

    def ready(self):
        from .checks import check_dumpsync_settings
        checks.register(check_dumpsync_settings)
