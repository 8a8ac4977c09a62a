from django.core.management.base import CommandError

from dumpsync.exceptions import DumpSyncError
from dumpsync.files import load_manifest
from dumpsync.management.base import BaseCommandWithReport
from dumpsync.sync import DumpSync


class Command(BaseCommandWithReport):
    help = (
        'Deletes current-term objects whose filename is not in the manifest')

    def add_arguments(self, parser):
        parser.add_argument('manifest', help=(
            'File with the current filenames: a YAML/JSON list, a sync '
            'document or one filename per line'))
        parser.add_argument('--dry-run', action='store_true', help=(
            'Only list the obsolete objects'))

        return super().add_arguments(parser)

    def handle(self, *args, **options):
        try:
            manifest = load_manifest(options['manifest'])
        except (OSError, ValueError) as e:
            raise CommandError(str(e))

        with DumpSync.from_settings() as dumpsync:
            try:
                if options['dry_run']:
                    obsolete = dumpsync.reconciler.find_obsolete(manifest)
                    self.write_report({'obsolete': obsolete}, options)
                    return
                report = dumpsync.clean_up(manifest)
            except DumpSyncError as e:
                raise CommandError('Clean up failed: {}'.format(e))

        self.write_report(
            {'obsolete': report.obsolete, 'deleted': report.deleted}, options)
