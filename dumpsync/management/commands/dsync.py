from django.core.management.base import CommandError

from dumpsync.files import SyncDocument, load_manifest
from dumpsync.management.base import BaseCommandWithReport
from dumpsync.sync import DumpSync
from dumpsync.tasks import async_sync_job


class Command(BaseCommandWithReport):
    help = 'Mirrors the files of a sync document into the object store'

    def add_arguments(self, parser):
        parser.add_argument('document', help=(
            'Sync document (YAML or JSON) listing the files to mirror'))
        parser.add_argument('--manifest', help=(
            'File with the current filenames; defaults to the filenames '
            'in the document'))
        parser.add_argument('--no-cleanup', action='store_false',
                            dest='cleanup', help=(
                                'Do not delete obsolete current-term files'))
        parser.add_argument('--enqueue', action='store_true', help=(
            'Run the sync on the task queue instead of right away'))

        return super().add_arguments(parser)

    def handle(self, *args, **options):
        try:
            document = SyncDocument.from_path(options['document'])
            manifest = (
                load_manifest(options['manifest'])
                if options['manifest'] else None)
        except (OSError, ValueError) as e:
            raise CommandError(str(e))

        if options['enqueue']:
            task_id = async_sync_job(document.files, manifest)
            self.stdout.write(self.style.SUCCESS(
                'Enqueued sync of {} files as {}'.format(
                    len(document.files), task_id)))
            return

        with DumpSync.from_settings() as dumpsync:
            report = dumpsync.run(
                document.files, manifest=manifest,
                cleanup=options['cleanup'])

        self.write_report(report.as_dict(), options)
        if report.failures:
            raise CommandError('{} failures during sync'.format(
                report.failures))
