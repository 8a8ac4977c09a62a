from dateutil.parser import isoparse
from django.core.management.base import BaseCommand, CommandError

from dumpsync.files import FileDescriptor
from dumpsync.keys import StorageLayout


class Command(BaseCommand):
    help = 'Shows the object-store key a data-dump file is stored under'

    def add_arguments(self, parser):
        parser.add_argument('table')
        parser.add_argument('filename')
        parser.add_argument('--date', help=(
            'Calendar day (YYYY-MM-DD) to derive the partition for; '
            'defaults to today'))

        return super().add_arguments(parser)

    def handle(self, *args, **options):
        now = None
        if options['date']:
            try:
                now = isoparse(options['date']).date()
            except ValueError as e:
                raise CommandError('Bad --date {!r}: {}'.format(
                    options['date'], e))

        layout = StorageLayout.from_settings()
        file = FileDescriptor(options['table'], options['filename'], url='')
        self.stdout.write(layout.storage_key(file, layout.partition_key(now)))
