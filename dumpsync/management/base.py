from django.core.management.base import BaseCommand
from yaml import safe_dump


class BaseCommandWithReport(BaseCommand):
    def add_arguments(self, parser):
        parser.add_argument('--yaml', action='store_true', help=(
            'Write the report as YAML'))

        return super().add_arguments(parser)

    def write_report(self, data, options):
        if options['yaml']:
            self.stdout.write(safe_dump(
                data, default_flow_style=False, sort_keys=False), ending='')
            return

        for key, value in data.items():
            if isinstance(value, (list, tuple)):
                self.stdout.write('{}:'.format(key))
                for item in value:
                    self.stdout.write('  {}'.format(item))
            else:
                self.stdout.write('{}: {}'.format(key, value))
