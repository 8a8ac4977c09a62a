import os
import sys


def main():
    # Deployments put their settings (importing dumpsync.default_settings)
    # in dumpsync_settings.py on the python path, or point
    # DJANGO_SETTINGS_MODULE elsewhere.
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'dumpsync_settings')

    from django.core.management import execute_from_command_line
    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
