#!/usr/bin/env python
import os.path
import sys
from setuptools import find_packages, setup

try:
    from subprocess import check_output
except ImportError:
    check_output = None

if sys.version_info < (3, 8):
    raise RuntimeError('DumpSync is not built for Python older than 3.8')


def version_from_git():
    try:
        version = check_output(
            "test -d .git && git fetch --tags && "
            "git describe --tags --dirty | "
            "sed -e 's/-/+/;s/[^A-Za-z0-9.+]/./g'",
            shell=True)
    except Exception:  # (AttributeError, CalledProcessError)
        return None

    version = version.decode('ascii', 'replace')
    if not version.startswith('v'):
        return None

    return version[1:].rstrip()


def version_from_changelog(changelog):
    versions = changelog.split('\nv')[1:]
    incomplete = False

    for line in versions:
        assert line and line[0].isdigit(), line
        line = line.split(' ', 1)[0]
        if all(i.isdigit() or i.startswith(('dev', 'post', 'rc'))
               for i in line.split('.')):
            version = line  # last "complete version"
            break
        incomplete = True
    else:
        return '0+1.or.more'  # undefined version

    if incomplete:
        version += '+1.or.more'
    return version


if __name__ == '__main__':
    here = os.path.dirname(__file__)
    os.chdir(here or '.')

    with open('README.rst') as fp:
        readme = fp.read()
    with open('CHANGES.rst') as fp:
        changes = fp.read()

    version = (
        version_from_git()
        or version_from_changelog(changes))

    setup(
        name='dumpsync',
        version=version,
        entry_points={
            'console_scripts': ['dumpsync=dumpsync.__main__:main'],
        },
        data_files=[
            ('share/doc/dumpsync', ['README.rst', 'CHANGES.rst']),
            ('share/dumpsync', ['example_settings.py'])],
        packages=find_packages(include=['dumpsync', 'dumpsync.*']),
        description=(
            'DumpSync mirrors provider data-dump files into S3 object '
            'storage'),
        long_description=('\n\n\n'.join([readme, changes])),
        long_description_content_type='text/x-rst',
        author='DumpSync developers',
        license='GPLv3+',
        platforms=['linux'],
        classifiers=[
            'Development Status :: 4 - Beta',
            'Environment :: Console',
            'Framework :: Django',
            'Intended Audience :: System Administrators',
            ('License :: OSI Approved :: GNU General Public License v3 '
             'or later (GPLv3+)'),
            'Operating System :: POSIX :: Linux',
            'Programming Language :: Python',
            'Programming Language :: Python :: 3',
            'Topic :: System :: Archiving :: Mirroring',
        ],
        python_requires='>=3.8',
        install_requires=[
            'Django>=4.2',
            # Maintained fork of django-q; same django_q import package.
            'django-q2>=1.6',
            'boto3>=1.26',
            'requests>=2.28',
            'PyYAML>=5.1.1',
            # The django-q broker.
            'redis',
            'setproctitle>=1.1.8',
            'python-dateutil>=2.8.1,<3',
        ],
        extras_require={
            'test': [
                'pytest',
                'pytest-django',
            ],
        },
    )

# vim: set ts=8 sw=4 sts=4 et ai tw=79:
