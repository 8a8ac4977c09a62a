import logging
import signal

from django.conf import settings

from django_q.brokers import get_broker
from django_q.tasks import async_task
from setproctitle import getproctitle, setproctitle

from .files import FileDescriptor
from .sync import DumpSync

logger = logging.getLogger(__name__)

'''
Syncs are run asynchronous with entry points:
 - dumpsync.tasks.async_sync_job (enqueues sync_run)

sync_run:
 - Upload every file that is not in the object store yet.
 - Wait for the uploads to finish.
 - Delete current-term objects that are not in the manifest.
 - finalize_run is invoked as a hook after sync_run completes.
'''


class handle_exit_signals:
    @staticmethod
    def signal_as_systemexit(signum, frame):
        """
        By default, SIGTERM does not cause an exception and will therefore not
        trickle up through contexthandlers. We want clean exits on SIGTERM, so
        we'll raise the exception ourselves.
        """
        raise SystemExit(128 | signum)

    all_signals = (
        signal.SIGHUP, signal.SIGINT, signal.SIGQUIT, signal.SIGTERM)

    def __enter__(self):
        # Make sure we exit using an exception (and thus the context handler).
        self._prev_handlers = []
        for signum in self.all_signals:
            self._prev_handlers.append(
                signal.signal(signum, self.signal_as_systemexit))

    def __exit__(self, type, value, traceback):
        # Reset the original handler.
        for idx, signum in enumerate(self.all_signals):
            signal.signal(signum, self._prev_handlers[idx])


class proctitle:
    def __init__(self, title):
        self.title = title

    def __enter__(self):
        self._prev_title = getproctitle()
        setproctitle('{} [{}]'.format(self._prev_title, self.title))

    def __exit__(self, type, value, traceback):
        setproctitle(self._prev_title)


# Sync called task; spawns async.
def async_sync_job(files, manifest=None):
    """
    Schedule a sync of the specified files at once.
    """
    return async_task(
        'dumpsync.tasks.sync_run', [dict(i._asdict()) for i in files],
        (sorted(manifest) if manifest is not None else None),
        broker=get_broker(settings.Q_MAIN_QUEUE),
        q_options={'hook': 'dumpsync.tasks.finalize_run'})


# Async called task:
def sync_run(file_dicts, manifest=None):
    files = [FileDescriptor.from_dict(i) for i in file_dicts]
    with handle_exit_signals(), \
            proctitle('dumpsync {} files'.format(len(files))), \
            DumpSync.from_settings() as dumpsync:
        report = dumpsync.run(files, manifest=manifest)
    return report.as_dict()


# Async called task:
def finalize_run(task):
    if not task.success:
        logger.error('Sync task %s failed: %s', task.id, task.result)
        return

    report = task.result
    if report['failures']:
        logger.warning(
            'Sync task %s finished with %d failures (cleanup error: %s)',
            task.id, report['failures'], report.get('cleanup_error'))
    else:
        logger.info(
            'Sync task %s finished: %d uploaded, %d deleted',
            task.id, report['uploaded'], report['deleted'])
