from unittest.mock import Mock, patch

from dumpsync.exceptions import DeleteError
from dumpsync.files import FileDescriptor
from dumpsync.sync import SyncReport
from dumpsync.tasks import async_sync_job, finalize_run, sync_run
from dumpsync.tests.base import DumpSyncTestCase, FakeResponse

FILES = [
    FileDescriptor('users', 'users-0.gz', 'http://provider/users-0'),
    FileDescriptor('requests', 'requests-1.gz', 'http://provider/req-1'),
]


def message(
        *args, message_fmt='{level}:{module}:{}', level='INFO',
        module='dumpsync.tasks'):
    return message_fmt.format(*args, level=level, module=module)


class TaskTestCase(DumpSyncTestCase):
    maxDiff = 8192

    def test_async_sync_job(self):
        with patch('dumpsync.tasks.get_broker') as broker, \
                patch('dumpsync.tasks.async_task',
                      return_value='task-id') as m:
            self.assertEqual(
                async_sync_job(FILES, {'b.gz', 'a.gz'}), 'task-id')
        broker.assert_called_once_with('main')
        m.assert_called_once_with(
            'dumpsync.tasks.sync_run', [
                {'table': 'users', 'filename': 'users-0.gz',
                 'url': 'http://provider/users-0'},
                {'table': 'requests', 'filename': 'requests-1.gz',
                 'url': 'http://provider/req-1'}],
            ['a.gz', 'b.gz'], broker=broker.return_value,
            q_options={'hook': 'dumpsync.tasks.finalize_run'})

    def test_sync_run(self):
        with patch('dumpsync.provider.ProviderSource.open',
                   side_effect=lambda url: FakeResponse(200, b'gz')), \
                self.assertLogs('dumpsync', level='INFO'):
            report = sync_run([dict(i._asdict()) for i in FILES])
        self.assertEqual(report['started'], 2)
        self.assertEqual(report['uploaded'], 2)
        self.assertEqual(report['cleanup_error'], None)
        self.assertEqual(report['failures'], 0)

    def test_finalize_run(self):
        report = SyncReport()
        report.uploaded, report.deleted = 3, 1
        task = Mock(id='t1', success=True, result=report.as_dict())
        with self.assertLogs('dumpsync.tasks', level='INFO') as log:
            finalize_run(task)
        self.assertEqual(log.output, [
            message('Sync task t1 finished: 3 uploaded, 1 deleted')])

        report.failed = report.upload_errors = 1
        report.cleanup_error = DeleteError('batch 1/1 failed')
        task.result = report.as_dict()
        self.assertEqual(task.result['failures'], 3)
        with self.assertLogs('dumpsync.tasks', level='INFO') as log:
            finalize_run(task)
        self.assertEqual(log.output, [message(
            'Sync task t1 finished with 3 failures '
            '(cleanup error: batch 1/1 failed)', level='WARNING')])

        task.success, task.result = False, 'Traceback...'
        with self.assertLogs('dumpsync.tasks', level='INFO') as log:
            finalize_run(task)
        self.assertEqual(log.output, [message(
            'Sync task t1 failed: Traceback...', level='ERROR')])
