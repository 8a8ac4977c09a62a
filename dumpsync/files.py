from collections import namedtuple

from yaml import safe_load


class FileDescriptor(namedtuple('FileDescriptor', 'table filename url')):
    '''
    A single data-dump file offered by the provider.
    '''
    __slots__ = ()

    @classmethod
    def from_dict(cls, data):
        # The provider sends more fields (partial, ...). We only need these.
        return cls(
            table=data['table'], filename=data['filename'], url=data['url'])

    def __str__(self):
        return '{}/{}'.format(self.table, self.filename)


class SyncDocument:
    '''
    A parsed sync listing: the files to transfer for one sync run.

    The provider serves it as JSON, which safe_load reads as well::

        {"files": [{"table": "courses", "filename": "courses-001.gz",
                    "url": "https://..."}]}
    '''
    def __init__(self, files):
        self.files = list(files)

    @classmethod
    def from_stream(cls, stream):
        data = safe_load(stream)
        if not isinstance(data, dict) or not isinstance(
                data.get('files'), list):
            raise ValueError('expected a mapping with a files list')
        try:
            return cls(FileDescriptor.from_dict(i) for i in data['files'])
        except (KeyError, TypeError) as e:
            raise ValueError('bad file entry: {!r}'.format(e))

    @classmethod
    def from_path(cls, path):
        with open(path) as fp:
            return cls.from_stream(fp)

    def filenames(self):
        return [i.filename for i in self.files]


def load_manifest(path):
    '''
    Read a manifest of current filenames: a YAML/JSON list, a sync
    document, or plain text with one filename per line.
    '''
    with open(path) as fp:
        text = fp.read()
    data = safe_load(text)
    if isinstance(data, list):
        return set(str(i) for i in data)
    if isinstance(data, dict) and 'files' in data:
        return set(
            i['filename'] if isinstance(i, dict) else str(i)
            for i in data['files'])
    return set(line.strip() for line in text.splitlines() if line.strip())
