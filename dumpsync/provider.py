import logging

import requests
from django.conf import settings

from .exceptions import TransportError

logger = logging.getLogger(__name__)


class ProviderSource:
    '''
    Fetches data-dump files from the provider over HTTP.

    Responses are opened in streaming mode: nothing but the headers is
    read until the caller reads response.raw.
    '''
    def __init__(self, session=None, connect_timeout=60, read_timeout=60):
        self.session = session or requests.Session()
        self.timeout = (connect_timeout, read_timeout)

    @classmethod
    def from_settings(cls):
        config = settings.DUMPSYNC_PROVIDER
        return cls(
            connect_timeout=config.get('CONNECT_TIMEOUT', 60),
            read_timeout=config.get('READ_TIMEOUT', 60))

    def close(self):
        self.session.close()

    def open(self, url):
        '''
        Start a GET request for url and return the response, whatever its
        status. Raises TransportError if no response was received.
        '''
        try:
            response = self.session.get(url, stream=True, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError('GET {}: {}'.format(
                _strip_query(url), e)) from e
        # The dump files are gzip files; keep them compressed even when
        # the server also sets Content-Encoding.
        response.raw.decode_content = False
        return response


def _strip_query(url):
    # The provider hands out signed urls; keep the signature out of logs.
    return url.split('?', 1)[0]
