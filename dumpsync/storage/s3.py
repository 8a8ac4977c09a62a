from contextlib import contextmanager
from functools import cached_property
import logging

from boto3 import client as S3Client
from boto3.exceptions import Boto3Error
from boto3.s3.transfer import TransferConfig
from botocore.client import Config as S3Config
from botocore.exceptions import BotoCoreError, ClientError as S3ClientError

from .base import (
    ObjectStore, StoreBatchError, StoreStatusError, StoreTransportError)

logger = logging.getLogger(__name__)


class S3ObjectStore(ObjectStore):
    '''
    Object store on AWS S3 (or anything speaking the S3 protocol).

    Uploads are managed multipart uploads: the stream is read one part at
    a time, so memory use depends on MULTIPART_CHUNKSIZE and
    MAX_CONCURRENCY, not on the file size.
    '''
    MAX_RESULTS = 1000  # AWS S3 default/max allowed.

    @classmethod
    def ensure_defaults(cls, config):
        super().ensure_defaults(config)
        config.setdefault('REGION', None)
        config.setdefault('ENDPOINT', None)
        config.setdefault('ACCESS_KEY_ID', None)
        config.setdefault('SECRET_ACCESS_KEY', None)
        config.setdefault('ACCELERATE', False)
        config.setdefault('VERIFY', True)
        # S3 defaults to 60 seconds, keep that.
        config.setdefault('CONNECT_TIMEOUT', 60)
        config.setdefault('READ_TIMEOUT', 60)
        config.setdefault('MULTIPART_CHUNKSIZE', 8 * 1024 * 1024)
        config.setdefault('MAX_CONCURRENCY', 4)

    @cached_property
    def client(self):
        return self.get_client()

    def get_client(self):
        config = S3Config(
            connect_timeout=self.config['CONNECT_TIMEOUT'],
            read_timeout=self.config['READ_TIMEOUT'],
            s3={'use_accelerate_endpoint': bool(self.config['ACCELERATE'])})
        # Leaving the credentials None makes boto3 use its own lookup
        # (environment, instance profile, ...).
        return S3Client(
            's3', region_name=self.config['REGION'],
            aws_access_key_id=self.config['ACCESS_KEY_ID'],
            aws_secret_access_key=self.config['SECRET_ACCESS_KEY'],
            endpoint_url=self.config['ENDPOINT'],
            verify=self.config['VERIFY'], config=config)

    def get_transfer_config(self):
        return TransferConfig(
            multipart_chunksize=self.config['MULTIPART_CHUNKSIZE'],
            max_concurrency=self.config['MAX_CONCURRENCY'])

    def close(self):
        if 'client' in self.__dict__:
            self.client.close()
            del self.__dict__['client']

    @contextmanager
    def translate_errors(self, action, key):
        try:
            yield
        except S3ClientError as e:
            raise self.status_error(e, action, key) from e
        except (BotoCoreError, Boto3Error) as e:
            raise StoreTransportError('{} {!r}: {}'.format(
                action, key, e)) from e

    @staticmethod
    def status_error(exc, action, key):
        # HEAD responses have no body, so the Error.Code is often just the
        # numeric status ('404', '403').
        response = exc.response or {}
        error = response.get('Error', {})
        status = response.get('ResponseMetadata', {}).get('HTTPStatusCode')
        code = str(error.get('Code', ''))
        if status is None and code.isdigit():
            status = int(code)
        message = error.get('Message') or code or str(exc)
        return StoreStatusError(status, '{} {!r}: {}'.format(
            action, key, message))

    def head(self, key):
        with self.translate_errors('head', key):
            response = self.client.head_object(Bucket=self.bucket, Key=key)
        return response['ResponseMetadata']['HTTPHeaders']

    def put_stream(self, key, stream, metadata):
        with self.translate_errors('upload', key):
            self.client.upload_fileobj(
                stream, self.bucket, key, ExtraArgs=dict(metadata),
                Config=self.get_transfer_config())

    def list_by_prefix(self, prefix):
        params = {}
        # Note: The response NextContinuationToken is the cursor for the
        # next page and ContinuationToken is the cursor of the current page.
        # If the ContinuationToken is given is must be valid.
        while params.get('ContinuationToken') != '':
            with self.translate_errors('list', prefix):
                response = self.client.list_objects_v2(
                    Bucket=self.bucket, Prefix=prefix,
                    MaxKeys=self.MAX_RESULTS, **params)
            if 'Contents' not in response:  # Page break falls on last object.
                break
            for line in response['Contents']:
                yield line['Key']
            params['ContinuationToken'] = response.get(
                'NextContinuationToken', '')

    def delete_batch(self, keys):
        self.check_batch(keys)
        with self.translate_errors('delete', '{} keys'.format(len(keys))):
            response = self.client.delete_objects(
                Bucket=self.bucket, Delete={
                    'Objects': [{'Key': key} for key in keys],
                    'Quiet': True})
        # In quiet mode only the failures are reported.
        if response.get('Errors'):
            raise StoreBatchError(response['Errors'])
        logger.debug('Deleted %d objects from %s', len(keys), self.bucket)
