from enum import Enum


class ErrorKind(Enum):
    BAD_REQUEST = 'bad_request'
    FORBIDDEN = 'forbidden'
    NOT_FOUND = 'not_found'
    INTERNAL_ERROR = 'internal_error'
    BAD_GATEWAY = 'bad_gateway'
    SERVICE_UNAVAILABLE = 'service_unavailable'
    UNHANDLED_STATUS = 'unhandled_status'
    # No status at all: DNS, timeouts, refused/reset connections.
    TRANSPORT = 'transport'

    @property
    def provider_message(self):
        return PROVIDER_MESSAGES[self]


_STATUS_KINDS = {
    400: ErrorKind.BAD_REQUEST,
    403: ErrorKind.FORBIDDEN,
    404: ErrorKind.NOT_FOUND,
    500: ErrorKind.INTERNAL_ERROR,
    502: ErrorKind.BAD_GATEWAY,
    503: ErrorKind.SERVICE_UNAVAILABLE,
}

PROVIDER_MESSAGES = {
    ErrorKind.BAD_REQUEST: 'Bad request. Check if file urls are correct',
    ErrorKind.FORBIDDEN: (
        'Authorization error. Check if the data file url expired'),
    ErrorKind.NOT_FOUND: 'Requested file not found',
    ErrorKind.INTERNAL_ERROR: 'Internal error occurred on the provider api',
    ErrorKind.BAD_GATEWAY: 'Bad Gateway',
    ErrorKind.SERVICE_UNAVAILABLE: (
        'Service Unavailable. Check if the provider api is correct and '
        'active'),
    ErrorKind.UNHANDLED_STATUS: (
        'Status not 200. Unhandled error. Refer the status code to debug'),
    ErrorKind.TRANSPORT: (
        'Unable to reach the provider. Possible timeouts or connection '
        'failures'),
}


def classify_status(code):
    '''
    Map an HTTP status code onto an ErrorKind.

    Codes without a dedicated kind (including None and 2xx codes other
    than the ones the caller treats as success) become UNHANDLED_STATUS.
    '''
    return _STATUS_KINDS.get(code, ErrorKind.UNHANDLED_STATUS)
