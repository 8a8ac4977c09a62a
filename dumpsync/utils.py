def chunked(sequence, size):
    '''
    Split sequence into consecutive lists of at most size elements.

    >>> chunked([1, 2, 3, 4, 5], 2)
    [[1, 2], [3, 4], [5]]
    '''
    if size < 1:
        raise ValueError('chunk size must be positive, got {!r}'.format(size))
    sequence = list(sequence)
    return [
        sequence[index:(index + size)]
        for index in range(0, len(sequence), size)]


def human_duration(seconds):
    "1234.5 -> '20m34s'"
    seconds = int(seconds)
    if seconds < 60:
        return '{}s'.format(seconds)
    minutes, seconds = divmod(seconds, 60)
    if minutes < 60:
        return '{}m{:02d}s'.format(minutes, seconds)
    hours, minutes = divmod(minutes, 60)
    return '{}h{:02d}m'.format(hours, minutes)
