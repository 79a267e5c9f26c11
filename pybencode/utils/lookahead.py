import logging

from pybencode.errors import UnexpectedEndOfInput


# Same initial size io uses for small unbounded reads
DEFAULT_MIN_SIZE = 512


class LookaheadBuffer:
    # start: commit point, cur: read cursor, end: high-water mark, base: stream offset of index 0

    def __init__(self, source, min_size=DEFAULT_MIN_SIZE):
        if min_size <= 0:
            raise ValueError(f'Buffer size must be positive, not: {min_size}')

        self._source = source
        self._read_into = self._resolve_reader(source)
        self._min_size = min_size
        self._buf = bytearray(min_size)
        self._start = 0
        self._cur = 0
        self._end = 0
        self._base = 0
        self._eof = False

    @property
    def offset(self):
        return self._base + self._cur

    @property
    def last_offset(self):
        return self._base + self._cur - 1

    @property
    def capacity(self):
        return len(self._buf)

    @property
    def buffered(self):
        return self._end - self._cur

    def next(self):
        if self._cur == self._end and not self._fill():
            raise UnexpectedEndOfInput(self.offset)

        char = self._buf[self._cur]
        self._cur += 1
        return char

    def backup(self):
        assert self._cur > self._start, 'backup() past the commit point'
        self._cur -= 1

    def commit(self):
        self._start = self._cur

    def cut(self):
        token = bytes(self._buf[self._start:self._cur])
        # Compaction is left to the next fill
        self._start = self._cur
        return token

    def advance(self, count):
        while self._end - self._cur < count:
            if not self._fill():
                raise UnexpectedEndOfInput(self._base + self._end)
        self._cur += count

    def reset(self):
        # Drops the finished value, including a partial token left by an error
        self._start = self._cur

    def at_eof(self):
        return self._cur == self._end and not self._fill()

    def _compact(self, index):
        retained = self._end - index
        self._buf[:retained] = self._buf[index:self._end]
        self._base += index
        self._start -= index
        self._cur -= index
        self._end = retained

    def _fill(self):
        if self._eof:
            return False

        # Bytes before the commit point are no longer needed
        if self._start:
            self._compact(self._start)

        if len(self._buf) - self._end < self._min_size:
            extra = max(len(self._buf), self._min_size)
            self._buf.extend(bytes(extra))
            logging.debug(f'Grew lookahead buffer to {len(self._buf)} bytes')

        with memoryview(self._buf) as view:
            count = self._read_into(view[self._end:])

        if count is None:
            raise BlockingIOError(f'No data available from non-blocking source: {self._source}')

        if not count:
            self._eof = True
            return False

        self._end += count
        return True

    @staticmethod
    def _resolve_reader(source):
        # readinto1 performs at most one raw read, so sockets never block on bytes past a value
        for name in ('readinto1', 'readinto'):
            read_into = getattr(source, name, None)
            if read_into is not None:
                return read_into

        def read_into(view):
            data = source.read(len(view))
            if data is None:
                return None
            view[:len(data)] = data
            return len(data)

        return read_into
