class ChunkedSourceStub:
    """Source that hands out at most ``chunk_size`` bytes per read call."""

    def __init__(self, data, chunk_size=1):
        self._data = data
        self._chunk_size = chunk_size
        self._position = 0
        self.read_count = 0

    def read(self, size):
        self.read_count += 1
        size = min(size, self._chunk_size)
        chunk = self._data[self._position:self._position + size]
        self._position += len(chunk)
        return chunk

    @property
    def exhausted(self):
        return self._position == len(self._data)


class FailingSourceStub(ChunkedSourceStub):
    def __init__(self, data, error):
        super().__init__(data, chunk_size=len(data) or 1)
        self._error = error

    def read(self, size):
        if self.exhausted:
            raise self._error
        return super().read(size)


class RecordingSinkStub:
    def __init__(self, fail_after=None):
        self.writes = []
        self._fail_after = fail_after

    def write(self, data):
        if self._fail_after is not None and len(self.writes) == self._fail_after:
            raise OSError('Sink closed')
        self.writes.append(data)
        return len(data)

    @property
    def content(self):
        return b''.join(self.writes)
