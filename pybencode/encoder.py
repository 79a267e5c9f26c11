from collections.abc import Mapping

from pybencode.decoder import DEFAULT_MAX_INTEGER_DIGITS
from pybencode.errors import BencodingError, UnsupportedTypeError
from pybencode.values import Kind, Value


class Encoder:
    # Tokens go to the sink as produced; a failure mid-container leaves earlier tokens written

    def __init__(self, sink, encoding='utf-8', max_integer_digits=DEFAULT_MAX_INTEGER_DIGITS):
        self._sink = sink
        self._encoding = encoding
        self._max_integer_digits = max_integer_digits

    def encode(self, item):
        to_bencode = getattr(item, 'to_bencode', None)
        if callable(to_bencode) and not isinstance(item, type):
            self._encode_custom(item, to_bencode)
        elif isinstance(item, Value):
            self._encode_value(item)
        elif isinstance(item, (bytes, bytearray, memoryview)):
            self._encode_bytes(bytes(item))
        elif isinstance(item, str):
            self._encode_bytes(self._encode_text(item))
        elif isinstance(item, int):
            self._encode_int(item)
        elif isinstance(item, (list, tuple)):
            self._encode_list(item)
        elif isinstance(item, Mapping):
            self._encode_dict(item)
        else:
            raise UnsupportedTypeError(type(item))

    def _encode_custom(self, item, to_bencode):
        encoded = to_bencode()
        if not isinstance(encoded, (bytes, bytearray)):
            raise BencodingError(f'{type(item).__name__}.to_bencode() must return bytes, not: {type(encoded)}')
        self._sink.write(bytes(encoded))

    def _encode_value(self, value):
        if value.kind is Kind.STRING:
            self._encode_bytes(value.data)
        elif value.kind is Kind.INTEGER:
            self._encode_int(value.data)
        elif value.kind is Kind.LIST:
            self._encode_list(value.data)
        else:
            # Already sorted and unique
            self._sink.write(b'd')
            for key, item in value.data:
                self._encode_bytes(key)
                self._encode_value(item)
            self._sink.write(b'e')

    def _encode_text(self, text):
        try:
            return text.encode(self._encoding)
        except UnicodeEncodeError as e:
            raise UnsupportedTypeError(str, f'Not encodable as {self._encoding}: {text[:32]!r}') from e

    def _encode_int(self, number):
        try:
            digits = b'%d' % number
        except ValueError as e:
            raise UnsupportedTypeError(int, f'Integer too large to convert: {e}') from e

        if len(digits.lstrip(b'-')) > self._max_integer_digits:
            raise UnsupportedTypeError(int, f'Integer has more than {self._max_integer_digits} digits')
        self._sink.write(b'i%be' % digits)

    def _encode_bytes(self, data):
        self._sink.write(b'%d:%b' % (len(data), data))

    def _encode_list(self, items):
        self._sink.write(b'l')
        for item in items:
            self.encode(item)
        self._sink.write(b'e')

    def _encode_dict(self, mapping):
        entries = []
        for key, item in mapping.items():
            if isinstance(key, str):
                key = self._encode_text(key)
            elif isinstance(key, (bytes, bytearray, memoryview)):
                key = bytes(key)
            else:
                raise UnsupportedTypeError(type(key), 'Dictionary keys must be bytes or str')
            entries.append((key, item))

        entries.sort(key=lambda entry: entry[0])
        for previous, current in zip(entries, entries[1:]):
            if previous[0] == current[0]:
                raise BencodingError(f'Duplicate dictionary key after encoding: {current[0]!r}')

        self._sink.write(b'd')
        for key, item in entries:
            self._encode_bytes(key)
            self.encode(item)
        self._sink.write(b'e')
