import logging

from pybencode import targets
from pybencode.errors import BencodingSyntaxError, LimitExceededError
from pybencode.utils import LookaheadBuffer
from pybencode.values import Kind


DEFAULT_MAX_DEPTH = 128
DEFAULT_MAX_ELEMENTS = 1_000_000
DEFAULT_MAX_STRING_LENGTH = 16 * 1024 * 1024
# CPython default for int <-> str conversion
DEFAULT_MAX_INTEGER_DIGITS = 4300
DEFAULT_BUFFER_SIZE = 512

_INT = ord('i')
_LIST = ord('l')
_DICT = ord('d')
_END = ord('e')
_COLON = ord(':')
_MINUS = ord('-')
_ZERO = ord('0')
_NINE = ord('9')


def _is_digit(char):
    return _ZERO <= char <= _NINE


def _describe(char):
    return repr(bytes((char,)))


class Decoder:
    """Decodes one top-level value per call; read-ahead bytes stay buffered for the next."""

    def __init__(self, source, strict=True, max_depth=DEFAULT_MAX_DEPTH,
                 max_elements=DEFAULT_MAX_ELEMENTS, max_string_length=DEFAULT_MAX_STRING_LENGTH,
                 max_integer_digits=DEFAULT_MAX_INTEGER_DIGITS, buffer_size=DEFAULT_BUFFER_SIZE):
        for name, limit in (('max_depth', max_depth), ('max_elements', max_elements),
                            ('max_string_length', max_string_length),
                            ('max_integer_digits', max_integer_digits)):
            if limit <= 0:
                raise ValueError(f'{name} must be positive, not: {limit}')

        self._lexer = LookaheadBuffer(source, buffer_size)
        self._strict = strict
        self._max_depth = max_depth
        self._max_elements = max_elements
        self._max_string_length = max_string_length
        self._max_length_digits = len(str(max_string_length))
        self._max_integer_digits = max_integer_digits
        self._elements = 0

    @property
    def offset(self):
        return self._lexer.offset

    def __iter__(self):
        while True:
            try:
                yield self.decode()
            except EOFError:
                return

    def decode(self, target=None):
        target = targets.resolve(target)
        if self._lexer.at_eof():
            raise EOFError(f'No more values in source after offset {self._lexer.offset}')

        start_offset = self._lexer.offset
        self._elements = 0
        try:
            value = self._decode(target, 0)
        finally:
            self._lexer.reset()

        logging.debug(f'Decoded value at offsets {start_offset}-{self._lexer.offset}')
        return value

    def _decode(self, target, depth):
        char = self._lexer.next()

        if char == _INT:
            target.check(Kind.INTEGER)
            return target.integer(self._decode_int())
        elif _is_digit(char):
            target.check(Kind.STRING)
            self._lexer.backup()
            return target.string(self._decode_string())
        elif char == _LIST:
            target.check(Kind.LIST)
            return self._decode_list(target, depth + 1)
        elif char == _DICT:
            target.check(Kind.DICTIONARY)
            return self._decode_dict(target, depth + 1)
        else:
            raise BencodingSyntaxError(f'Unexpected byte {_describe(char)} at value start', self._lexer.last_offset)

    def _decode_string(self):
        self._lexer.commit()
        length_offset = self._lexer.offset

        digits = 0
        has_leading_zero = False
        while True:
            char = self._lexer.next()
            if char == _COLON:
                break
            elif not _is_digit(char):
                raise BencodingSyntaxError(f'Invalid byte {_describe(char)} in string length',
                                           self._lexer.last_offset)
            elif has_leading_zero:
                raise BencodingSyntaxError('String length can not start with a leading zero',
                                           self._lexer.last_offset)
            elif digits == self._max_length_digits:
                raise LimitExceededError('String length prefix too long', length_offset,
                                         self._max_string_length)

            has_leading_zero = char == _ZERO and not digits
            digits += 1

        if not digits:
            raise BencodingSyntaxError('String length has no digits', self._lexer.last_offset)

        self._lexer.backup()
        length = int(self._lexer.cut())
        if length > self._max_string_length:
            raise LimitExceededError(f'String of {length} bytes too long', length_offset,
                                     self._max_string_length)

        # consume ':'
        self._lexer.next()
        self._lexer.commit()

        self._lexer.advance(length)
        return self._lexer.cut()

    def _decode_int(self):
        self._lexer.commit()

        digits = 0
        is_negative = False
        has_leading_zero = False
        while True:
            char = self._lexer.next()
            if char == _END:
                break
            elif char == _MINUS:
                if digits or is_negative:
                    raise BencodingSyntaxError('Minus sign inside integer', self._lexer.last_offset)
                is_negative = True
            elif _is_digit(char):
                if digits == self._max_integer_digits:
                    raise LimitExceededError('Integer has too many digits', self._lexer.last_offset,
                                             self._max_integer_digits)
                if has_leading_zero:
                    raise BencodingSyntaxError('Integer can not start with a leading zero', self._lexer.last_offset)
                if char == _ZERO and not digits:
                    if is_negative:
                        raise BencodingSyntaxError('Negative zero is an invalid integer', self._lexer.last_offset)
                    has_leading_zero = True
                digits += 1
            else:
                raise BencodingSyntaxError(f'Invalid byte {_describe(char)} in integer', self._lexer.last_offset)

        if not digits:
            raise BencodingSyntaxError('Integer has no digits', self._lexer.last_offset)

        self._lexer.backup()
        digits_offset = self._lexer.offset - digits
        try:
            number = int(self._lexer.cut())
        except ValueError as e:
            # Interpreter limit on int string conversion set below max_integer_digits
            raise LimitExceededError(f'Integer too long: {e}', digits_offset, digits) from e

        # consume 'e'
        self._lexer.next()
        self._lexer.commit()
        return number

    def _decode_list(self, target, depth):
        self._check_depth(depth)
        self._lexer.commit()

        item_target = target.item()
        items = []
        while True:
            char = self._lexer.next()
            if char == _END:
                self._lexer.commit()
                return target.list(items)

            self._lexer.backup()
            self._count_element()
            items.append(self._decode(item_target, depth))

    def _decode_dict(self, target, depth):
        self._check_depth(depth)
        self._lexer.commit()

        value_target = target.value()
        entries = {}
        previous_key = None
        while True:
            char = self._lexer.next()
            if char == _END:
                self._lexer.commit()
                return target.dictionary(entries)

            if not _is_digit(char):
                raise BencodingSyntaxError(f'Dictionary key must be a string, not byte {_describe(char)}',
                                           self._lexer.last_offset)

            key_offset = self._lexer.last_offset
            self._lexer.backup()
            raw_key = self._decode_string()
            if previous_key is not None and raw_key <= previous_key:
                problem = 'Duplicate' if raw_key == previous_key else 'Unsorted'
                if self._strict:
                    raise BencodingSyntaxError(f'{problem} dictionary key {raw_key!r}', key_offset)
                logging.debug(f'{problem} dictionary key {raw_key!r} at offset {key_offset}')

            self._count_element()
            key = target.key(raw_key)
            entries[key] = self._decode(value_target, depth)
            previous_key = raw_key

    def _check_depth(self, depth):
        if depth > self._max_depth:
            raise LimitExceededError('Nesting too deep', self._lexer.last_offset, self._max_depth)

    def _count_element(self):
        self._elements += 1
        if self._elements > self._max_elements:
            raise LimitExceededError('Too many elements', self._lexer.offset, self._max_elements)
