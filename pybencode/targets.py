import typing

from pybencode.errors import TypeMismatchError, IntegerRangeError
from pybencode.values import Kind, Value


_ALL_KINDS = frozenset(Kind)


class Target:
    kinds = frozenset()

    def check(self, kind):
        if kind not in self.kinds:
            raise TypeMismatchError(kind, self)

    def string(self, data):
        raise TypeMismatchError(Kind.STRING, self)

    def integer(self, number):
        raise TypeMismatchError(Kind.INTEGER, self)

    def item(self):
        raise TypeMismatchError(Kind.LIST, self)

    def list(self, items):
        raise TypeMismatchError(Kind.LIST, self)

    def key(self, data):
        raise TypeMismatchError(Kind.DICTIONARY, self)

    def value(self):
        raise TypeMismatchError(Kind.DICTIONARY, self)

    def dictionary(self, entries):
        raise TypeMismatchError(Kind.DICTIONARY, self)

    def __eq__(self, other):
        return type(self) is type(other) and vars(self) == vars(other)

    def __hash__(self):
        return hash(type(self))

    def __repr__(self):
        fields = ', '.join(f'{name}={field!r}' for name, field in vars(self).items())
        return f'{type(self).__name__}({fields})'


class Dynamic(Target):
    kinds = _ALL_KINDS

    def string(self, data):
        return data

    def integer(self, number):
        return number

    def item(self):
        return self

    def list(self, items):
        return items

    def key(self, data):
        return data

    def value(self):
        return self

    def dictionary(self, entries):
        return entries


class Bytes(Target):
    kinds = frozenset({Kind.STRING})

    def string(self, data):
        return data


class Text(Target):
    kinds = frozenset({Kind.STRING})

    def __init__(self, encoding='utf-8'):
        self.encoding = encoding

    def string(self, data):
        try:
            return data.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise TypeMismatchError(f'string {data[:32]!r}', self,
                                    f'String is not valid {self.encoding}: {data[:32]!r}') from e


class Integer(Target):
    kinds = frozenset({Kind.INTEGER})

    def __init__(self, bits=None, signed=True):
        if bits is not None and bits <= 0:
            raise ValueError(f'Integer width must be positive, not: {bits}')

        self.bits = bits
        self.signed = signed

    @property
    def bounds(self):
        if self.bits is None:
            return (None, None) if self.signed else (0, None)
        if self.signed:
            return -(1 << (self.bits - 1)), (1 << (self.bits - 1)) - 1
        return 0, (1 << self.bits) - 1

    def integer(self, number):
        low, high = self.bounds
        if (low is not None and number < low) or (high is not None and number > high):
            raise IntegerRangeError(number, self)
        return number


class ListOf(Target):
    kinds = frozenset({Kind.LIST})

    def __init__(self, item=None):
        self.item_target = resolve(item)

    def item(self):
        return self.item_target

    def list(self, items):
        return items


class DictOf(Target):
    kinds = frozenset({Kind.DICTIONARY})

    def __init__(self, value=None, key=bytes):
        key_target = resolve(key)
        if not isinstance(key_target, (Bytes, Text, Dynamic)):
            raise TypeError(f'Dictionary keys must decode to bytes or str, not: {key!r}')

        self.key_target = key_target
        self.value_target = resolve(value)

    def key(self, data):
        return self.key_target.string(data)

    def value(self):
        return self.value_target

    def dictionary(self, entries):
        return entries


class AsValue(Target):
    kinds = _ALL_KINDS

    def string(self, data):
        return Value.string(data)

    def integer(self, number):
        return Value.integer(number)

    def item(self):
        return self

    def list(self, items):
        return Value.list(items)

    def key(self, data):
        return data

    def value(self):
        return self

    def dictionary(self, entries):
        return Value.dictionary(entries)


class Custom(AsValue):
    """Hands the decoded :class:`Value` to ``cls.from_bencode``."""

    def __init__(self, cls):
        self.cls = cls

    def string(self, data):
        return self.cls.from_bencode(super().string(data))

    def integer(self, number):
        return self.cls.from_bencode(super().integer(number))

    def item(self):
        return AsValue()

    def list(self, items):
        return self.cls.from_bencode(super().list(items))

    def value(self):
        return AsValue()

    def dictionary(self, entries):
        return self.cls.from_bencode(super().dictionary(entries))


INT8 = Integer(8)
INT16 = Integer(16)
INT32 = Integer(32)
INT64 = Integer(64)
UINT8 = Integer(8, signed=False)
UINT16 = Integer(16, signed=False)
UINT32 = Integer(32, signed=False)
UINT64 = Integer(64, signed=False)


def resolve(tp):
    if isinstance(tp, Target):
        return tp

    if tp is None or tp is object or tp is typing.Any or isinstance(tp, typing.TypeVar):
        return Dynamic()

    if isinstance(tp, type) and callable(getattr(tp, 'from_bencode', None)):
        return Custom(tp)

    simple_targets = {
        Value: AsValue,
        bytes: Bytes,
        str: Text,
        int: Integer,
        list: ListOf,
        dict: DictOf,
    }
    if tp in simple_targets:
        return simple_targets[tp]()

    origin = getattr(tp, '__origin__', None)
    args = getattr(tp, '__args__', None) or ()
    if origin is list:
        return ListOf(*args)
    elif origin is dict:
        key, value = args if args else (bytes, None)
        return DictOf(value, key=key)

    raise TypeError(f'Unsupported decode target: {tp!r}')
