import enum
from collections.abc import Mapping

import attr


class Kind(enum.Enum):
    STRING = 'string'
    INTEGER = 'integer'
    LIST = 'list'
    DICTIONARY = 'dictionary'

    def __str__(self):
        return self.value


@attr.s(frozen=True, slots=True, repr=False)
class Value:
    """A decoded bencode value tagged with its kind.

    Payloads are stored in an immutable form: ``bytes`` for strings, ``int``
    for integers, a tuple of values for lists and a tuple of ``(key, value)``
    pairs sorted by key for dictionaries.
    """

    kind = attr.ib(validator=attr.validators.instance_of(Kind))
    data = attr.ib()

    @classmethod
    def string(cls, data):
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f'String value requires bytes, not: {type(data)}')
        return cls(Kind.STRING, bytes(data))

    @classmethod
    def integer(cls, number):
        if not isinstance(number, int):
            raise TypeError(f'Integer value requires int, not: {type(number)}')
        return cls(Kind.INTEGER, int(number))

    @classmethod
    def list(cls, items):
        items = tuple(items)
        for item in items:
            if not isinstance(item, Value):
                raise TypeError(f'List items must be Value, not: {type(item)}')
        return cls(Kind.LIST, items)

    @classmethod
    def dictionary(cls, entries):
        if isinstance(entries, Mapping):
            entries = entries.items()

        pairs = []
        for key, item in entries:
            if not isinstance(key, (bytes, bytearray)):
                raise TypeError(f'Dictionary keys must be bytes, not: {type(key)}')
            if not isinstance(item, Value):
                raise TypeError(f'Dictionary values must be Value, not: {type(item)}')
            pairs.append((bytes(key), item))

        pairs.sort(key=lambda pair: pair[0])
        for previous, current in zip(pairs, pairs[1:]):
            if previous[0] == current[0]:
                raise ValueError(f'Duplicate dictionary key: {current[0]!r}')

        return cls(Kind.DICTIONARY, tuple(pairs))

    @classmethod
    def from_python(cls, obj, encoding='utf-8'):
        if isinstance(obj, Value):
            return obj
        elif isinstance(obj, (bytes, bytearray, memoryview)):
            return cls.string(obj)
        elif isinstance(obj, str):
            return cls.string(obj.encode(encoding))
        elif isinstance(obj, int):
            return cls.integer(obj)
        elif isinstance(obj, (list, tuple)):
            return cls.list(cls.from_python(item, encoding) for item in obj)
        elif isinstance(obj, Mapping):
            entries = []
            for key, item in obj.items():
                if isinstance(key, str):
                    key = key.encode(encoding)
                entries.append((key, cls.from_python(item, encoding)))
            return cls.dictionary(entries)
        else:
            raise TypeError(f'Cannot represent {type(obj)} as a bencode value')

    def to_python(self):
        if self.kind is Kind.LIST:
            return [item.to_python() for item in self.data]
        elif self.kind is Kind.DICTIONARY:
            return {key: item.to_python() for key, item in self.data}
        return self.data

    def __repr__(self):
        return f'Value.{self.kind.name.lower()}({self.data!r})'
