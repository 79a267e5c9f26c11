import io
import unittest
from collections import OrderedDict

from pybencode.encoder import Encoder
from pybencode.errors import BencodingError, UnsupportedTypeError
from pybencode.values import Value

from tests.stubs.source import RecordingSinkStub


def _encode(item, **options):
    sink = io.BytesIO()
    Encoder(sink, **options).encode(item)
    return sink.getvalue()


class Peer:
    def __init__(self, host, port):
        self.host = host
        self.port = port

    def to_bencode(self):
        return b'd4:host%d:%s4:porti%dee' % (len(self.host), self.host, self.port)


class EncoderTests(unittest.TestCase):
    def test_encode_int(self):
        inputs = [0, -1, 123, -123, 2 ** 70, True, False]
        expected_outputs = [b'i0e', b'i-1e', b'i123e', b'i-123e', b'i1180591620717411303424e', b'i1e', b'i0e']

        for i, input in enumerate(inputs):
            expected_output = expected_outputs[i]
            output = _encode(input)
            self.assertEqual(output, expected_output)

    def test_encode_bytes(self):
        inputs = [b'', b'test', bytearray(b'hello, world!'), memoryview(b'\x00\xff')]
        expected_outputs = [b'0:', b'4:test', b'13:hello, world!', b'2:\x00\xff']

        for i, input in enumerate(inputs):
            expected_output = expected_outputs[i]
            output = _encode(input)
            self.assertEqual(output, expected_output)

    def test_encode_str(self):
        self.assertEqual(_encode('spam'), b'4:spam')
        self.assertEqual(_encode('żółw'), b'7:\xc5\xbc\xc3\xb3\xc5\x82w')
        self.assertEqual(_encode('caf\xe9', encoding='latin-1'), b'4:caf\xe9')

        with self.assertRaises(UnsupportedTypeError):
            _encode('fooÄ', encoding='ascii')

    def test_encode_list(self):
        inputs = [[], [1, 2, 3], [[[]]], ([1, 0], (0, 1)), [1, b'foo', ['bar'], ['spam', 'eggs']]]
        expected_outputs = [b'le', b'li1ei2ei3ee', b'llleee', b'lli1ei0eeli0ei1eee', b'li1e3:fool3:barel4:spam4:eggsee']

        for i, input in enumerate(inputs):
            expected_output = expected_outputs[i]
            output = _encode(input)
            self.assertEqual(output, expected_output)

    def test_encode_dict_sorts_keys(self):
        inputs = [
            {},
            {'spam': 'eggs', 'cow': 'moo'},
            OrderedDict([(b'b', 1), (b'a', 2), (b'ab', 3)]),
            {'foo': {'bar': {'spam': [1, 2, 'eggs']}}},
        ]
        expected_outputs = [
            b'de',
            b'd3:cow3:moo4:spam4:eggse',
            b'd1:ai2e2:abi3e1:bi1ee',
            b'd3:food3:bard4:spamli1ei2e4:eggseeee',
        ]

        for i, input in enumerate(inputs):
            expected_output = expected_outputs[i]
            output = _encode(input)
            self.assertEqual(output, expected_output)

    def test_dict_keys_sort_by_encoded_bytes(self):
        self.assertEqual(_encode({'\xe9': 1, 'z': 2}), b'd1:zi2e2:\xc3\xa9i1ee')

    def test_encode_dict_invalid_keys(self):
        with self.assertRaises(UnsupportedTypeError):
            _encode({3: 'foo'})

        with self.assertRaises(BencodingError):
            _encode({'a': 1, b'a': 2})

    def test_encode_value(self):
        value = Value.dictionary({
            b'spam': Value.list([Value.integer(1), Value.string(b'eggs')]),
            b'cow': Value.string(b'moo'),
        })

        self.assertEqual(_encode(value), b'd3:cow3:moo4:spamli1e4:eggsee')

    def test_unsupported_types(self):
        inputs = [1.5, None, {1, 2}, object()]

        for input in inputs:
            with self.assertRaises(UnsupportedTypeError) as ctx:
                _encode(input)
            self.assertIs(ctx.exception.type, type(input))

    def test_custom_encoding(self):
        self.assertEqual(_encode([Peer(b'host', 6881)]), b'ld4:host4:host4:porti6881eee')

    def test_custom_encoding_must_return_bytes(self):
        class Broken:
            def to_bencode(self):
                return 'not bytes'

        with self.assertRaises(BencodingError):
            _encode(Broken())

    def test_scalar_tokens_written_whole(self):
        sink = RecordingSinkStub()

        Encoder(sink).encode([b'spam', 42])

        self.assertEqual(sink.writes, [b'l', b'4:spam', b'i42e', b'e'])

    def test_unsupported_item_leaves_prefix_in_sink(self):
        sink = RecordingSinkStub()

        with self.assertRaises(UnsupportedTypeError):
            Encoder(sink).encode([1, 2.5, 3])

        self.assertEqual(sink.content, b'li1e')

    def test_sink_errors_propagate(self):
        sink = RecordingSinkStub(fail_after=1)

        with self.assertRaises(OSError):
            Encoder(sink).encode([1, 2])

    def test_integer_digit_limit(self):
        self.assertEqual(_encode(10 ** 4299), b'i1' + b'0' * 4299 + b'e')
        self.assertEqual(_encode(-999, max_integer_digits=3), b'i-999e')

        inputs = [(10 ** 5000, {}), (1000, {'max_integer_digits': 3})]
        for input, options in inputs:
            with self.assertRaises(UnsupportedTypeError):
                _encode(input, **options)
