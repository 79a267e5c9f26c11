import io

from pybencode.decoder import Decoder
from pybencode.encoder import Encoder
from pybencode.errors import BencodingSyntaxError, UnexpectedEndOfInput


def encode(item, encoding='utf-8', **options):
    sink = io.BytesIO()
    Encoder(sink, encoding, **options).encode(item)
    return sink.getvalue()


def decode(encoded, target=None, **options):
    """Decode a complete bencoded blob holding exactly one value."""
    if isinstance(encoded, str):
        encoded = encoded.encode('utf-8')

    source = io.BytesIO(encoded)
    decoder = Decoder(source, **options)
    try:
        item = decoder.decode(target)
    except EOFError as e:
        raise UnexpectedEndOfInput(0, 'Empty input') from e

    leftover = len(encoded) - decoder.offset
    if leftover:
        raise BencodingSyntaxError(f'Failed to decode entire content. Leftover length: {leftover}',
                                   decoder.offset)

    return item


def iter_decode(source, target=None, **options):
    decoder = Decoder(source, **options)
    while True:
        try:
            yield decoder.decode(target)
        except EOFError:
            return
