from pybencode.bencoding import encode, decode, iter_decode
from pybencode.decoder import Decoder
from pybencode.encoder import Encoder
from pybencode.errors import (BencodingError, BencodingSyntaxError, UnexpectedEndOfInput, TypeMismatchError,
                              IntegerRangeError, LimitExceededError, UnsupportedTypeError)
from pybencode.values import Kind, Value
