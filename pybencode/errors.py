class BencodingError(Exception):
    pass


class BencodingSyntaxError(BencodingError):
    def __init__(self, msg, offset):
        super().__init__(f'{msg} (at offset {offset})')
        self.msg = msg
        self.offset = offset


class UnexpectedEndOfInput(BencodingSyntaxError):
    def __init__(self, offset, msg='unexpected end of input'):
        super().__init__(msg, offset)


class TypeMismatchError(BencodingError, TypeError):
    """Raised when a well-formed value cannot be assigned into the requested target."""

    def __init__(self, value, target, msg=None):
        super().__init__(msg or f'Cannot decode {value} into {target}')
        self.value = value
        self.target = target


class IntegerRangeError(TypeMismatchError):
    def __init__(self, number, target):
        super().__init__(f'integer {number}', target, f'Integer {number} out of range for {target}')
        self.number = number


class LimitExceededError(BencodingError):
    def __init__(self, msg, offset, limit):
        super().__init__(f'{msg} (limit {limit}, at offset {offset})')
        self.msg = msg
        self.offset = offset
        self.limit = limit


class UnsupportedTypeError(BencodingError, TypeError):
    def __init__(self, type_, detail=None):
        msg = f'Unsupported type: {type_}'
        super().__init__(f'{msg}. {detail}' if detail else msg)
        self.type = type_
