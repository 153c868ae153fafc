class ResException(Exception):
    '''Base class to extend in order to throw exception in bfres.

    Other than the message, it takes the offset in the stream where the
    problem was found and the chain of the layers that caused the exception;
    each record appends its own "Class.field" while the exception bubbles up.
    '''

    def __init__(self, message='', offset=None, chain=None):
        self.message = message
        self.offset = offset
        self.chain = chain if chain is not None else []
        super().__init__(message)

    def __str__(self):
        msg = self.message
        if self.offset is not None:
            msg += ' (at offset 0x%x)' % self.offset
        if self.chain:
            msg += ' [%s]' % ' <- '.join(self.chain)
        return msg


class FormatException(ResException):
    '''The data doesn't follow the format.'''
    pass


class MagicException(FormatException):

    def __init__(self, expected, actual, offset=None, chain=None):
        self.expected = expected
        self.actual = actual
        super().__init__(
            'signature mismatch: expected %r, got %r' % (expected, actual),
            offset=offset,
            chain=chain,
        )


class EndOfStreamException(FormatException, EOFError):
    '''Raised when the stream ends before the data we are asked for.'''
    pass


class Yaz0Exception(FormatException):
    pass


class LogicException(ResException):
    '''The caller violated the contract of the API, like asking for an
    impossible alignment or saving values that can't be packed.'''
    pass
