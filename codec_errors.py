"""
Исключения кодеков. Все наследуются от ValueError, как и ошибки формата архива.
"""


class CodecError(ValueError):
    pass


class MalformedTableError(CodecError):
    pass


class TruncatedStreamError(CodecError):
    pass


class CorruptContainerError(CodecError):
    pass


class DecompressionError(CodecError):
    pass


class InputTooLargeError(CodecError):
    pass


class MalformedDeltaError(CodecError):
    pass


class UnrecognizedFormatError(CodecError):
    pass
