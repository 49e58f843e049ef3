from enum import Enum


class BlockType(str, Enum):
    DICT = "dict"
    LIST = "list"
    INTEGER = "integer"
    STRING = "string"
    UNKNOWN = "unknown"


class ConversionContext(str, Enum):
    GENERIC = "generic"
    # A dictionary key that isn't a byte string
    DICT = "dict"


class BencodeError(Exception):
    pass


class NoConversionAvailable(BencodeError, TypeError):
    def __init__(self, value, context: ConversionContext = ConversionContext.GENERIC):
        self.value = value
        self.value_type = type(value)
        self.context = ConversionContext(context)
        super().__init__(self._message())

    def _message(self) -> str:
        if self.context is ConversionContext.DICT:
            return (
                f"Cannot encode dictionary key {self.value!r}: "
                f"keys must be strings, got {self.value_type.__name__}"
            )
        return f"Cannot encode {self.value!r} of type {self.value_type.__name__}"


class InvalidBlock(BencodeError, ValueError):
    """A block of a bencoded buffer that doesn't follow the grammar.

    `start` and `end` are byte offsets into `buffer` (both inclusive). The
    human readable diagnostic is only rendered when the error is turned into
    a string.
    """

    def __init__(
        self,
        buffer: bytes,
        start: int,
        end: int,
        block_type: BlockType,
        encoding: str,
        reason: str,
    ):
        self.buffer = buffer
        self.start = start
        self.end = end
        self.block_type = BlockType(block_type)
        self.encoding = encoding
        self.reason = reason
        super().__init__(reason)

    @property
    def block(self) -> bytes:
        return self.buffer[self.start : self.end + 1]

    def __str__(self) -> str:
        # diagnostics imports this module
        from .diagnostics import render_invalid_block

        return render_invalid_block(self)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(block_type={self.block_type.value!r}, "
            f"start={self.start}, end={self.end}, reason={self.reason!r})"
        )
