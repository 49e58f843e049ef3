import logging
import re
from decimal import Decimal

from .errors import BlockType, ConversionContext, InvalidBlock, NoConversionAvailable

logger = logging.getLogger(__name__)

INTEGER_PATTERN = re.compile(rb"[+-]?[0-9]+")
DIGITS = frozenset("0123456789")

Value = bytes | str | int | list | dict


# int() and str() refuse numbers beyond sys.get_int_max_str_digits(),
# Decimal converts without that cap
def _parse_decimal(digits: bytes) -> int:
    return int(Decimal(digits.decode("ascii")))


def _format_decimal(number: int) -> str:
    return str(Decimal(number))


# Examples:
#
# - decode_bencode(b"5:hello") -> b"hello", 6
# - decode_bencode(b"li1ei2ee") -> [1, 2], 7
# - decode_bencode(b"li1ei2ee", 1) -> 1, 3
#
# The returned position is the offset of the last byte of the block,
# so callers resume at position + 1.
def decode_bencode(
    bencode: bytes, pos: int = 0, encoding: str = "utf-8", raw: bool = True
) -> tuple[Value, int]:
    size = len(bencode)

    def invalid(block_type: BlockType, end: int, reason: str) -> InvalidBlock:
        return InvalidBlock(bencode, pos, end, block_type, encoding, reason)

    char_at_pos = chr(bencode[pos]) if pos < size else ""
    if char_at_pos == "d":  # dictionaries
        elements = []
        element_positions = []
        end = pos + 1
        while end < size and chr(bencode[end]) != "e":
            element, element_end = decode_bencode(bencode, end, encoding, raw)
            elements.append(element)
            element_positions.append(end)
            end = element_end + 1

        if end >= size:
            raise invalid(BlockType.DICT, size - 1, "dict does not end")
        if len(elements) % 2 != 0:
            raise invalid(BlockType.DICT, end, "dict has an odd number of elements")

        items = {}
        for index in range(0, len(elements), 2):
            key = elements[index]
            if not isinstance(key, (bytes, str)):
                key_start = element_positions[index]
                key_end = element_positions[index + 1] - 1
                raise InvalidBlock(
                    bencode,
                    key_start,
                    key_end,
                    BlockType.DICT,
                    encoding,
                    "dict key is not a string",
                )
            items[key] = elements[index + 1]

        return items, end
    elif char_at_pos == "l":  # lists
        items = []
        end = pos + 1
        # Running off the buffer ends in the straw character error below
        while end >= size or chr(bencode[end]) != "e":
            item, item_end = decode_bencode(bencode, end, encoding, raw)
            items.append(item)
            end = item_end + 1

        return items, end
    elif char_at_pos == "i":  # integers
        end = bencode.find(b"e", pos + 1)
        if end == -1:
            raise invalid(BlockType.INTEGER, size - 1, "Integer block does not end")

        digits = bencode[pos + 1 : end]
        if not INTEGER_PATTERN.fullmatch(digits):
            raise invalid(
                BlockType.INTEGER,
                end,
                "Integer block contains a non-decimal character",
            )
        return _parse_decimal(digits), end
    elif char_at_pos in DIGITS:  # strings
        colon = pos
        while colon < size and chr(bencode[colon]) != ":":
            if chr(bencode[colon]) not in DIGITS:
                raise invalid(
                    BlockType.STRING,
                    colon,
                    "Length description of string contains a non-decimal character",
                )
            colon += 1

        if colon >= size:
            raise invalid(BlockType.STRING, size - 1, "String does not contain a colon")

        length = _parse_decimal(bencode[pos:colon])
        if colon + length >= size:
            raise invalid(
                BlockType.STRING,
                size - 1,
                "Length description of string exceeds length of byte stream",
            )

        end = colon + length
        value = bencode[colon + 1 : end + 1]
        if raw:
            return value, end

        try:
            return value.decode(encoding), end
        except UnicodeDecodeError as error:
            raise invalid(
                BlockType.STRING, end, f"String is not valid {encoding}"
            ) from error
    else:
        raise invalid(BlockType.UNKNOWN, pos, "Invalid straw character.")


def encode_bencode(data: Value, encoding: str = "utf-8") -> bytes:
    if isinstance(data, bool):
        # bool is an int subclass, but has no bencode form
        raise NoConversionAvailable(data)
    elif isinstance(data, int):
        return f"i{_format_decimal(data)}e".encode()
    elif isinstance(data, str):
        return encode_bencode(data.encode(encoding), encoding)
    elif isinstance(data, bytes):
        return f"{len(data)}:".encode() + data
    elif isinstance(data, list):
        elements = [encode_bencode(element, encoding) for element in data]
        return b"l" + b"".join(elements) + b"e"
    elif isinstance(data, dict):
        for key in data:
            if not isinstance(key, (str, bytes)):
                raise NoConversionAvailable(key, ConversionContext.DICT)
        elements = [
            encode_bencode(key, encoding) + encode_bencode(value, encoding)
            for key, value in data.items()
        ]
        return b"d" + b"".join(elements) + b"e"
    raise NoConversionAvailable(data)


def bencode(data: Value, encoding: str = "utf-8") -> str:
    """Encodes `data` and returns the bencoded text in `encoding`.

    Use `encode_bencode` directly for binary payloads (e.g. piece hashes)
    that aren't valid text.
    """
    encoded = encode_bencode(data, encoding)
    logger.debug("Encoded %s into %d bytes", type(data).__name__, len(encoded))
    try:
        return encoded.decode(encoding)
    except UnicodeDecodeError as error:
        raise NoConversionAvailable(data) from error


def bdecode(
    bencoded: str | bytes, encoding: str = "utf-8", raw: bool = False
) -> Value:
    """Decodes a complete bencoded text.

    Strings are returned as `str`, or as `bytes` when `raw` is set.

    Raises `InvalidBlock` for malformed input, including any bytes left over
    after the first block.
    """
    if isinstance(bencoded, str):
        bencoded = bencoded.encode(encoding)
    logger.debug("Decoding %d bytes as %s", len(bencoded), encoding)

    value, end = decode_bencode(bencoded, 0, encoding, raw)
    size = len(bencoded)
    if end != size - 1:
        raise InvalidBlock(
            bencoded,
            end + 1,
            size,
            BlockType.UNKNOWN,
            encoding,
            "Invalid straw characters.",
        )
    return value
