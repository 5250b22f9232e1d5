"""
Field Encoding
==============

Conversions between strings, hex and field integers.

Version: 0.1.0
"""

import re

from zkreserves.errors import StructuralInputError


# ASCII digits only; int() alone also takes "+", "_" and Unicode digits
_HEX_RE = re.compile(r"0[xX][0-9a-fA-F]+")
_DECIMAL_RE = re.compile(r"[0-9]+")


def encode_account_id(account_id: str, modulus: int) -> int:
    """
    Encode an account identifier as a field integer.

    The UTF-8 bytes are read as one big-endian integer and reduced
    modulo the hash domain.
    """
    return int.from_bytes(account_id.encode("utf-8"), "big") % modulus


def parse_field_element(value: object, field: str = "value") -> int:
    """
    Parse a non-negative integer from an int, a 0x-prefixed hex string
    or a decimal string.

    Raises:
        StructuralInputError: If the value is not numeric or is negative
    """
    if isinstance(value, bool):
        raise StructuralInputError("expected an integer, got a boolean", field=field)

    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if _HEX_RE.fullmatch(text):
            parsed = int(text[2:], 16)
        elif _DECIMAL_RE.fullmatch(text):
            parsed = int(text, 10)
        else:
            raise StructuralInputError(f"not a numeric value: {value!r}", field=field)
    else:
        raise StructuralInputError(
            f"expected int or numeric string, got {type(value).__name__}",
            field=field,
        )

    if parsed < 0:
        raise StructuralInputError("must be non-negative", field=field)
    return parsed


def to_hex(value: int) -> str:
    """Format a field integer as 0x-prefixed lowercase hex."""
    return f"0x{value:x}"


def to_padded_hex(value: int) -> str:
    """Format a field integer as 0x-prefixed 64-digit hex for display."""
    return f"0x{value:064x}"


# Names stored by the registry fit in one field element
MAX_SHORT_STRING_BYTES = 31


def encode_short_string(text: str) -> int:
    """
    Encode a name of at most 31 UTF-8 bytes as a big-endian integer.

    Raises:
        StructuralInputError: If the encoded name is too long
    """
    data = text.encode("utf-8")
    if len(data) > MAX_SHORT_STRING_BYTES:
        raise StructuralInputError(
            f"longer than {MAX_SHORT_STRING_BYTES} bytes",
            field="name",
        )
    return int.from_bytes(data, "big")


def decode_short_string(value: int) -> str | None:
    """Decode an encoded name, or None if it is not valid UTF-8."""
    if value <= 0:
        return None
    data = value.to_bytes((value.bit_length() + 7) // 8, "big")
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return None
