"""Compact subasset long-name decoding."""

from counterparty_decoder.errors import InvalidSubassetEncoding

SUBASSET_DIGITS = 'abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789.-_@!'
# One more than the alphabet: digit 0 is never emitted, ``a`` is 1 and ``!`` is 67
SUBASSET_BASE = 68


def subasset_from_int(integer: int) -> str:
    """Decode a subasset long name from its big-integer form.

    Each base-68 digit ``d`` maps to ``SUBASSET_DIGITS[d - 1]``. A zero digit
    has no symbol and makes the encoding invalid.
    """
    if integer <= 0:
        raise InvalidSubassetEncoding(
            "Subasset integer must be positive", detail=str(integer)
        )

    original = integer
    ret = ''
    while integer != 0:
        integer, remainder = divmod(integer, SUBASSET_BASE)
        if remainder == 0:
            raise InvalidSubassetEncoding(
                "Subasset integer contains a zero digit", detail=str(original)
            )
        ret = SUBASSET_DIGITS[remainder - 1] + ret
    return ret


def subasset_from_bytes(data: bytes) -> str:
    if not data:
        raise InvalidSubassetEncoding("Subasset name is empty")
    return subasset_from_int(int.from_bytes(data, 'big'))
