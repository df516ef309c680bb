"""Bitcoin-specific utility functions."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

# Satoshis per Bitcoin
SATOSHIS_PER_BTC = Decimal('100000000')

OP_RETURN = 0x6a
OP_PUSHDATA1 = 0x4c
OP_PUSHDATA2 = 0x4d
OP_PUSHDATA4 = 0x4e


def satoshi_to_btc(satoshis: int) -> Decimal:
    """Convert satoshis to BTC."""
    return Decimal(satoshis) / SATOSHIS_PER_BTC


def format_btc(satoshis: Optional[int]) -> Optional[str]:
    """Satoshis as a BTC string with exactly 8 decimals."""
    if satoshis is None:
        return None
    return f"{satoshi_to_btc(satoshis):.8f}"


def bytes_to_text(data: bytes) -> str:
    """Decode a text field carried in a message."""
    return data.decode('utf-8', errors='replace')


def printable_ascii(data: bytes) -> str:
    """Printable ASCII view of raw bytes, anything else shown as '?'."""
    return ''.join(chr(b) if 32 <= b <= 126 else '?' for b in data)


def format_timestamp(ts: int) -> Optional[str]:
    """Unix timestamp as ISO-8601 UTC, like JavaScript's toISOString()."""
    try:
        dt = datetime.fromtimestamp(ts, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
    return dt.strftime('%Y-%m-%dT%H:%M:%S.') + f"{dt.microsecond // 1000:03d}Z"


def op_return_data(script_hex: str) -> Optional[str]:
    """Return the hex of the single push following OP_RETURN, if any."""
    if not script_hex:
        return None

    script = bytes.fromhex(script_hex)
    if len(script) < 2 or script[0] != OP_RETURN:
        return None

    opcode = script[1]
    i = 2
    if opcode < OP_PUSHDATA1:
        length = opcode
    elif opcode == OP_PUSHDATA1 and len(script) >= 3:
        length = script[2]
        i = 3
    elif opcode == OP_PUSHDATA2 and len(script) >= 4:
        length = int.from_bytes(script[2:4], 'little')
        i = 4
    elif opcode == OP_PUSHDATA4 and len(script) >= 6:
        length = int.from_bytes(script[2:6], 'little')
        i = 6
    else:
        return None

    return script[i:i + length].hex()
