"""Error types raised while decoding Counterparty transactions."""

from typing import Optional


class CounterpartyDecodeError(Exception):
    """Base error for anything that prevents a message from being decoded."""

    reason = "DecodeError"

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail

    def to_dict(self):
        return {"reason": self.reason, "message": str(self), "detail": self.detail}


class UnsupportedMessageType(CounterpartyDecodeError):
    """Message type id is unknown, or not valid at the given block height."""

    reason = "UnsupportedMessageType"

    def __init__(self, message_type_id: int, block_height: Optional[int] = None):
        if block_height is None:
            text = f"Unsupported message type {message_type_id}"
        else:
            text = f"Unsupported message type {message_type_id} at block height {block_height}"
        super().__init__(text, detail=str(message_type_id))
        self.message_type_id = message_type_id
        self.block_height = block_height


class TruncatedPayload(CounterpartyDecodeError):
    """Not enough bytes left for a fixed-width field."""

    reason = "TruncatedPayload"

    def __init__(self, field: str, needed: int = 0, available: int = 0):
        super().__init__(
            f"Payload truncated in field '{field}': needed {needed} bytes, {available} available",
            detail=field,
        )
        self.field = field
        self.needed = needed
        self.available = available


class UnknownAddressVersion(CounterpartyDecodeError):
    reason = "UnknownAddressVersion"

    def __init__(self, version: int):
        super().__init__(f"Unknown address version byte 0x{version:02x}", detail=f"{version:02x}")
        self.version = version


class InvalidSubassetEncoding(CounterpartyDecodeError):
    reason = "InvalidSubassetEncoding"


class MalformedPayload(CounterpartyDecodeError):
    """Payload is not a valid hex string."""

    reason = "MalformedPayload"


class InvalidTransactionDocument(Exception):
    """Explorer transaction document is missing required fields."""
    pass


class TransactionFetchError(Exception):
    """Block explorer request failed."""
    pass
