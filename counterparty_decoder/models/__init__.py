"""Data models and configuration."""

from counterparty_decoder.models.config import DecoderConfig, ISSUANCE_FORMAT_CHANGE_HEIGHT
from counterparty_decoder.models.transaction import Transaction, Output
from counterparty_decoder.models.messages import (
    CounterpartyMessage,
    ClassicSend,
    EnhancedSend,
    Sweep,
    DexOrder,
    Btcpay,
    Dispenser,
    IssuanceLegacy,
    Issuance,
    IssuanceSubasset,
    Broadcast,
    Dividend,
    MESSAGE_TYPES,
    MessageHeader,
    NoMessage,
    Decoded,
    DecodeFailure,
    DecodeResult,
)

__all__ = [
    "DecoderConfig",
    "ISSUANCE_FORMAT_CHANGE_HEIGHT",
    "Transaction",
    "Output",
    "CounterpartyMessage",
    "ClassicSend",
    "EnhancedSend",
    "Sweep",
    "DexOrder",
    "Btcpay",
    "Dispenser",
    "IssuanceLegacy",
    "Issuance",
    "IssuanceSubasset",
    "Broadcast",
    "Dividend",
    "MESSAGE_TYPES",
    "MessageHeader",
    "NoMessage",
    "Decoded",
    "DecodeFailure",
    "DecodeResult",
]
