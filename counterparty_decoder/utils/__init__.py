"""Utility functions and helpers."""

from counterparty_decoder.utils.logging import setup_logging
from counterparty_decoder.utils.bitcoin import (
    satoshi_to_btc,
    format_btc,
    op_return_data,
)

__all__ = [
    "setup_logging",
    "satoshi_to_btc",
    "format_btc",
    "op_return_data",
]
