"""Core decoding components."""

from counterparty_decoder.core.script_extractor import ScriptExtractor, PayloadAccumulator
from counterparty_decoder.core.message_decoder import MessageDecoder, DustOutput
from counterparty_decoder.core.transaction_decoder import (
    TransactionDecoder,
    DecodedTransaction,
    decode_transaction,
)
from counterparty_decoder.core.blockcypher_client import BlockCypherClient, get_json

__all__ = [
    "ScriptExtractor",
    "PayloadAccumulator",
    "MessageDecoder",
    "DustOutput",
    "TransactionDecoder",
    "DecodedTransaction",
    "decode_transaction",
    "BlockCypherClient",
    "get_json",
]
