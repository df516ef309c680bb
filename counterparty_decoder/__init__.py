"""
Counterparty Transaction Decoder

Recovers the Counterparty message embedded in a Bitcoin transaction
(OP_RETURN or multisig encoded) and decodes it into a typed record.
"""

__version__ = "1.0.0"
__author__ = "Counterparty Explorer Team"
__description__ = "Decoder for Counterparty messages embedded in Bitcoin transactions"

from counterparty_decoder.core.transaction_decoder import TransactionDecoder, decode_transaction
from counterparty_decoder.core.message_decoder import MessageDecoder
from counterparty_decoder.core.script_extractor import ScriptExtractor
from counterparty_decoder.core.blockcypher_client import BlockCypherClient, get_json
from counterparty_decoder.models.config import DecoderConfig

__all__ = [
    "TransactionDecoder",
    "decode_transaction",
    "MessageDecoder",
    "ScriptExtractor",
    "BlockCypherClient",
    "get_json",
    "DecoderConfig",
]
