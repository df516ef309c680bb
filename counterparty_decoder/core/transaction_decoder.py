"""End-to-end decoding of an explorer transaction document."""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import structlog

from counterparty_decoder.core.message_decoder import DustOutput, MessageDecoder
from counterparty_decoder.core.script_extractor import ExtractedPayload, ScriptExtractor
from counterparty_decoder.models.config import DecoderConfig
from counterparty_decoder.models.messages import DecodeFailure, DecodeResult, Decoded, NoMessage
from counterparty_decoder.models.transaction import Transaction
from counterparty_decoder.utils.bitcoin import format_btc

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class DecodedTransaction:
    """Transaction summary plus the outcome of decoding its Counterparty payload."""
    transaction: Transaction
    extracted: ExtractedPayload
    result: DecodeResult

    @property
    def message(self):
        return self.result.message if isinstance(self.result, Decoded) else None

    def tx_summary(self) -> Dict[str, Any]:
        tx = self.transaction
        return {
            'hash': tx.hash,
            'from_addr': tx.from_addr,
            'confirmed': tx.confirmed,
            'size': tx.size,
            'vsize': tx.vsize,
            'fees': tx.fees,
            'fees_btc': format_btc(tx.fees),
            'recipient': self.extracted.recipient,
            'first_send_sat': tx.first_send_sat,
            'first_send_btc': format_btc(tx.first_send_sat),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Response document: ``{"tx": ..., "cntrprty": null | {...}}``."""
        cntrprty = None
        header = getattr(self.result, 'header', None)

        if header is not None:
            cntrprty = {'encoding': self.extracted.encoding}
            cntrprty.update(header.to_dict())
            if isinstance(self.result, Decoded):
                cntrprty['msg_decoded'] = self.result.message.to_dict()
        if isinstance(self.result, DecodeFailure):
            cntrprty = cntrprty or {'encoding': self.extracted.encoding}
            cntrprty['error'] = self.result.error.to_dict()

        return {'tx': self.tx_summary(), 'cntrprty': cntrprty}


class TransactionDecoder:
    """Extract the payload from a transaction and decode the message it carries."""

    def __init__(self, config: Optional[DecoderConfig] = None):
        self.config = config or DecoderConfig()
        self.extractor = ScriptExtractor(self.config)
        self.message_decoder = MessageDecoder(self.config.format_change_height)
        self.logger = logger.bind(component="transaction_decoder")

    def decode(self, tx: Union[Transaction, Dict[str, Any]]) -> DecodedTransaction:
        if not isinstance(tx, Transaction):
            tx = Transaction.from_api(tx)

        extracted = self.extractor.extract_payload(tx)
        dust = DustOutput(extracted.recipient, extracted.first_send_sat)
        result = self.message_decoder.decode(extracted.payload_hex, tx.block_height, dust)

        if isinstance(result, NoMessage):
            self.logger.debug("No Counterparty data found", tx_hash=tx.hash)
        else:
            self.logger.info("Decoded transaction",
                             tx_hash=tx.hash,
                             block_height=tx.block_height,
                             encoding=extracted.encoding,
                             ok=result.ok,
                             message_type=getattr(getattr(result, 'header', None), 'msg_type', None))

        return DecodedTransaction(transaction=tx, extracted=extracted, result=result)


def decode_transaction(tx: Union[Transaction, Dict[str, Any]],
                       config: Optional[DecoderConfig] = None) -> Dict[str, Any]:
    """Decode an explorer transaction document into the response document."""
    return TransactionDecoder(config).decode(tx).to_dict()
