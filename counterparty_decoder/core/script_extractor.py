"""Extraction of the embedded Counterparty payload from transaction outputs."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import structlog

from counterparty_decoder.codecs.rc4 import rc4
from counterparty_decoder.models.config import DecoderConfig
from counterparty_decoder.models.transaction import Output, Transaction
from counterparty_decoder.utils.bitcoin import op_return_data

logger = structlog.get_logger(__name__)

PREFIX = b'CNTRPRTY'
PREFIX_HEX = PREFIX.hex()

ENCODING_OP_RETURN = "op_return"
ENCODING_OLD_MULTISIG = "multisig (old type, not rc4 encoded)"
ENCODING_MULTISIG = "multisig"

OLD_MULTISIG_SCRIPT_LENGTH = 71
OLD_MULTISIG_LENGTH_OFFSET = 36
MULTISIG_SCRIPT_LENGTH = 105
# Data bytes of the first two fake pubkeys, without sign byte and last byte
MULTISIG_WINDOWS = ((3, 34), (37, 68))


@dataclass(frozen=True)
class PayloadFragment:
    output_index: int
    encoding: str
    data: bytes
    decrypted: bool


@dataclass
class PayloadAccumulator:
    """Ordered payload fragments taken from consecutive outputs."""
    fragments: List[PayloadFragment] = field(default_factory=list)

    def append(self, fragment: PayloadFragment) -> None:
        self.fragments.append(fragment)

    @property
    def data(self) -> bytes:
        return b''.join(f.data for f in self.fragments)

    @property
    def has_prefix(self) -> bool:
        return self.data.startswith(PREFIX)

    @property
    def encoding(self) -> Optional[str]:
        return self.fragments[-1].encoding if self.fragments else None


@dataclass(frozen=True)
class ExtractedPayload:
    payload_hex: str
    encoding: Optional[str]
    recipient: Optional[str]
    first_send_sat: Optional[int]
    fragments: Tuple[PayloadFragment, ...] = ()


class ScriptExtractor:
    """Walk transaction outputs and reassemble the Counterparty payload."""

    def __init__(self, config: Optional[DecoderConfig] = None):
        self.config = config or DecoderConfig()
        self.logger = logger.bind(component="script_extractor")

    def cipher_key(self, tx: Transaction) -> bytes:
        """Key material derived from the first input's outpoint hash."""
        if self.config.rc4_key_encoding == "hex":
            return bytes.fromhex(tx.prev_hash)
        return tx.prev_hash.encode('ascii')

    def extract(self, tx: Transaction) -> str:
        """Return the accumulated payload hex, possibly empty."""
        return self.extract_payload(tx).payload_hex

    def extract_payload(self, tx: Transaction) -> ExtractedPayload:
        recipient = None
        first_send_sat = None
        if tx.outputs and tx.outputs[0].is_p2pkh:
            # Classic sends, btcpays and issuance transfers pay dust to output 0
            recipient = tx.outputs[0].first_address
            first_send_sat = tx.outputs[0].value

        key = self.cipher_key(tx)
        accumulator = PayloadAccumulator()

        for index, output in enumerate(tx.outputs):
            fragment = None
            if output.is_null_data:
                fragment = self._from_op_return(index, output, key)
            elif output.is_multisig:
                script = bytes.fromhex(output.script) if output.script else b''
                if len(script) == OLD_MULTISIG_SCRIPT_LENGTH:
                    fragment = self._from_old_multisig(index, script, accumulator)
                elif len(script) == MULTISIG_SCRIPT_LENGTH:
                    fragment = self._from_multisig(index, script, key, accumulator)

            if fragment is not None:
                accumulator.append(fragment)

        payload_hex = accumulator.data.hex()
        self.logger.debug("Extracted payload",
                          tx_hash=tx.hash,
                          fragments=len(accumulator.fragments),
                          encoding=accumulator.encoding,
                          payload_bytes=len(payload_hex) // 2)

        return ExtractedPayload(
            payload_hex=payload_hex,
            encoding=accumulator.encoding,
            recipient=recipient,
            first_send_sat=first_send_sat,
            fragments=tuple(accumulator.fragments),
        )

    def _from_op_return(self, index: int, output: Output, key: bytes) -> Optional[PayloadFragment]:
        data_hex = output.data_hex or op_return_data(output.script)
        if not data_hex:
            return None

        raw = rc4(key, bytes.fromhex(data_hex))
        if not raw.startswith(PREFIX):
            self.logger.debug("Discarding OP_RETURN without prefix", output_index=index)
            return None
        return PayloadFragment(index, ENCODING_OP_RETURN, raw, decrypted=True)

    def _from_old_multisig(self, index: int, script: bytes,
                           accumulator: PayloadAccumulator) -> Optional[PayloadFragment]:
        length = script[OLD_MULTISIG_LENGTH_OFFSET]
        start = OLD_MULTISIG_LENGTH_OFFSET + 1
        raw = script[start:start + length]
        if raw.startswith(PREFIX) or accumulator.has_prefix:
            return PayloadFragment(index, ENCODING_OLD_MULTISIG, raw, decrypted=False)
        return None

    def _from_multisig(self, index: int, script: bytes, key: bytes,
                       accumulator: PayloadAccumulator) -> Optional[PayloadFragment]:
        chunk = b''.join(script[start:end] for start, end in MULTISIG_WINDOWS)
        decrypted = rc4(key, chunk)
        length = decrypted[0]
        raw = decrypted[1:1 + length]

        if not raw.startswith(PREFIX):
            return None
        if accumulator.has_prefix:
            # Continuation chunk, the prefix is only kept once
            raw = raw[len(PREFIX):]
        return PayloadFragment(index, ENCODING_MULTISIG, raw, decrypted=True)
