"""Transaction data models built from block explorer responses."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from counterparty_decoder.errors import InvalidTransactionDocument

P2PKH = "pay-to-pubkey-hash"
MULTISIG = "pay-to-multi-pubkey-hash"
NULL_DATA = "null-data"


@dataclass(frozen=True)
class Output:
    """Transaction output as classified by the explorer."""
    script_type: str
    value: int
    script: str = ""
    data_hex: Optional[str] = None
    addresses: Tuple[str, ...] = ()

    @property
    def is_p2pkh(self) -> bool:
        return self.script_type == P2PKH

    @property
    def is_multisig(self) -> bool:
        return self.script_type == MULTISIG

    @property
    def is_null_data(self) -> bool:
        return self.script_type == NULL_DATA

    @property
    def first_address(self) -> Optional[str]:
        return self.addresses[0] if self.addresses else None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Output":
        return cls(
            script_type=data.get('script_type', 'unknown'),
            value=int(data.get('value', 0) or 0),
            script=(data.get('script') or '').lower(),
            data_hex=data['data_hex'].lower() if data.get('data_hex') else None,
            addresses=tuple(data.get('addresses') or ()),
        )


@dataclass(frozen=True)
class Transaction:
    """Transaction-level data needed to find and decode a Counterparty message."""
    hash: str
    block_height: int
    fees: int
    size: Optional[int]
    vsize: Optional[int]
    confirmed: Optional[str]
    from_addr: Optional[str]
    prev_hash: str
    outputs: Tuple[Output, ...] = field(default_factory=tuple)

    @property
    def first_send_sat(self) -> Optional[int]:
        return self.outputs[0].value if self.outputs else None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Transaction":
        """Build from a BlockCypher ``/txs/<hash>`` response."""
        try:
            tx_hash = data['hash']
            inputs = data['inputs']
            outputs = data['outputs']
        except (KeyError, TypeError) as e:
            raise InvalidTransactionDocument(f"Missing transaction field: {e}")

        if not inputs or not inputs[0].get('prev_hash'):
            raise InvalidTransactionDocument(f"Transaction {tx_hash} has no spendable input")

        addresses = data.get('addresses') or []
        block_height = data.get('block_height')
        if block_height is None or block_height < 0:
            # Unconfirmed transactions are decoded with the newest layouts
            block_height = 2 ** 31

        return cls(
            hash=tx_hash,
            block_height=int(block_height),
            fees=int(data.get('fees', 0) or 0),
            size=data.get('size'),
            vsize=data.get('vsize'),
            confirmed=data.get('confirmed'),
            from_addr=addresses[0] if addresses else None,
            prev_hash=inputs[0]['prev_hash'],
            outputs=tuple(Output.from_api(o) for o in outputs),
        )
