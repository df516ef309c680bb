"""Counterparty message variants and decode results.

Every message kind is a frozen dataclass. Field names follow the JSON keys
served by the decoder endpoint: ``*_hex`` is the raw big-endian window taken
from the payload and the unsuffixed name is its decoded value.
"""

from dataclasses import asdict, dataclass
from typing import Any, ClassVar, Dict, Optional, Union

from counterparty_decoder.errors import CounterpartyDecodeError


class CounterpartyMessage:
    """Base class of all decoded message variants."""

    message_type_id: ClassVar[int]
    message_type: ClassVar[str]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ClassicSend(CounterpartyMessage):
    message_type_id: ClassVar[int] = 0
    message_type: ClassVar[str] = "Classic Send"

    asset_hex: str
    asset: int
    asset_name: str
    q_hex: str
    q: int
    recipient: Optional[str] = None
    first_send_sat: Optional[int] = None
    first_send_btc: Optional[str] = None


@dataclass(frozen=True)
class EnhancedSend(CounterpartyMessage):
    message_type_id: ClassVar[int] = 2
    message_type: ClassVar[str] = "Enhanced Send"

    recipient_hex: str
    recipient: str
    asset_hex: str
    asset: int
    asset_name: str
    q_hex: str
    q: int
    memo_hex: str
    memo: str


@dataclass(frozen=True)
class Sweep(CounterpartyMessage):
    message_type_id: ClassVar[int] = 4
    message_type: ClassVar[str] = "Sweep"

    recipient_hex: str
    recipient: str
    flag_hex: str
    flag: int
    memo_hex: str
    memo: str


@dataclass(frozen=True)
class DexOrder(CounterpartyMessage):
    message_type_id: ClassVar[int] = 10
    message_type: ClassVar[str] = "DEX Order"

    give_asset_hex: str
    give_asset: int
    give_asset_name: str
    give_q_hex: str
    give_q: int
    get_asset_hex: str
    get_asset: int
    get_asset_name: str
    get_q_hex: str
    get_q: int
    exp_hex: str
    exp: int


@dataclass(frozen=True)
class Btcpay(CounterpartyMessage):
    message_type_id: ClassVar[int] = 11
    message_type: ClassVar[str] = "Btcpay"

    order_0: str
    order_1: str
    order_match_id: str
    recipient: Optional[str] = None
    first_send_sat: Optional[int] = None
    first_send_btc: Optional[str] = None


@dataclass(frozen=True)
class Dispenser(CounterpartyMessage):
    message_type_id: ClassVar[int] = 12
    message_type: ClassVar[str] = "Dispenser"

    asset_hex: str
    asset: int
    asset_name: str
    give_q_hex: str
    give_q: int
    esc_q_hex: str
    esc_q: int
    btc_q_hex: str
    btc_q_sat: int
    btc_q_btc: str
    status_hex: str
    status: int
    disp_addr_hex: str
    disp_addr: Optional[str] = None


@dataclass(frozen=True)
class IssuanceLegacy(CounterpartyMessage):
    """Issuance before the 2022 layout change (callable assets)."""
    message_type_id: ClassVar[int] = 20
    message_type: ClassVar[str] = "Issuance"

    asset_hex: str
    asset: int
    asset_name: str
    q_hex: str
    q: int
    div_hex: str
    div: int
    call_hex: str
    call: int
    call_date_hex: str
    call_date: int
    call_price_hex: str
    call_price: int
    len_hex: str
    len: int
    descr_hex: str
    descr: str


@dataclass(frozen=True)
class Issuance(CounterpartyMessage):
    message_type_id: ClassVar[int] = 20
    message_type: ClassVar[str] = "Issuance"

    asset_hex: str
    asset: int
    asset_name: str
    q_hex: str
    q: int
    div_hex: str
    div: int
    lock_hex: str
    lock: int
    reset_hex: str
    reset: int
    descr_hex: str
    descr: str


@dataclass(frozen=True)
class IssuanceSubasset(CounterpartyMessage):
    message_type_id: ClassVar[int] = 21
    message_type: ClassVar[str] = "Issuance (Subasset)"

    asset_hex: str
    asset: int
    asset_name: str
    q_hex: str
    q: int
    div_hex: str
    div: int
    lock_hex: str
    lock: int
    reset_hex: str
    reset: int
    len_subasset_hex: str
    len_subasset: int
    subasset_hex: str
    subasset: str
    descr_hex: str
    descr: str


@dataclass(frozen=True)
class Broadcast(CounterpartyMessage):
    message_type_id: ClassVar[int] = 30
    message_type: ClassVar[str] = "Broadcast"

    ts_hex: str
    ts: int
    ts_print: str
    value_hex: str
    value: int
    fee_hex: str
    fee: int
    len_hex: Optional[str]
    len: Optional[int]
    text_hex: str
    text: str


@dataclass(frozen=True)
class Dividend(CounterpartyMessage):
    message_type_id: ClassVar[int] = 50
    message_type: ClassVar[str] = "Dividend"

    div_q_hex: str
    div_q: int
    asset_hex: str
    asset: int
    asset_name: str
    asset2_hex: str
    asset2: int
    asset2_name: str


MESSAGE_TYPES = {
    0: ClassicSend.message_type,
    2: EnhancedSend.message_type,
    4: Sweep.message_type,
    10: DexOrder.message_type,
    11: Btcpay.message_type,
    12: Dispenser.message_type,
    20: Issuance.message_type,
    21: IssuanceSubasset.message_type,
    30: Broadcast.message_type,
    50: Dividend.message_type,
}


@dataclass(frozen=True)
class MessageHeader:
    """Prefix and type id of a payload, with the undecoded body."""
    prefix_hex: str
    prefix: str
    id_hex: str
    id: int
    msg_type: Optional[str]
    cp_msg: str
    raw_ascii: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class NoMessage:
    """The payload carries no Counterparty data. A normal outcome."""
    reason: ClassVar[str] = "NoProtocolData"

    @property
    def ok(self) -> bool:
        return False


@dataclass(frozen=True)
class Decoded:
    header: MessageHeader
    message: CounterpartyMessage

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class DecodeFailure:
    error: CounterpartyDecodeError
    header: Optional[MessageHeader] = None

    @property
    def ok(self) -> bool:
        return False

    @property
    def reason(self) -> str:
        return self.error.reason


DecodeResult = Union[NoMessage, Decoded, DecodeFailure]
