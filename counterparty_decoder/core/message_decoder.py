"""Decoding of Counterparty message payloads into typed message records.

A payload is ``CNTRPRTY`` followed by a message type id and a fixed binary
layout per type. Type ids are one byte, or, when the first byte is zero, the
four bytes that follow it. All integers are big-endian and unsigned.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional

import structlog

from counterparty_decoder.codecs.address import ADDRESS_BLOB_LENGTH, address_from_blob
from counterparty_decoder.codecs.asset import asset_name
from counterparty_decoder.codecs.subasset import subasset_from_bytes
from counterparty_decoder.core.script_extractor import PREFIX
from counterparty_decoder.errors import (
    CounterpartyDecodeError,
    MalformedPayload,
    TruncatedPayload,
    UnknownAddressVersion,
    UnsupportedMessageType,
)
from counterparty_decoder.models.config import ISSUANCE_FORMAT_CHANGE_HEIGHT
from counterparty_decoder.models.messages import (
    MESSAGE_TYPES,
    Broadcast,
    Btcpay,
    ClassicSend,
    CounterpartyMessage,
    DecodeFailure,
    DecodeResult,
    Decoded,
    Dispenser,
    Dividend,
    DexOrder,
    EnhancedSend,
    Issuance,
    IssuanceLegacy,
    IssuanceSubasset,
    MessageHeader,
    NoMessage,
    Sweep,
)
from counterparty_decoder.utils.bitcoin import (
    bytes_to_text,
    format_btc,
    format_timestamp,
    printable_ascii,
)

logger = structlog.get_logger(__name__)


class PayloadReader:
    """Sequential reader of fixed-width fields over a message body."""

    def __init__(self, data: bytes):
        self.data = data
        self.offset = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def read(self, width: int, field: str) -> bytes:
        if self.remaining < width:
            raise TruncatedPayload(field, width, self.remaining)
        chunk = self.data[self.offset:self.offset + width]
        self.offset += width
        return chunk

    def read_int(self, width: int, field: str):
        """Return ``(hex, value)`` of a big-endian unsigned field."""
        chunk = self.read(width, field)
        return chunk.hex(), int.from_bytes(chunk, 'big')

    def peek(self) -> Optional[int]:
        return self.data[self.offset] if self.remaining else None

    def rest(self) -> bytes:
        chunk = self.data[self.offset:]
        self.offset = len(self.data)
        return chunk


@dataclass(frozen=True)
class DustOutput:
    """Recipient and value of the P2PKH output 0, when the transaction has one."""
    recipient: Optional[str]
    value_sat: Optional[int]


class MessageDecoder:
    """Validate the magic prefix and decode the message body."""

    def __init__(self, format_change_height: int = ISSUANCE_FORMAT_CHANGE_HEIGHT):
        self.format_change_height = format_change_height
        self.logger = logger.bind(component="message_decoder")
        self._decoders: Dict[int, Callable[..., CounterpartyMessage]] = {
            0: self._classic_send,
            2: self._enhanced_send,
            4: self._sweep,
            10: self._dex_order,
            11: self._btcpay,
            12: self._dispenser,
            20: self._issuance,
            21: self._issuance_subasset,
            30: self._broadcast,
            50: self._dividend,
        }

    def decode(self, payload_hex: str, block_height: int,
               dust: Optional[DustOutput] = None) -> DecodeResult:
        """Decode a full payload (magic prefix included)."""
        try:
            payload = bytes.fromhex(payload_hex or '')
        except ValueError:
            return DecodeFailure(MalformedPayload("Payload is not valid hex", detail=payload_hex))

        if not payload.startswith(PREFIX):
            return NoMessage()

        reader = PayloadReader(payload)
        prefix = reader.read(len(PREFIX), 'prefix')
        return self._decode_body(reader, block_height, dust, prefix, payload)

    def decode_data(self, data_hex: str, block_height: int,
                    dust: Optional[DustOutput] = None) -> DecodeResult:
        """Decode a payload whose magic prefix was already removed."""
        try:
            data = bytes.fromhex(data_hex or '')
        except ValueError:
            return DecodeFailure(MalformedPayload("Payload is not valid hex", detail=data_hex))
        return self._decode_body(PayloadReader(data), block_height, dust, b'', data)

    def _decode_body(self, reader: PayloadReader, block_height: int,
                     dust: Optional[DustOutput], prefix: bytes, raw: bytes) -> DecodeResult:
        try:
            if reader.peek() == 0:
                id_bytes = reader.read(5, 'message_type_id')
                message_type_id = int.from_bytes(id_bytes[1:], 'big')
            else:
                id_bytes = reader.read(1, 'message_type_id')
                message_type_id = id_bytes[0]
        except TruncatedPayload as e:
            return DecodeFailure(e)

        header = MessageHeader(
            prefix_hex=prefix.hex(),
            prefix=prefix.decode('ascii'),
            id_hex=id_bytes.hex(),
            id=message_type_id,
            msg_type=MESSAGE_TYPES.get(message_type_id),
            cp_msg=reader.data[reader.offset:].hex(),
            raw_ascii=printable_ascii(raw),
        )

        decoder = self._decoders.get(message_type_id)
        try:
            if decoder is None:
                raise UnsupportedMessageType(message_type_id)
            message = decoder(reader, block_height, dust)
        except CounterpartyDecodeError as e:
            self.logger.info("Message decode failed",
                             message_type_id=message_type_id,
                             block_height=block_height,
                             reason=e.reason,
                             error=str(e))
            return DecodeFailure(e, header)

        self.logger.debug("Decoded message",
                          message_type=message.message_type,
                          block_height=block_height)
        return Decoded(header, message)

    # ==================== Message layouts ====================

    def _asset(self, reader: PayloadReader, field: str):
        asset_hex, asset = reader.read_int(8, field)
        return asset_hex, asset, asset_name(asset)

    def _address(self, reader: PayloadReader, field: str):
        blob = reader.read(ADDRESS_BLOB_LENGTH, field)
        return blob.hex(), address_from_blob(blob).address

    def _classic_send(self, reader, block_height, dust):
        asset_hex, asset, name = self._asset(reader, 'asset')
        q_hex, q = reader.read_int(8, 'quantity')
        recipient = dust.recipient if dust else None
        first_send_sat = dust.value_sat if dust else None
        return ClassicSend(
            asset_hex=asset_hex,
            asset=asset,
            asset_name=name,
            q_hex=q_hex,
            q=q,
            recipient=recipient,
            first_send_sat=first_send_sat,
            first_send_btc=format_btc(first_send_sat),
        )

    def _enhanced_send(self, reader, block_height, dust):
        asset_hex, asset, name = self._asset(reader, 'asset')
        q_hex, q = reader.read_int(8, 'quantity')
        recipient_hex, recipient = self._address(reader, 'recipient')
        memo = reader.rest()
        return EnhancedSend(
            recipient_hex=recipient_hex,
            recipient=recipient,
            asset_hex=asset_hex,
            asset=asset,
            asset_name=name,
            q_hex=q_hex,
            q=q,
            memo_hex=memo.hex(),
            memo=bytes_to_text(memo),
        )

    def _sweep(self, reader, block_height, dust):
        recipient_hex, recipient = self._address(reader, 'recipient')
        flag_hex, flag = reader.read_int(1, 'flag')
        memo = reader.rest()
        return Sweep(
            recipient_hex=recipient_hex,
            recipient=recipient,
            flag_hex=flag_hex,
            flag=flag,
            memo_hex=memo.hex(),
            memo=bytes_to_text(memo),
        )

    def _dex_order(self, reader, block_height, dust):
        give_asset_hex, give_asset, give_name = self._asset(reader, 'give_asset')
        give_q_hex, give_q = reader.read_int(8, 'give_quantity')
        get_asset_hex, get_asset, get_name = self._asset(reader, 'get_asset')
        get_q_hex, get_q = reader.read_int(8, 'get_quantity')
        exp_hex, exp = reader.read_int(2, 'expiration')
        return DexOrder(
            give_asset_hex=give_asset_hex,
            give_asset=give_asset,
            give_asset_name=give_name,
            give_q_hex=give_q_hex,
            give_q=give_q,
            get_asset_hex=get_asset_hex,
            get_asset=get_asset,
            get_asset_name=get_name,
            get_q_hex=get_q_hex,
            get_q=get_q,
            exp_hex=exp_hex,
            exp=exp,
        )

    def _btcpay(self, reader, block_height, dust):
        order_0 = reader.read(32, 'order_match_id_0').hex()
        order_1 = reader.read(32, 'order_match_id_1').hex()
        first_send_sat = dust.value_sat if dust else None
        return Btcpay(
            order_0=order_0,
            order_1=order_1,
            order_match_id=f"{order_0}_{order_1}",
            recipient=dust.recipient if dust else None,
            first_send_sat=first_send_sat,
            first_send_btc=format_btc(first_send_sat),
        )

    def _dispenser(self, reader, block_height, dust):
        asset_hex, asset, name = self._asset(reader, 'asset')
        give_q_hex, give_q = reader.read_int(8, 'give_quantity')
        esc_q_hex, esc_q = reader.read_int(8, 'escrow_quantity')
        btc_q_hex, btc_q = reader.read_int(8, 'btc_quantity')
        status_hex, status = reader.read_int(1, 'status')
        disp_addr = reader.rest()
        disp_addr_decoded = None
        if len(disp_addr) == ADDRESS_BLOB_LENGTH:
            try:
                disp_addr_decoded = address_from_blob(disp_addr).address
            except UnknownAddressVersion as e:
                self.logger.debug("Dispenser address not decoded", error=str(e))
        return Dispenser(
            asset_hex=asset_hex,
            asset=asset,
            asset_name=name,
            give_q_hex=give_q_hex,
            give_q=give_q,
            esc_q_hex=esc_q_hex,
            esc_q=esc_q,
            btc_q_hex=btc_q_hex,
            btc_q_sat=btc_q,
            btc_q_btc=format_btc(btc_q),
            status_hex=status_hex,
            status=status,
            disp_addr_hex=disp_addr.hex(),
            disp_addr=disp_addr_decoded,
        )

    def _issuance(self, reader, block_height, dust):
        if block_height < self.format_change_height:
            return self._issuance_legacy(reader)

        asset_hex, asset, name = self._asset(reader, 'asset')
        q_hex, q = reader.read_int(8, 'quantity')
        div_hex, div = reader.read_int(1, 'divisible')
        lock_hex, lock = reader.read_int(1, 'lock')
        reset_hex, reset = reader.read_int(1, 'reset')
        descr = reader.rest()
        return Issuance(
            asset_hex=asset_hex,
            asset=asset,
            asset_name=name,
            q_hex=q_hex,
            q=q,
            div_hex=div_hex,
            div=div,
            lock_hex=lock_hex,
            lock=lock,
            reset_hex=reset_hex,
            reset=reset,
            descr_hex=descr.hex(),
            descr=bytes_to_text(descr),
        )

    def _issuance_legacy(self, reader):
        asset_hex, asset, name = self._asset(reader, 'asset')
        q_hex, q = reader.read_int(8, 'quantity')
        div_hex, div = reader.read_int(1, 'divisible')
        call_hex, call = reader.read_int(1, 'callable')
        call_date_hex, call_date = reader.read_int(4, 'call_date')
        call_price_hex, call_price = reader.read_int(4, 'call_price')
        len_hex, length = reader.read_int(1, 'description_length')
        descr = reader.rest()
        return IssuanceLegacy(
            asset_hex=asset_hex,
            asset=asset,
            asset_name=name,
            q_hex=q_hex,
            q=q,
            div_hex=div_hex,
            div=div,
            call_hex=call_hex,
            call=call,
            call_date_hex=call_date_hex,
            call_date=call_date,
            call_price_hex=call_price_hex,
            call_price=call_price,
            len_hex=len_hex,
            len=length,
            descr_hex=descr.hex(),
            descr=bytes_to_text(descr),
        )

    def _issuance_subasset(self, reader, block_height, dust):
        if block_height < self.format_change_height:
            raise UnsupportedMessageType(IssuanceSubasset.message_type_id, block_height)

        asset_hex, asset, name = self._asset(reader, 'asset')
        q_hex, q = reader.read_int(8, 'quantity')
        div_hex, div = reader.read_int(1, 'divisible')
        lock_hex, lock = reader.read_int(1, 'lock')
        reset_hex, reset = reader.read_int(1, 'reset')
        len_subasset_hex, len_subasset = reader.read_int(1, 'subasset_length')
        subasset = reader.read(len_subasset, 'subasset_name')
        descr = reader.rest()
        return IssuanceSubasset(
            asset_hex=asset_hex,
            asset=asset,
            asset_name=name,
            q_hex=q_hex,
            q=q,
            div_hex=div_hex,
            div=div,
            lock_hex=lock_hex,
            lock=lock,
            reset_hex=reset_hex,
            reset=reset,
            len_subasset_hex=len_subasset_hex,
            len_subasset=len_subasset,
            subasset_hex=subasset.hex(),
            subasset=subasset_from_bytes(subasset),
            descr_hex=descr.hex(),
            descr=bytes_to_text(descr),
        )

    def _broadcast(self, reader, block_height, dust):
        ts_hex, ts = reader.read_int(4, 'timestamp')
        value_hex, value = reader.read_int(8, 'value')
        fee_hex, fee = reader.read_int(4, 'fee_fraction')

        # Most broadcast texts start with a length byte but some do not.
        # Treat the first byte as a length only when it matches what is left.
        # TODO: check the heuristic against the historical broadcasts that lack it
        len_hex = None
        length = None
        first = reader.peek()
        if first is not None and first + 1 == reader.remaining:
            len_hex, length = reader.read_int(1, 'text_length')

        text = reader.rest()
        return Broadcast(
            ts_hex=ts_hex,
            ts=ts,
            ts_print=format_timestamp(ts),
            value_hex=value_hex,
            value=value,
            fee_hex=fee_hex,
            fee=fee,
            len_hex=len_hex,
            len=length,
            text_hex=text.hex(),
            text=bytes_to_text(text),
        )

    def _dividend(self, reader, block_height, dust):
        div_q_hex, div_q = reader.read_int(8, 'dividend_quantity')
        asset_hex, asset, name = self._asset(reader, 'asset')
        asset2_hex, asset2, name2 = self._asset(reader, 'dividend_asset')
        return Dividend(
            div_q_hex=div_q_hex,
            div_q=div_q,
            asset_hex=asset_hex,
            asset=asset,
            asset_name=name,
            asset2_hex=asset2_hex,
            asset2=asset2,
            asset2_name=name2,
        )


def decode(payload_hex: str, block_height: int) -> DecodeResult:
    """Decode a payload with the default height threshold."""
    return MessageDecoder().decode(payload_hex, block_height)


def decode_data(data_hex: str, block_height: int) -> DecodeResult:
    return MessageDecoder().decode_data(data_hex, block_height)
