"""
End-to-end tests: explorer document in, response document out.
"""

import pytest

from counterparty_decoder.core.transaction_decoder import TransactionDecoder, decode_transaction
from counterparty_decoder.models.messages import ClassicSend, Decoded, DecodeFailure, NoMessage
from counterparty_decoder.models.transaction import Transaction

PREFIX_HEX = "434e545250525459"
GENESIS_ADDRESS = "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa"


@pytest.fixture
def decoder(config):
    return TransactionDecoder(config)


class TestTransactionDecoder:
    """Tests for the decode pipeline."""

    def test_classic_send(self, decoder, make_tx, p2pkh_output, op_return_output,
                          classic_send_payload):
        document = make_tx([p2pkh_output(value=5430), op_return_output(classic_send_payload)])
        decoded = decoder.decode(document)

        assert isinstance(decoded.result, Decoded)
        message = decoded.message
        assert isinstance(message, ClassicSend)
        assert message.asset_name == "BTC"
        assert message.q == 100000000
        assert message.recipient == GENESIS_ADDRESS
        assert message.first_send_sat == 5430
        assert decoded.result.header.msg_type == "Classic Send"

    def test_accepts_transaction_model(self, decoder, make_tx, op_return_output,
                                       classic_send_payload):
        tx = Transaction.from_api(make_tx([op_return_output(classic_send_payload)]))
        assert isinstance(decoder.decode(tx).message, ClassicSend)

    def test_no_counterparty_data(self, decoder, make_tx, p2pkh_output):
        decoded = decoder.decode(make_tx([p2pkh_output()]))
        assert isinstance(decoded.result, NoMessage)
        assert decoded.message is None
        assert decoded.to_dict()["cntrprty"] is None

    def test_height_selects_issuance_layout(self, decoder, make_tx, op_return_output):
        payload = PREFIX_HEX + "14" + "0000000000000001" + "00000000000003e8" + "010000"
        legacy = decoder.decode(make_tx([op_return_output(payload)], block_height=700000))
        current = decoder.decode(make_tx([op_return_output(payload)], block_height=800000))
        assert isinstance(legacy.result, DecodeFailure)
        assert legacy.result.reason == "TruncatedPayload"
        assert current.message.lock == 0

    def test_unconfirmed_uses_current_layout(self, decoder, make_tx, op_return_output):
        payload = PREFIX_HEX + "14" + "0000000000000001" + "00000000000003e8" + "010000"
        decoded = decoder.decode(make_tx([op_return_output(payload)], block_height=-1))
        assert decoded.message.message_type == "Issuance"


class TestResponseDocument:
    """Tests for the ``{"tx": ..., "cntrprty": ...}`` document."""

    def test_tx_summary(self, make_tx, p2pkh_output, op_return_output, classic_send_payload):
        document = make_tx([p2pkh_output(value=5430), op_return_output(classic_send_payload)],
                           fees=10000)
        tx = decode_transaction(document)["tx"]
        assert tx["hash"] == "ab" * 32
        assert tx["fees"] == 10000
        assert tx["fees_btc"] == "0.00010000"
        assert tx["first_send_sat"] == 5430
        assert tx["first_send_btc"] == "0.00005430"
        assert tx["recipient"] == GENESIS_ADDRESS
        assert tx["from_addr"] == "1SourceAddressXXXXXXXXXXXXXXXXXXX"

    def test_decoded_message_document(self, config, make_tx, op_return_output,
                                      classic_send_payload):
        result = decode_transaction(make_tx([op_return_output(classic_send_payload)]), config)
        cntrprty = result["cntrprty"]
        assert cntrprty["encoding"] == "op_return"
        assert cntrprty["prefix"] == "CNTRPRTY"
        assert cntrprty["id_hex"] == "0000000000"
        assert cntrprty["id"] == 0
        assert cntrprty["msg_type"] == "Classic Send"
        assert cntrprty["msg_decoded"]["q"] == 100000000
        assert cntrprty["msg_decoded"]["asset_name"] == "BTC"
        assert "error" not in cntrprty

    def test_error_document(self, config, make_tx, op_return_output):
        payload = PREFIX_HEX + "63" + "00" * 10
        cntrprty = decode_transaction(make_tx([op_return_output(payload)]), config)["cntrprty"]
        assert cntrprty["id"] == 99
        assert cntrprty["msg_type"] is None
        assert cntrprty["error"]["reason"] == "UnsupportedMessageType"
        assert "msg_decoded" not in cntrprty

    def test_error_without_header(self, config, make_tx, op_return_output):
        cntrprty = decode_transaction(make_tx([op_return_output(PREFIX_HEX + "0000")]),
                                      config)["cntrprty"]
        assert cntrprty == {
            "encoding": "op_return",
            "error": {
                "reason": "TruncatedPayload",
                "message": "Payload truncated in field 'message_type_id': needed 5 bytes, 2 available",
                "detail": "message_type_id",
            },
        }
