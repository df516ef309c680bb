"""
Tests for the command-line interface.
"""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from counterparty_decoder.cli.main import cli

PREFIX_HEX = "434e545250525459"


@pytest.fixture
def runner():
    return CliRunner()


class TestFileCommand:

    def test_decode_saved_document(self, runner, tmp_path, make_tx, op_return_output,
                                   classic_send_payload):
        path = tmp_path / "tx.json"
        path.write_text(json.dumps(make_tx([op_return_output(classic_send_payload)])))

        result = runner.invoke(cli, ["file", str(path)])

        assert result.exit_code == 0, result.output
        document = json.loads(result.output)
        assert document["cntrprty"]["msg_type"] == "Classic Send"
        assert document["cntrprty"]["msg_decoded"]["q"] == 100000000

    def test_output_file(self, runner, tmp_path, make_tx, p2pkh_output):
        path = tmp_path / "tx.json"
        out = tmp_path / "decoded.json"
        path.write_text(json.dumps(make_tx([p2pkh_output()])))

        result = runner.invoke(cli, ["file", str(path), "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert json.loads(out.read_text())["cntrprty"] is None

    def test_invalid_document(self, runner, tmp_path):
        path = tmp_path / "tx.json"
        path.write_text(json.dumps({"hash": "ab" * 32}))

        result = runner.invoke(cli, ["file", str(path)])

        assert result.exit_code == 1
        assert "Failed to decode" in result.output


class TestDataCommand:

    def test_decode_body(self, runner):
        body = "32" + "0000000000000001" + "0000000000000001" + "0000000000000000"
        result = runner.invoke(cli, ["data", body, "--block-height", "800000"])

        assert result.exit_code == 0, result.output
        document = json.loads(result.output)
        assert document["msg_type"] == "Dividend"
        assert document["prefix"] == ""
        assert document["msg_decoded"]["asset_name"] == "XCP"
        assert document["msg_decoded"]["asset2_name"] == "BTC"

    def test_truncated_body(self, runner):
        result = runner.invoke(cli, ["data", "32" + "00" * 4, "-b", "800000"])
        assert result.exit_code == 1
        assert "TruncatedPayload" in result.output

    def test_block_height_required(self, runner):
        result = runner.invoke(cli, ["data", "32"])
        assert result.exit_code != 0


class TestTxCommand:

    def test_fetch_failure(self, runner):
        with patch("counterparty_decoder.cli.main.BlockCypherClient") as client_cls:
            client_cls.return_value.get_transaction.side_effect = ValueError("Invalid transaction hash")
            result = runner.invoke(cli, ["tx", "nothex"])

        assert result.exit_code == 1
        assert "Invalid transaction hash" in result.output
        client_cls.return_value.close.assert_called_once()

    def test_fetch_and_decode(self, runner, make_tx, op_return_output, classic_send_payload):
        with patch("counterparty_decoder.cli.main.BlockCypherClient") as client_cls:
            client_cls.return_value.get_transaction.return_value = make_tx(
                [op_return_output(classic_send_payload)])
            result = runner.invoke(cli, ["tx", "ab" * 32])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["cntrprty"]["msg_decoded"]["asset_name"] == "BTC"


def test_version(runner):
    result = runner.invoke(cli, ["version"])
    assert result.exit_code == 0
    assert "Counterparty Decoder v1.0.0" in result.output
