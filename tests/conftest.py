"""Pytest configuration and fixtures for decoder tests."""

import pytest

from counterparty_decoder.codecs.rc4 import rc4
from counterparty_decoder.models.config import DecoderConfig


PREV_HASH = "c4a7a3ec8e0b0c1f9e5a2b7f3d0e8a6c5b4d3e2f1a0b9c8d7e6f5a4b3c2d1e0f"
PREFIX_HEX = "434e545250525459"
GENESIS_HASH160 = "62e907b15cbf27d5425399ebf6f0fb50ebb88f18"
GENESIS_ADDRESS = "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa"


# ============================================================================
# CONFIG FIXTURES
# ============================================================================

@pytest.fixture
def config():
    """Decoder configuration that ignores any local .env file."""
    return DecoderConfig(_env_file=None)


@pytest.fixture
def prev_hash():
    return PREV_HASH


# ============================================================================
# OUTPUT BUILDERS
# ============================================================================

@pytest.fixture
def p2pkh_output():
    """Build a BlockCypher pay-to-pubkey-hash output."""
    def _build(address=GENESIS_ADDRESS, value=5430):
        return {
            "script_type": "pay-to-pubkey-hash",
            "value": value,
            "script": "76a914" + GENESIS_HASH160 + "88ac",
            "addresses": [address],
        }
    return _build


@pytest.fixture
def op_return_output():
    """Build a null-data output whose data is the RC4 encrypted payload."""
    def _build(payload_hex, key=PREV_HASH, encrypt=True, with_data_hex=True):
        data = bytes.fromhex(payload_hex)
        if encrypt:
            data = rc4(key, data)
        push = f"{len(data):02x}" if len(data) < 0x4c else f"4c{len(data):02x}"
        script = "6a" + push + data.hex()
        output = {
            "script_type": "null-data",
            "value": 0,
            "script": script,
            "addresses": None,
        }
        if with_data_hex:
            output["data_hex"] = data.hex()
        return output
    return _build


@pytest.fixture
def old_multisig_output():
    """Build a 71-byte multisig output carrying a plain payload fragment."""
    def _build(fragment_hex, value=7800):
        fragment = bytes.fromhex(fragment_hex)
        assert len(fragment) <= 32
        head = bytes([0x51, 0x21, 0x02]) + bytes(range(1, 34))
        assert len(head) == 36
        body = bytes([len(fragment)]) + fragment
        body = body + bytes(71 - 2 - 36 - len(body))
        script = head + body + bytes([0x52, 0xae])
        assert len(script) == 71
        return {
            "script_type": "pay-to-multi-pubkey-hash",
            "value": value,
            "script": script.hex(),
            "addresses": ["1AddressOne", "1AddressTwo"],
        }
    return _build


@pytest.fixture
def multisig_output():
    """Build a 105-byte multisig output with an RC4 obfuscated fragment."""
    def _build(fragment_hex, key=PREV_HASH, value=7800):
        fragment = bytes.fromhex(fragment_hex)
        assert len(fragment) <= 61
        chunk = bytes([len(fragment)]) + fragment
        chunk = chunk + bytes(62 - len(chunk))
        chunk = rc4(key, chunk)
        pubkey_1 = bytes([0x02]) + chunk[:31] + bytes([0x00])
        pubkey_2 = bytes([0x03]) + chunk[31:] + bytes([0x00])
        pubkey_3 = bytes([0x02]) + bytes(range(32))
        script = (bytes([0x51, 0x21]) + pubkey_1 + bytes([0x21]) + pubkey_2
                  + bytes([0x21]) + pubkey_3 + bytes([0x53, 0xae]))
        assert len(script) == 105
        return {
            "script_type": "pay-to-multi-pubkey-hash",
            "value": value,
            "script": script.hex(),
            "addresses": ["1AddressOne", "1AddressTwo", "1AddressThree"],
        }
    return _build


@pytest.fixture
def make_tx():
    """Build a BlockCypher transaction document around the given outputs."""
    def _build(outputs, block_height=800000, fees=10000, prev_hash=PREV_HASH):
        return {
            "hash": "ab" * 32,
            "block_height": block_height,
            "fees": fees,
            "size": 264,
            "vsize": 264,
            "confirmed": "2023-08-01T12:00:00Z",
            "addresses": ["1SourceAddressXXXXXXXXXXXXXXXXXXX"],
            "inputs": [{"prev_hash": prev_hash, "output_index": 1}],
            "outputs": outputs,
        }
    return _build


# ============================================================================
# PAYLOAD FIXTURES
# ============================================================================

@pytest.fixture
def classic_send_payload():
    """CNTRPRTY + long type id 0 + BTC + 1.00000000."""
    return PREFIX_HEX + "00" + "00000000" + "0000000000000000" + "0000000005f5e100"
