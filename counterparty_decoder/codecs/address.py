"""Encoding of 21-byte Counterparty address blobs as Bitcoin addresses."""

from dataclasses import dataclass

import base58

from counterparty_decoder.codecs.sha256 import double_sha256
from counterparty_decoder.errors import TruncatedPayload, UnknownAddressVersion

ADDRESS_BLOB_LENGTH = 21

P2PKH_VERSION = 0x00
P2SH_VERSION = 0x05
# Counterparty marker for a segwit v0 key hash, not a Bitcoin version byte
SEGWIT_VERSION = 0x80

BECH32_HRP = 'bc'
BECH32_CHARSET = 'qpzry9x8gf2tvdw0s3jn54khce6mua7l'
BECH32_CONST = 1
_BECH32_GENERATOR = (0x3b6a57b2, 0x26508e6d, 0x1ea119fa, 0x3d4233dd, 0x2a1462b3)


@dataclass(frozen=True)
class DecodedAddress:
    version: int
    hash160: bytes
    address: str


def base58check_encode(version: int, payload: bytes) -> str:
    """Base58check: version + payload + first 4 bytes of double SHA-256."""
    data = bytes([version]) + payload
    checksum = double_sha256(data)[:4]
    return base58.b58encode(data + checksum).decode('ascii')


def _bech32_polymod(values) -> int:
    chk = 1
    for value in values:
        top = chk >> 25
        chk = (chk & 0x1ffffff) << 5 ^ value
        for i in range(5):
            if (top >> i) & 1:
                chk ^= _BECH32_GENERATOR[i]
    return chk


def _bech32_hrp_expand(hrp: str):
    return [ord(x) >> 5 for x in hrp] + [0] + [ord(x) & 31 for x in hrp]


def _bech32_checksum(hrp: str, data):
    values = _bech32_hrp_expand(hrp) + list(data)
    polymod = _bech32_polymod(values + [0, 0, 0, 0, 0, 0]) ^ BECH32_CONST
    return [(polymod >> 5 * (5 - i)) & 31 for i in range(6)]


def _to_5bit_groups(data: bytes):
    acc = 0
    bits = 0
    ret = []
    for value in data:
        acc = (acc << 8) | value
        bits += 8
        while bits >= 5:
            bits -= 5
            ret.append((acc >> bits) & 31)
    if bits:
        ret.append((acc << (5 - bits)) & 31)
    return ret


def bech32_segwit_encode(hrp: str, witness_version: int, program: bytes) -> str:
    """Encode a witness program as a BECH32 (not BECH32M) address."""
    data = [witness_version] + _to_5bit_groups(program)
    combined = data + _bech32_checksum(hrp, data)
    return hrp + '1' + ''.join(BECH32_CHARSET[d] for d in combined)


def address_from_blob(blob: bytes) -> DecodedAddress:
    """Turn a version byte + 20-byte hash into a legacy or segwit address."""
    if len(blob) != ADDRESS_BLOB_LENGTH:
        raise TruncatedPayload('address', ADDRESS_BLOB_LENGTH, len(blob))

    version = blob[0]
    hash160 = bytes(blob[1:])

    if version in (P2PKH_VERSION, P2SH_VERSION):
        address = base58check_encode(version, hash160)
    elif version == SEGWIT_VERSION:
        address = bech32_segwit_encode(BECH32_HRP, 0, hash160)
    else:
        raise UnknownAddressVersion(version)

    return DecodedAddress(version=version, hash160=hash160, address=address)


def address_from_hex(blob_hex: str) -> str:
    return address_from_blob(bytes.fromhex(blob_hex)).address
