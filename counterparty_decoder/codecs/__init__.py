"""Low-level codecs used by the Counterparty wire format."""

from counterparty_decoder.codecs.sha256 import sha256, double_sha256
from counterparty_decoder.codecs.rc4 import Rc4Cipher, rc4, rc4_hex
from counterparty_decoder.codecs.asset import asset_name
from counterparty_decoder.codecs.subasset import subasset_from_int, subasset_from_bytes
from counterparty_decoder.codecs.address import DecodedAddress, address_from_blob

__all__ = [
    "sha256",
    "double_sha256",
    "Rc4Cipher",
    "rc4",
    "rc4_hex",
    "asset_name",
    "subasset_from_int",
    "subasset_from_bytes",
    "DecodedAddress",
    "address_from_blob",
]
