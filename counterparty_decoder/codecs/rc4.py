"""RC4 stream cipher used to obfuscate Counterparty payloads."""

from typing import Union


class Rc4Cipher:
    """RC4 keystream generator. Encryption and decryption are the same operation."""

    def __init__(self, key: bytes):
        if not key:
            raise ValueError("RC4 key must not be empty")
        self.key = bytes(key)

    def _keystream(self):
        s = list(range(256))
        j = 0
        key_length = len(self.key)
        for i in range(256):
            j = (j + s[i] + self.key[i % key_length]) % 256
            s[i], s[j] = s[j], s[i]

        i = j = 0
        while True:
            i = (i + 1) % 256
            j = (j + s[i]) % 256
            s[i], s[j] = s[j], s[i]
            yield s[(s[i] + s[j]) % 256]

    def crypt(self, data: bytes) -> bytes:
        return bytes(byte ^ k for byte, k in zip(data, self._keystream()))

    encrypt = crypt
    decrypt = crypt


def rc4(key: Union[bytes, str], data: bytes) -> bytes:
    """Apply RC4 to ``data``. A ``str`` key is used as its ASCII bytes."""
    if isinstance(key, str):
        key = key.encode('ascii')
    return Rc4Cipher(key).crypt(data)


def rc4_hex(key: Union[bytes, str], data_hex: str) -> str:
    return rc4(key, bytes.fromhex(data_hex)).hex()
