"""
JWE crypto adapter - Implements Crypto protocol with python-jose.

Registration passwords must be recoverable at provisioning time, so
they are encrypted rather than hashed. Each value is a compact JWE using
direct key agreement and AES-256-GCM, keyed from a configured secret.
"""

import hashlib

from jose import jwe
from jose.constants import ALGORITHMS


class JweCrypto:
    """
    Implements Crypto protocol via compact JWE tokens.

    The 256-bit content key is the SHA-256 digest of the secret, so any
    secret string can be configured.
    """

    def __init__(self, secret: str) -> None:
        if not secret:
            raise ValueError("encryption secret must not be empty")
        self._key = hashlib.sha256(secret.encode()).digest()

    def encrypt(self, plaintext: str) -> str:
        token = jwe.encrypt(
            plaintext.encode(),
            self._key,
            algorithm=ALGORITHMS.DIR,
            encryption=ALGORITHMS.A256GCM,
        )
        return token.decode()

    def decrypt(self, ciphertext: str) -> str:
        """
        Raises:
            jose.exceptions.JWEError: If the value was not produced with this key
        """
        return jwe.decrypt(ciphertext, self._key).decode()
