"""
RSA key material generation.
"""
import logging
from typing import Optional

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives.asymmetric import rsa

from ..models.certificates import KeyPair
from .errors import KeyGenerationError

DEFAULT_KEY_SIZE = 4096
PUBLIC_EXPONENT = 65537


class KeyMaterialGenerator:
    """Generates RSA key pairs from the operating system's secure RNG."""

    def __init__(self, bit_length: int = DEFAULT_KEY_SIZE):
        self.bit_length = bit_length
        self.logger = logging.getLogger(__name__)

    def generate(self, bit_length: Optional[int] = None) -> KeyPair:
        """
        Generate a new RSA key pair.

        Args:
            bit_length: Modulus size in bits (defaults to the generator's size)

        Returns:
            KeyPair holding the new private key

        Raises:
            KeyGenerationError: If the primitive is unavailable or rejects the size
        """
        size = bit_length or self.bit_length
        self.logger.debug(f"Generating RSA-{size} key pair")

        try:
            private_key = rsa.generate_private_key(
                public_exponent=PUBLIC_EXPONENT,
                key_size=size,
                backend=default_backend()
            )
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise KeyGenerationError(f"Failed to generate RSA-{size} key pair: {e}") from e

        return KeyPair(private_key=private_key)
