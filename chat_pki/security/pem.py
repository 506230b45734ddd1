"""
PEM encoding and decoding for certificates and private keys.
"""
from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import serialization

from .errors import CorruptStateError


def certificate_to_pem(certificate: x509.Certificate) -> str:
    return certificate.public_bytes(serialization.Encoding.PEM).decode('utf-8')


def private_key_to_pem(private_key) -> str:
    """Serialize a private key as unencrypted PKCS#8 PEM."""
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    ).decode('utf-8')


def certificate_from_pem(pem_text: str, source: str = "<memory>") -> x509.Certificate:
    """Parse a PEM certificate, raising CorruptStateError on failure."""
    try:
        return x509.load_pem_x509_certificate(pem_text.encode('utf-8'), default_backend())
    except (ValueError, TypeError) as e:
        raise CorruptStateError(source, f"not a valid PEM certificate ({e})") from e


def private_key_from_pem(pem_text: str, source: str = "<memory>"):
    """Parse a PKCS#8 or traditional OpenSSL PEM private key."""
    try:
        return serialization.load_pem_private_key(
            pem_text.encode('utf-8'),
            password=None,
            backend=default_backend()
        )
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise CorruptStateError(source, f"not a valid unencrypted PEM private key ({e})") from e
