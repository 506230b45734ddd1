"""
Signature checks and certificate inspection for the trust chain.
"""
import logging
from datetime import datetime, timezone

from cryptography import x509
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ..models.certificates import CertificateInfo, TrustChain

logger = logging.getLogger(__name__)


def verify_issued_by(certificate: x509.Certificate, issuer: x509.Certificate) -> bool:
    """Check that ``certificate`` names ``issuer`` and carries its signature."""
    if certificate.issuer != issuer.subject:
        return False

    issuer_public_key = issuer.public_key()
    if not isinstance(issuer_public_key, rsa.RSAPublicKey):
        logger.debug(f"Unsupported issuer key type: {type(issuer_public_key).__name__}")
        return False

    try:
        issuer_public_key.verify(
            certificate.signature,
            certificate.tbs_certificate_bytes,
            padding.PKCS1v15(),
            certificate.signature_hash_algorithm
        )
        return True
    except InvalidSignature:
        logger.debug(f"Signature verification failed for {certificate.subject.rfc4514_string()}")
        return False


def is_self_signed(certificate: x509.Certificate) -> bool:
    return verify_issued_by(certificate, certificate)


def verify_chain(chain: TrustChain) -> bool:
    """The root is self-signed and the intermediate is signed by the root."""
    return (is_self_signed(chain.root_certificate)
            and verify_issued_by(chain.intermediate_certificate, chain.root_certificate))


def get_certificate_info(certificate: x509.Certificate) -> CertificateInfo:
    """Extract information from a certificate."""
    now = datetime.now(timezone.utc)

    not_before = certificate.not_valid_before_utc
    not_after = certificate.not_valid_after_utc

    try:
        constraints = certificate.extensions.get_extension_for_class(x509.BasicConstraints).value
        is_ca = constraints.ca
        path_length = constraints.path_length
    except x509.ExtensionNotFound:
        is_ca = False
        path_length = None

    return CertificateInfo(
        subject=certificate.subject.rfc4514_string(),
        issuer=certificate.issuer.rfc4514_string(),
        serial_number=str(certificate.serial_number),
        not_before=not_before,
        not_after=not_after,
        is_valid=not_before <= now <= not_after,
        is_ca=is_ca,
        path_length=path_length,
        fingerprint=certificate.fingerprint(hashes.SHA256()).hex()
    )
