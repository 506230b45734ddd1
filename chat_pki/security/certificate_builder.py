"""
X.509v3 certificate construction and the CA extension policy.
"""
import logging
import time
from typing import List

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import rsa

from ..models.certificates import CertificateTemplate, ExtensionSpec
from .errors import SigningError

SIGNATURE_HASH = hashes.SHA256


def _ca_key_usage() -> x509.KeyUsage:
    return x509.KeyUsage(
        digital_signature=False,
        content_commitment=False,
        key_encipherment=False,
        data_encipherment=False,
        key_agreement=False,
        key_cert_sign=True,
        crl_sign=True,
        encipher_only=False,
        decipher_only=False
    )


def root_ca_extensions(public_key: rsa.RSAPublicKey) -> List[ExtensionSpec]:
    """Extensions for a self-signed root CA with no path length limit."""
    return [
        ExtensionSpec(x509.BasicConstraints(ca=True, path_length=None), critical=True),
        ExtensionSpec(_ca_key_usage(), critical=True),
        ExtensionSpec(x509.SubjectKeyIdentifier.from_public_key(public_key), critical=False),
    ]


def intermediate_ca_extensions(public_key: rsa.RSAPublicKey,
                               issuer_certificate: x509.Certificate) -> List[ExtensionSpec]:
    """Extensions for an intermediate CA that may only sign leaf certificates."""
    try:
        issuer_ski = issuer_certificate.extensions.get_extension_for_class(
            x509.SubjectKeyIdentifier
        ).value
        authority_key_id = x509.AuthorityKeyIdentifier.from_issuer_subject_key_identifier(issuer_ski)
    except x509.ExtensionNotFound:
        authority_key_id = x509.AuthorityKeyIdentifier.from_issuer_public_key(
            issuer_certificate.public_key()
        )

    return [
        ExtensionSpec(x509.BasicConstraints(ca=True, path_length=0), critical=True),
        ExtensionSpec(_ca_key_usage(), critical=True),
        ExtensionSpec(x509.SubjectKeyIdentifier.from_public_key(public_key), critical=False),
        ExtensionSpec(authority_key_id, critical=False),
    ]


def time_based_serials(count: int = 2) -> List[int]:
    """Consecutive serial numbers starting at the current time in milliseconds."""
    base = int(time.time() * 1000)
    return [base + offset for offset in range(count)]


class CertificateBuilder:
    """Signs certificate templates with SHA-256 with RSA."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def build(self, template: CertificateTemplate, issuer_key: rsa.RSAPrivateKey) -> x509.Certificate:
        """
        Build and sign a certificate.

        Args:
            template: Subject, issuer, public key, validity, serial and extensions
            issuer_key: Private key of the issuer

        Returns:
            Signed X.509 certificate

        Raises:
            SigningError: If the issuer key is not RSA or signing fails
        """
        if not isinstance(issuer_key, rsa.RSAPrivateKey):
            raise SigningError(
                f"Issuer key type {type(issuer_key).__name__} cannot sign with SHA256withRSA"
            )

        try:
            builder = x509.CertificateBuilder().subject_name(
                template.subject
            ).issuer_name(
                template.issuer
            ).public_key(
                template.subject_public_key
            ).serial_number(
                template.serial_number
            ).not_valid_before(
                template.not_before
            ).not_valid_after(
                template.not_after
            )

            for extension in template.extensions:
                builder = builder.add_extension(extension.value, critical=extension.critical)

            certificate = builder.sign(issuer_key, SIGNATURE_HASH(), default_backend())
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise SigningError(
                f"Failed to sign certificate for {template.subject.rfc4514_string()}: {e}"
            ) from e

        self.logger.debug(
            f"Signed certificate subject={template.subject.rfc4514_string()} "
            f"issuer={template.issuer.rfc4514_string()} serial={template.serial_number}"
        )
        return certificate
