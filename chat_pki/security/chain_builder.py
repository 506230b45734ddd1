"""
Builds the two-level root/intermediate trust chain.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..models.certificates import CertificateTemplate, SubjectIdentity, TrustChain
from .certificate_builder import (
    CertificateBuilder, intermediate_ca_extensions, root_ca_extensions, time_based_serials
)
from .errors import ValidityOrderError
from .key_generator import KeyMaterialGenerator

ROOT_VALIDITY_DAYS = 3650
INTERMEDIATE_VALIDITY_DAYS = 1825


class ChainBuilder:
    """Generates a root CA and an intermediate CA signed by it."""

    def __init__(self,
                 key_generator: Optional[KeyMaterialGenerator] = None,
                 certificate_builder: Optional[CertificateBuilder] = None,
                 root_validity_days: int = ROOT_VALIDITY_DAYS,
                 intermediate_validity_days: int = INTERMEDIATE_VALIDITY_DAYS):
        if root_validity_days <= 0 or intermediate_validity_days <= 0:
            raise ValidityOrderError("Validity periods must be positive")
        if intermediate_validity_days > root_validity_days:
            raise ValidityOrderError(
                f"Intermediate validity ({intermediate_validity_days} days) exceeds "
                f"root validity ({root_validity_days} days)"
            )

        self.key_generator = key_generator or KeyMaterialGenerator()
        self.certificate_builder = certificate_builder or CertificateBuilder()
        self.root_validity_days = root_validity_days
        self.intermediate_validity_days = intermediate_validity_days
        self.logger = logging.getLogger(__name__)

    def build_chain(self, root_subject: SubjectIdentity,
                    intermediate_subject: SubjectIdentity) -> TrustChain:
        """
        Generate both key pairs and sign both certificates.

        Args:
            root_subject: Identity of the self-signed root CA
            intermediate_subject: Identity of the intermediate CA

        Returns:
            TrustChain with the intermediate signed by the root
        """
        now = datetime.now(timezone.utc)
        root_serial, intermediate_serial = time_based_serials(2)

        root_key = self.key_generator.generate()
        root_name = root_subject.to_x509_name()
        root_template = CertificateTemplate(
            subject=root_name,
            issuer=root_name,
            subject_public_key=root_key.public_key,
            not_before=now,
            not_after=now + timedelta(days=self.root_validity_days),
            serial_number=root_serial,
            extensions=root_ca_extensions(root_key.public_key)
        )
        root_certificate = self.certificate_builder.build(root_template, root_key.private_key)
        self.logger.info(f"Built root CA certificate: {root_subject.distinguished_name}")

        intermediate_key = self.key_generator.generate()
        intermediate_template = CertificateTemplate(
            subject=intermediate_subject.to_x509_name(),
            issuer=root_certificate.subject,
            subject_public_key=intermediate_key.public_key,
            not_before=now,
            not_after=now + timedelta(days=self.intermediate_validity_days),
            serial_number=intermediate_serial,
            extensions=intermediate_ca_extensions(intermediate_key.public_key, root_certificate)
        )
        intermediate_certificate = self.certificate_builder.build(
            intermediate_template, root_key.private_key
        )
        self.logger.info(f"Built intermediate CA certificate: {intermediate_subject.distinguished_name}")

        if intermediate_certificate.not_valid_after_utc > root_certificate.not_valid_after_utc:
            raise ValidityOrderError("Intermediate certificate expires after the root certificate")

        return TrustChain(
            root_certificate=root_certificate,
            root_key=root_key,
            intermediate_certificate=intermediate_certificate,
            intermediate_key=intermediate_key
        )
