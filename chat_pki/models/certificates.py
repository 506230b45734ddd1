"""
Data models for the two-level certificate trust chain.
"""
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID


@dataclass(frozen=True)
class SubjectIdentity:
    """Identity fields used to build a distinguished name."""
    common_name: str
    organization: str = "Chat Corp"
    country: str = "US"

    def __post_init__(self):
        if not self.common_name or not self.common_name.strip():
            raise ValueError("common_name must not be empty")
        if self.country and (len(self.country) != 2 or not self.country.isalpha()):
            raise ValueError(f"country must be a two-letter code, got: {self.country}")

    def to_x509_name(self) -> x509.Name:
        """Build the X.509 name in CN, O, C order."""
        attributes = [x509.NameAttribute(NameOID.COMMON_NAME, self.common_name)]
        if self.organization:
            attributes.append(x509.NameAttribute(NameOID.ORGANIZATION_NAME, self.organization))
        if self.country:
            attributes.append(x509.NameAttribute(NameOID.COUNTRY_NAME, self.country))
        return x509.Name(attributes)

    @property
    def distinguished_name(self) -> str:
        return self.to_x509_name().rfc4514_string()


@dataclass(frozen=True)
class KeyPair:
    """An RSA key pair."""
    private_key: rsa.RSAPrivateKey
    algorithm: str = "RSA"

    @property
    def public_key(self) -> rsa.RSAPublicKey:
        return self.private_key.public_key()

    @property
    def bit_length(self) -> int:
        return self.private_key.key_size


@dataclass(frozen=True)
class ExtensionSpec:
    """An X.509 extension value together with its criticality."""
    value: x509.ExtensionType
    critical: bool = False


@dataclass(frozen=True)
class CertificateTemplate:
    """Everything needed to sign one certificate, apart from the issuer key."""
    subject: x509.Name
    issuer: x509.Name
    subject_public_key: rsa.RSAPublicKey
    not_before: datetime
    not_after: datetime
    serial_number: int
    extensions: List[ExtensionSpec] = field(default_factory=list)


@dataclass(frozen=True)
class TrustChain:
    """Root CA and intermediate CA, each with its key pair."""
    root_certificate: x509.Certificate
    root_key: KeyPair
    intermediate_certificate: x509.Certificate
    intermediate_key: KeyPair

    def root_certificate_pem(self) -> str:
        return self.root_certificate.public_bytes(serialization.Encoding.PEM).decode('utf-8')

    def intermediate_certificate_pem(self) -> str:
        return self.intermediate_certificate.public_bytes(serialization.Encoding.PEM).decode('utf-8')

    def chain_pem(self) -> str:
        """Intermediate followed by root, as TLS servers expect."""
        return self.intermediate_certificate_pem() + self.root_certificate_pem()


@dataclass(frozen=True)
class ChainPaths:
    """Resolved locations of the four chain artifacts."""
    ca_cert: Path
    ca_key: Path
    intermediate_cert: Path
    intermediate_key: Path

    def all(self) -> List[Path]:
        return [self.ca_cert, self.ca_key, self.intermediate_cert, self.intermediate_key]

    def missing(self) -> List[Path]:
        return [path for path in self.all() if not path.exists()]


@dataclass(frozen=True)
class ChainResult:
    """Outcome of load-or-generate."""
    chain: TrustChain
    paths: Optional[ChainPaths] = None


@dataclass(frozen=True)
class LoadedChain(ChainResult):
    """The chain was read from existing files."""


@dataclass(frozen=True)
class GeneratedChain(ChainResult):
    """The chain was generated and written to disk."""


@dataclass
class CertificateInfo:
    """Information about a certificate."""
    subject: str
    issuer: str
    serial_number: str
    not_before: datetime
    not_after: datetime
    is_valid: bool
    is_ca: bool
    path_length: Optional[int]
    fingerprint: str
