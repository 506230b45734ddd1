"""
Error taxonomy for certificate bootstrap failures.

Every error here is fatal to the bootstrap step; none of them is retried.
"""


class CertificateError(Exception):
    """Base class for certificate bootstrap errors."""


class KeyGenerationError(CertificateError):
    """The key generation primitive is unavailable or failed."""


class SigningError(CertificateError):
    """A certificate could not be constructed or signed."""


class CorruptStateError(CertificateError):
    """An existing on-disk artifact could not be parsed."""

    def __init__(self, path, reason):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Corrupt certificate artifact {self.path}: {reason}")


class CertificateStorageError(CertificateError, IOError):
    """A directory or file operation on the certificate store failed."""


class ValidityOrderError(CertificateError):
    """The requested validity windows would let the intermediate outlive the root."""
