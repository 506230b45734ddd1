"""
Security package for certificate-authority bootstrap.
"""
from .errors import (
    CertificateError, KeyGenerationError, SigningError, CorruptStateError,
    CertificateStorageError, ValidityOrderError
)
from .key_generator import KeyMaterialGenerator
from .certificate_builder import CertificateBuilder
from .chain_builder import ChainBuilder
from .certificate_store import CertificateStore, resolve_paths

__all__ = [
    'CertificateError',
    'KeyGenerationError',
    'SigningError',
    'CorruptStateError',
    'CertificateStorageError',
    'ValidityOrderError',
    'KeyMaterialGenerator',
    'CertificateBuilder',
    'ChainBuilder',
    'CertificateStore',
    'resolve_paths'
]
