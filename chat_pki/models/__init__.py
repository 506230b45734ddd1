"""
Models package for the certificate bootstrap service.
"""

from .certificates import (
    SubjectIdentity, KeyPair, ExtensionSpec, CertificateTemplate, TrustChain,
    ChainPaths, ChainResult, LoadedChain, GeneratedChain, CertificateInfo
)
from .config import Config, ConfigValidationError, ConfigValidationResult

__all__ = [
    'SubjectIdentity',
    'KeyPair',
    'ExtensionSpec',
    'CertificateTemplate',
    'TrustChain',
    'ChainPaths',
    'ChainResult',
    'LoadedChain',
    'GeneratedChain',
    'CertificateInfo',
    'Config',
    'ConfigValidationError',
    'ConfigValidationResult'
]
