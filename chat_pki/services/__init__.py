"""
Services package for the chat PKI bootstrap.
"""

from .config_service import ConfigService
from .certificate_service import CertificateService
from .logging_service import LoggingService

__all__ = [
    'ConfigService',
    'CertificateService',
    'LoggingService'
]
