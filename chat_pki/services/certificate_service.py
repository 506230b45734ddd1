"""
Startup bootstrap of the root/intermediate certificate chain.

The service runs exactly once before the HTTP server is created. On success the
resulting TrustChain is frozen and handed out by reference; nothing writes to it
afterwards. Any CertificateError raised here aborts startup.
"""
import logging
from contextlib import nullcontext
from typing import Dict, Optional

from ..models.certificates import ChainPaths, CertificateInfo, GeneratedChain, TrustChain
from ..models.config import Config
from ..security.certificate_builder import CertificateBuilder
from ..security.certificate_store import CertificateStore, resolve_paths
from ..security.chain_builder import ChainBuilder
from ..security.key_generator import KeyMaterialGenerator
from ..security.verification import get_certificate_info


class CertificateService:
    """Loads or generates the CA chain and exposes its public certificates."""

    def __init__(self, config: Config, store: Optional[CertificateStore] = None,
                 logging_service=None):
        self.config = config
        self.store = store or self._create_store(config)
        self.logging_service = logging_service
        self.logger = logging.getLogger(__name__)
        self._trust_chain: Optional[TrustChain] = None
        self._paths: Optional[ChainPaths] = None
        self._generated = False

    @staticmethod
    def _create_store(config: Config) -> CertificateStore:
        chain_builder = ChainBuilder(
            key_generator=KeyMaterialGenerator(bit_length=config.key_size),
            certificate_builder=CertificateBuilder(),
            root_validity_days=config.ca_validity_days,
            intermediate_validity_days=config.intermediate_validity_days
        )
        return CertificateStore(chain_builder)

    def resolve_paths(self) -> ChainPaths:
        return resolve_paths(
            self.config.cert_dir,
            ca_cert_path=self.config.ca_cert_path,
            ca_key_path=self.config.ca_key_path,
            intermediate_cert_path=self.config.intermediate_cert_path,
            intermediate_key_path=self.config.intermediate_key_path
        )

    def bootstrap(self) -> TrustChain:
        """
        Load the chain from disk or generate and persist a new one.

        Returns:
            The process-wide TrustChain

        Raises:
            RuntimeError: If bootstrap has already run
            CertificateError: If loading, generation or persistence fails
        """
        if self._trust_chain is not None:
            raise RuntimeError("Certificate bootstrap has already completed")

        paths = self.resolve_paths()

        if self.logging_service:
            measurement = self.logging_service.measure_performance(
                'certificate_bootstrap', {'cert_dir': self.config.cert_dir}
            )
        else:
            measurement = nullcontext()

        with measurement:
            result = self.store.load_or_generate(
                paths,
                self.config.ca_subject(),
                self.config.intermediate_subject()
            )

        self._trust_chain = result.chain
        self._paths = paths
        self._generated = isinstance(result, GeneratedChain)

        self.logger.info(f"CA certificate subject      : {result.chain.root_certificate.subject.rfc4514_string()}")
        self.logger.info(f"Intermediate cert subject   : {result.chain.intermediate_certificate.subject.rfc4514_string()}")

        return self._trust_chain

    @property
    def is_bootstrapped(self) -> bool:
        return self._trust_chain is not None

    @property
    def trust_chain(self) -> TrustChain:
        if self._trust_chain is None:
            raise RuntimeError("Certificate bootstrap has not run yet")
        return self._trust_chain

    @property
    def was_generated(self) -> bool:
        return self._generated

    @property
    def paths(self) -> Optional[ChainPaths]:
        return self._paths

    def get_ca_certificate_pem(self) -> str:
        return self.trust_chain.root_certificate_pem()

    def get_intermediate_certificate_pem(self) -> str:
        return self.trust_chain.intermediate_certificate_pem()

    def get_chain_pem(self) -> str:
        return self.trust_chain.chain_pem()

    def get_certificate_info(self) -> Dict[str, CertificateInfo]:
        """Inspection data for both certificates."""
        chain = self.trust_chain
        return {
            'ca': get_certificate_info(chain.root_certificate),
            'intermediate': get_certificate_info(chain.intermediate_certificate)
        }
