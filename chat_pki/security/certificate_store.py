"""
On-disk storage for the trust chain with an all-or-nothing load/generate gate.
"""
import logging
import os
from pathlib import Path
from typing import Optional, Union

from ..models.certificates import (
    ChainPaths, ChainResult, GeneratedChain, KeyPair, LoadedChain, SubjectIdentity, TrustChain
)
from .chain_builder import ChainBuilder
from .errors import CertificateStorageError, CorruptStateError
from .pem import certificate_from_pem, certificate_to_pem, private_key_from_pem, private_key_to_pem

CA_CERT_FILE = "ca.crt"
CA_KEY_FILE = "ca.key"
INTERMEDIATE_CERT_FILE = "intermediate.crt"
INTERMEDIATE_KEY_FILE = "intermediate.key"

PRIVATE_KEY_MODE = 0o600


def _resolve(configured: Optional[str], directory: Union[str, Path], file_name: str) -> Path:
    if configured is not None and configured.strip():
        return Path(configured)
    return Path(directory) / file_name


def resolve_paths(directory: Union[str, Path],
                  ca_cert_path: Optional[str] = None,
                  ca_key_path: Optional[str] = None,
                  intermediate_cert_path: Optional[str] = None,
                  intermediate_key_path: Optional[str] = None) -> ChainPaths:
    """Explicit paths win; anything left blank falls back to ``directory``."""
    return ChainPaths(
        ca_cert=_resolve(ca_cert_path, directory, CA_CERT_FILE),
        ca_key=_resolve(ca_key_path, directory, CA_KEY_FILE),
        intermediate_cert=_resolve(intermediate_cert_path, directory, INTERMEDIATE_CERT_FILE),
        intermediate_key=_resolve(intermediate_key_path, directory, INTERMEDIATE_KEY_FILE)
    )


class CertificateStore:
    """Loads a complete chain from disk or generates and persists a new one."""

    def __init__(self, chain_builder: Optional[ChainBuilder] = None):
        self.chain_builder = chain_builder or ChainBuilder()
        self.logger = logging.getLogger(__name__)

    def load_or_generate(self, paths: ChainPaths, root_subject: SubjectIdentity,
                         intermediate_subject: SubjectIdentity) -> ChainResult:
        """
        Load the chain if all four artifacts exist, otherwise regenerate all of them.

        Args:
            paths: Resolved artifact locations
            root_subject: Identity used when a new root must be generated
            intermediate_subject: Identity used when a new intermediate must be generated

        Returns:
            LoadedChain or GeneratedChain

        Raises:
            CorruptStateError: If an existing artifact fails to parse
            CertificateStorageError: If the filesystem cannot be read or written
        """
        missing = paths.missing()

        if not missing:
            self.logger.info("Certificate files found - loading from disk.")
            return LoadedChain(chain=self.load(paths), paths=paths)

        if len(missing) < len(paths.all()):
            self.logger.warning(
                f"Incomplete certificate set, missing: {', '.join(str(p) for p in missing)}. "
                f"Discarding existing files and regenerating the whole chain."
            )
        else:
            self.logger.info("Certificate files not found - generating new CA and intermediate certificates.")

        chain = self.chain_builder.build_chain(root_subject, intermediate_subject)
        self.persist(chain, paths)
        return GeneratedChain(chain=chain, paths=paths)

    def load(self, paths: ChainPaths) -> TrustChain:
        """Parse all four artifacts; no validation beyond parse success."""
        root_certificate = certificate_from_pem(self._read(paths.ca_cert), str(paths.ca_cert))
        root_key = private_key_from_pem(self._read(paths.ca_key), str(paths.ca_key))
        intermediate_certificate = certificate_from_pem(
            self._read(paths.intermediate_cert), str(paths.intermediate_cert)
        )
        intermediate_key = private_key_from_pem(
            self._read(paths.intermediate_key), str(paths.intermediate_key)
        )

        return TrustChain(
            root_certificate=root_certificate,
            root_key=KeyPair(private_key=root_key),
            intermediate_certificate=intermediate_certificate,
            intermediate_key=KeyPair(private_key=intermediate_key)
        )

    def persist(self, chain: TrustChain, paths: ChainPaths) -> None:
        """
        Write every artifact as its own UTF-8 PEM file.

        Existing artifacts are removed before the first write, so a run that
        fails partway leaves an incomplete set and the next start regenerates.
        """
        self.discard(paths)

        for path in paths.all():
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise CertificateStorageError(f"Failed to create directory {path.parent}: {e}") from e

        self._write(paths.ca_cert, certificate_to_pem(chain.root_certificate))
        self._write(paths.ca_key, private_key_to_pem(chain.root_key.private_key), private=True)
        self._write(paths.intermediate_cert, certificate_to_pem(chain.intermediate_certificate))
        self._write(paths.intermediate_key, private_key_to_pem(chain.intermediate_key.private_key),
                    private=True)

        self.logger.info(f"Generated and saved certificates to: {paths.ca_cert.parent}")

    def discard(self, paths: ChainPaths) -> None:
        """Remove whichever artifacts exist."""
        for path in paths.all():
            if not path.exists():
                continue
            try:
                path.unlink()
            except OSError as e:
                raise CertificateStorageError(f"Failed to remove stale artifact {path}: {e}") from e
            self.logger.debug(f"Removed stale artifact: {path}")

    def _read(self, path: Path) -> str:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read()
        except UnicodeDecodeError as e:
            raise CorruptStateError(path, f"not UTF-8 text ({e})") from e
        except OSError as e:
            raise CertificateStorageError(f"Failed to read {path}: {e}") from e

    def _write(self, path: Path, content: str, private: bool = False) -> None:
        try:
            with open(path, 'w', encoding='utf-8') as f:
                f.write(content)
            if private and os.name == 'posix':
                os.chmod(path, PRIVATE_KEY_MODE)
        except OSError as e:
            raise CertificateStorageError(f"Failed to write {path}: {e}") from e
