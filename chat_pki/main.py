"""
Main application entry point for the chat PKI service.
Bootstraps the certificate chain before the HTTP server is created and
aborts startup if that fails.
"""

import os
import sys
import signal
import logging
from typing import Optional

from .services.config_service import ConfigService
from .services.certificate_service import CertificateService
from .services.logging_service import LoggingService
from .security.errors import CertificateError
from .app import CertificateFlaskApp


class ChatPkiApplication:
    """Main application class for the chat PKI service."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the application.

        Args:
            config_path: Path to configuration file (optional)
        """
        self.config_path = config_path or self._get_default_config_path()
        self.logger = None
        self.config_service = None
        self.config = None
        self.logging_service = None
        self.certificate_service = None
        self.trust_chain = None
        self.flask_app = None

        self._is_running = False

        self._setup_signal_handlers()

    def _get_default_config_path(self) -> str:
        """Get the default configuration file path."""
        possible_paths = [
            "config/chat_pki.properties",
            "chat_pki.properties",
            os.path.expanduser("~/.chat_pki/config.properties"),
            "/etc/chat_pki/config.properties"
        ]

        for path in possible_paths:
            if os.path.exists(path):
                return path

        return possible_paths[0]

    def _setup_signal_handlers(self):
        """Setup signal handlers for graceful shutdown."""
        def signal_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            if self.logger:
                self.logger.info(f"Received {signal_name} signal, shutting down...")
            self.shutdown()
            sys.exit(0)

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

    def initialize(self, start_server: bool = True) -> bool:
        """
        Initialize all application components.

        Args:
            start_server: Build the Flask application after bootstrap

        Returns:
            True if initialization successful, False otherwise
        """
        try:
            self._setup_logging()
            self.logger.info("Starting chat PKI initialization...")

            if not self._load_configuration():
                return False

            self.logging_service = LoggingService(self.config)

            if not self._bootstrap_certificates():
                return False

            if start_server and not self._initialize_flask_app():
                return False

            self.logger.info("Chat PKI initialized successfully")
            self._is_running = True
            return True

        except Exception as e:
            if self.logger:
                self.logger.error(f"Failed to initialize application: {str(e)}")
            else:
                print(f"Failed to initialize application: {str(e)}")
            return False

    def _setup_logging(self):
        """Console logging until the configured handlers are installed."""
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=[logging.StreamHandler(sys.stdout)]
        )

        self.logger = logging.getLogger(__name__)

    def _load_configuration(self) -> bool:
        """Load application configuration, falling back to defaults."""
        try:
            self.config_service = ConfigService()

            if os.path.exists(self.config_path):
                self.logger.info(f"Loading configuration from: {self.config_path}")
                self.config = self.config_service.load_config(self.config_path)
            else:
                self.logger.info(f"Configuration file not found: {self.config_path}, using defaults")
                self.config = self.config_service.load_defaults()

            self.logger.info("Configuration loaded successfully")
            return True

        except Exception as e:
            self.logger.error(f"Failed to load configuration: {str(e)}")
            return False

    def _bootstrap_certificates(self) -> bool:
        """Load or generate the CA chain; any failure aborts startup."""
        try:
            self.logger.info(f"Bootstrapping certificates in: {self.config.cert_dir}")
            self.certificate_service = CertificateService(
                self.config, logging_service=self.logging_service
            )
            self.trust_chain = self.certificate_service.bootstrap()
            return True

        except CertificateError as e:
            self.logging_service.track_error(e, {'stage': 'certificate_bootstrap'})
            self.logger.critical(f"Certificate bootstrap failed, refusing to start: {str(e)}")
            return False

    def _initialize_flask_app(self) -> bool:
        """Initialize Flask web application."""
        try:
            self.flask_app = CertificateFlaskApp(
                self.config, self.trust_chain, self.logging_service
            )
            self.logger.info("Flask application initialized")
            return True

        except Exception as e:
            self.logger.error(f"Failed to initialize Flask application: {str(e)}")
            return False

    def run(self, host: Optional[str] = None, port: Optional[int] = None, debug: bool = False):
        """
        Run the application.

        Args:
            host: Host to bind to (uses config if not specified)
            port: Port to bind to (uses config if not specified)
            debug: Enable debug mode
        """
        if not self._is_running or self.flask_app is None:
            self.logger.error("Application not initialized. Call initialize() first.")
            return

        try:
            self.flask_app.run(host=host, port=port, debug=debug)
        except KeyboardInterrupt:
            self.logger.info("Received keyboard interrupt")
        finally:
            self.shutdown()

    def shutdown(self):
        """Stop the application."""
        if not self._is_running:
            return

        self._is_running = False
        self.logger.info("Shutdown completed")

    def is_running(self) -> bool:
        """Check if the application is running."""
        return self._is_running

    def get_status(self) -> dict:
        """Get application status information."""
        status = {
            'running': self._is_running,
            'config_path': self.config_path,
            'cert_dir': self.config.cert_dir if self.config else None,
            'certificates_bootstrapped': bool(
                self.certificate_service and self.certificate_service.is_bootstrapped
            ),
            'certificates_generated': bool(
                self.certificate_service and self.certificate_service.was_generated
            )
        }

        if self.trust_chain is not None:
            status['ca_subject'] = self.trust_chain.root_certificate.subject.rfc4514_string()
            status['intermediate_subject'] = (
                self.trust_chain.intermediate_certificate.subject.rfc4514_string()
            )

        return status


def main():
    """Main entry point for the application."""
    import argparse

    parser = argparse.ArgumentParser(description='Chat PKI certificate service')
    parser.add_argument('--config', '-c', help='Configuration file path')
    parser.add_argument('--host', help='Host to bind to (uses config if not specified)')
    parser.add_argument('--port', type=int, help='Port to bind to (uses config if not specified)')
    parser.add_argument('--debug', action='store_true', help='Enable debug mode')
    parser.add_argument('--init-config', metavar='PATH', help='Write a default configuration file and exit')
    parser.add_argument('--bootstrap-only', action='store_true',
                        help='Load or generate the certificate chain and exit')

    args = parser.parse_args()

    if args.init_config:
        ConfigService().create_default_config_file(args.init_config)
        print(f"Default configuration written to: {args.init_config}")
        sys.exit(0)

    app = ChatPkiApplication(config_path=args.config)

    if not app.initialize(start_server=not args.bootstrap_only):
        print("Failed to initialize application")
        sys.exit(1)

    if args.bootstrap_only:
        status = app.get_status()
        print(f"CA subject: {status['ca_subject']}")
        print(f"Intermediate subject: {status['intermediate_subject']}")
        print(f"Generated: {status['certificates_generated']}")
        sys.exit(0)

    app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == '__main__':
    main()
