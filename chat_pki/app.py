"""
Flask application that publishes the bootstrapped CA certificates.
"""
from flask import Flask, Response, jsonify
import logging
from typing import Optional
from datetime import datetime

from .models.certificates import CertificateInfo, TrustChain
from .models.config import Config
from .security.verification import get_certificate_info


def _info_to_dict(info: CertificateInfo) -> dict:
    return {
        'subject': info.subject,
        'issuer': info.issuer,
        'serial_number': info.serial_number,
        'not_before': info.not_before.isoformat(),
        'not_after': info.not_after.isoformat(),
        'is_valid': info.is_valid,
        'is_ca': info.is_ca,
        'path_length': info.path_length,
        'fingerprint_sha256': info.fingerprint
    }


class CertificateFlaskApp:
    """Read-only HTTP surface over an already bootstrapped trust chain."""

    def __init__(self, config: Config, trust_chain: TrustChain, logging_service=None):
        """Initialize the Flask application."""
        self.app = Flask(__name__)
        self.config = config
        self.trust_chain = trust_chain
        self.logging_service = logging_service
        self.logger = logging.getLogger(__name__)

        self._setup_routes()
        self._setup_error_handlers()
        self._setup_security_headers()

    def _setup_routes(self):
        """Set up API routes."""

        @self.app.route('/health', methods=['GET'])
        def health_check():
            """Health check endpoint with logging system status."""
            health_status = {
                'status': 'healthy',
                'service': 'chat-pki',
                'ca_subject': self.trust_chain.root_certificate.subject.rfc4514_string(),
                'timestamp': datetime.now().isoformat()
            }

            if self.logging_service:
                health_status['logging'] = self.logging_service.get_health_status()
                health_status['performance'] = self.logging_service.get_performance_stats()

            return jsonify(health_status)

        @self.app.route('/api/certificates/ca', methods=['GET'])
        def get_ca_certificate():
            """Root CA certificate in PEM format."""
            return Response(self.trust_chain.root_certificate_pem(), status=200, mimetype='text/plain')

        @self.app.route('/api/certificates/intermediate', methods=['GET'])
        def get_intermediate_certificate():
            """Intermediate CA certificate in PEM format."""
            return Response(self.trust_chain.intermediate_certificate_pem(), status=200,
                            mimetype='text/plain')

        @self.app.route('/api/certificates/chain', methods=['GET'])
        def get_certificate_chain():
            """Intermediate followed by root, in PEM format."""
            return Response(self.trust_chain.chain_pem(), status=200, mimetype='text/plain')

        @self.app.route('/api/certificates', methods=['GET'])
        def get_certificate_details():
            return jsonify({
                'ca': _info_to_dict(get_certificate_info(self.trust_chain.root_certificate)),
                'intermediate': _info_to_dict(
                    get_certificate_info(self.trust_chain.intermediate_certificate)
                )
            })

    def _setup_error_handlers(self):
        """Set up error handlers."""

        @self.app.errorhandler(404)
        def not_found(error):
            return jsonify({
                'error': 'Not found',
                'message': 'The requested endpoint does not exist'
            }), 404

        @self.app.errorhandler(405)
        def method_not_allowed(error):
            return jsonify({
                'error': 'Method not allowed',
                'message': 'The requested method is not allowed for this endpoint'
            }), 405

        @self.app.errorhandler(500)
        def internal_error(error):
            self.logger.error(f"Internal server error: {error}")
            return jsonify({
                'error': 'Internal server error',
                'message': 'An unexpected error occurred'
            }), 500

    def _setup_security_headers(self):
        """Set up security headers for all responses."""

        @self.app.after_request
        def add_security_headers(response):
            response.headers['Content-Security-Policy'] = "default-src 'none'; frame-ancestors 'none'"
            response.headers['X-Content-Type-Options'] = 'nosniff'
            response.headers['X-Frame-Options'] = 'DENY'
            response.headers['Referrer-Policy'] = 'no-referrer'
            response.headers.pop('Server', None)
            return response

    def run(self, host: Optional[str] = None, port: Optional[int] = None, debug: bool = False):
        """Run the Flask development server."""
        host = host or self.config.api_host
        if port is None:
            port = self.config.api_port

        self.logger.info(f"Serving certificates on http://{host}:{port}")
        self.app.run(host=host, port=port, debug=debug)

    def get_app(self) -> Flask:
        """Get the Flask application instance."""
        return self.app
