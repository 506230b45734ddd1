"""
Configuration service for loading and validating application settings.
"""
import os
import configparser
from typing import Optional, Dict, Any
import logging

from ..models.config import Config, ConfigValidationError, ConfigValidationResult


class ConfigService:
    """Service for loading and validating application configuration."""

    # Map configuration keys to Config fields
    CONFIG_MAPPING = {
        # Certificate storage
        "certificates.dir": ("cert_dir", str),
        "cert_dir": ("cert_dir", str),
        "certificates.ca_cert_path": ("ca_cert_path", str),
        "ca_cert_path": ("ca_cert_path", str),
        "certificates.ca_key_path": ("ca_key_path", str),
        "ca_key_path": ("ca_key_path", str),
        "certificates.intermediate_cert_path": ("intermediate_cert_path", str),
        "intermediate_cert_path": ("intermediate_cert_path", str),
        "certificates.intermediate_key_path": ("intermediate_key_path", str),
        "intermediate_key_path": ("intermediate_key_path", str),

        # Key material and validity
        "certificates.key_size": ("key_size", int),
        "key_size": ("key_size", int),
        "certificates.ca_validity_days": ("ca_validity_days", int),
        "ca_validity_days": ("ca_validity_days", int),
        "certificates.intermediate_validity_days": ("intermediate_validity_days", int),
        "intermediate_validity_days": ("intermediate_validity_days", int),

        # Root CA subject
        "certificates.ca.common_name": ("ca_common_name", str),
        "certificates.ca.organization": ("ca_organization", str),
        "certificates.ca.country": ("ca_country", str),

        # Intermediate CA subject
        "certificates.intermediate.common_name": ("intermediate_common_name", str),
        "certificates.intermediate.organization": ("intermediate_organization", str),
        "certificates.intermediate.country": ("intermediate_country", str),

        # Server settings
        "server.host": ("api_host", str),
        "api_host": ("api_host", str),
        "server.port": ("api_port", int),
        "api_port": ("api_port", int),

        # Application settings
        "app.log_level": ("log_level", str),
        "log_level": ("log_level", str),
        "app.log_file_path": ("log_file_path", str),
        "log_file_path": ("log_file_path", str),
    }

    EXPLICIT_PATH_FIELDS = [
        "ca_cert_path", "ca_key_path", "intermediate_cert_path", "intermediate_key_path"
    ]

    def __init__(self, config_path: Optional[str] = None):
        self.logger = logging.getLogger(__name__)
        self._config = None
        if config_path:
            self._config = self.load_config(config_path)

    def get_config(self) -> Config:
        """
        Get the loaded configuration.

        Returns:
            Config object

        Raises:
            ValueError: If no configuration has been loaded
        """
        if self._config is None:
            raise ValueError("No configuration loaded. Call load_config() first.")
        return self._config

    def load_defaults(self) -> Config:
        """Use the built-in defaults for every setting."""
        config = Config()
        self._config = config
        return config

    def load_config(self, config_path: str) -> Config:
        """
        Load configuration from a property file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Config object with loaded settings

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid or has validation errors
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        config_data = self._load_config_file(config_path)
        config = self._create_config_from_data(config_data)

        validation_result = self.validate_config(config)

        if validation_result.has_errors():
            error_summary = validation_result.get_error_summary()
            raise ValueError(f"Configuration validation failed:\n{error_summary}")

        if validation_result.has_warnings():
            warning_summary = validation_result.get_error_summary()
            self.logger.warning(f"Configuration warnings:\n{warning_summary}")

        self._config = config
        return config

    def _load_config_file(self, config_path: str) -> Dict[str, Any]:
        """Load configuration data from file."""
        # Values are taken literally; paths may contain "%"
        config_parser = configparser.ConfigParser(interpolation=None)

        # Convert to flat dictionary using section.key namespacing
        config_data = {}
        try:
            config_parser.read(config_path, encoding='utf-8')

            for section in config_parser.sections():
                for key, value in config_parser.items(section):
                    config_data[f"{section}.{key}"] = value

            for key, value in config_parser.defaults().items():
                if key not in config_data:
                    config_data[key] = value
        except configparser.Error as e:
            raise ValueError(f"Failed to parse configuration file: {e}")

        return config_data

    def _create_config_from_data(self, config_data: Dict[str, Any]) -> Config:
        """Create Config object from configuration data."""
        config_kwargs = {}

        for config_key, raw_value in config_data.items():
            if config_key not in self.CONFIG_MAPPING:
                continue

            field_name, field_type = self.CONFIG_MAPPING[config_key]

            # Blank explicit paths mean "use the directory default"
            if field_name in self.EXPLICIT_PATH_FIELDS and not str(raw_value).strip():
                continue

            try:
                if field_type == int:
                    value = int(raw_value)
                else:
                    value = str(raw_value).strip()

                config_kwargs[field_name] = value
            except (ValueError, TypeError) as e:
                raise ValueError(f"Invalid value for {config_key}: {raw_value} ({e})")

        return Config(**config_kwargs)

    def validate_config(self, config: Config) -> ConfigValidationResult:
        """
        Validate configuration settings.

        Args:
            config: Configuration object to validate

        Returns:
            ConfigValidationResult with validation results
        """
        errors = []
        warnings = []

        subjects = [
            ("ca", config.ca_common_name, config.ca_country),
            ("intermediate", config.intermediate_common_name, config.intermediate_country),
        ]
        for prefix, common_name, country in subjects:
            if not common_name or not common_name.strip():
                errors.append(ConfigValidationError(
                    f"{prefix}_common_name",
                    "Common name must not be empty"
                ))
            if country and (len(country) != 2 or not country.isalpha()):
                errors.append(ConfigValidationError(
                    f"{prefix}_country",
                    f"Country must be a two-letter code, got: {country}"
                ))

        if config.intermediate_validity_days > config.ca_validity_days:
            errors.append(ConfigValidationError(
                "intermediate_validity_days",
                f"Intermediate validity ({config.intermediate_validity_days} days) must not "
                f"exceed root validity ({config.ca_validity_days} days)"
            ))

        if not config.cert_dir:
            errors.append(ConfigValidationError(
                "cert_dir",
                "Certificate directory must not be empty"
            ))

        if config.key_size < 4096:
            warnings.append(ConfigValidationError(
                "key_size",
                f"RSA key size {config.key_size} is below the recommended 4096 bits",
                "warning"
            ))

        explicit_paths = [getattr(config, name) for name in self.EXPLICIT_PATH_FIELDS]
        configured = [p for p in explicit_paths if p]
        if configured and len(configured) < len(explicit_paths):
            warnings.append(ConfigValidationError(
                "certificates",
                "Only some certificate paths are set explicitly; the rest default to the certificate directory",
                "warning"
            ))

        all_issues = errors + warnings
        return ConfigValidationResult(
            is_valid=len(errors) == 0,
            errors=all_issues,
            warnings=[]
        )

    def create_default_config_file(self, config_path: str) -> None:
        """
        Create a default configuration file with example settings.

        Args:
            config_path: Path where to create the config file
        """
        config_content = """# Chat PKI Configuration File

[certificates]
dir = ./certs
ca_cert_path =
ca_key_path =
intermediate_cert_path =
intermediate_key_path =
key_size = 4096
ca_validity_days = 3650
intermediate_validity_days = 1825

[certificates.ca]
common_name = Chat Root CA
organization = Chat Corp
country = US

[certificates.intermediate]
common_name = Chat Intermediate CA
organization = Chat Corp
country = US

[server]
host = 0.0.0.0
port = 8080

[app]
log_level = INFO
log_file_path = logs/chat_pki.log
"""

        config_dir = os.path.dirname(config_path)
        if config_dir:
            os.makedirs(config_dir, exist_ok=True)

        with open(config_path, 'w', encoding='utf-8') as f:
            f.write(config_content)

        self.logger.info(f"Created default configuration file: {config_path}")
