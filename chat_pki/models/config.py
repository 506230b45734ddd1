"""
Configuration data models for the certificate bootstrap service.
"""
from dataclasses import dataclass
from typing import Optional

from .certificates import SubjectIdentity


@dataclass
class Config:
    """Main configuration class containing all application settings."""

    # Certificate storage
    cert_dir: str = "./certs"
    ca_cert_path: Optional[str] = None
    ca_key_path: Optional[str] = None
    intermediate_cert_path: Optional[str] = None
    intermediate_key_path: Optional[str] = None

    # Key material and validity
    key_size: int = 4096
    ca_validity_days: int = 3650
    intermediate_validity_days: int = 1825

    # Root CA subject
    ca_common_name: str = "Chat Root CA"
    ca_organization: str = "Chat Corp"
    ca_country: str = "US"

    # Intermediate CA subject
    intermediate_common_name: str = "Chat Intermediate CA"
    intermediate_organization: str = "Chat Corp"
    intermediate_country: str = "US"

    # Server settings
    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Application settings
    log_level: str = "INFO"
    log_file_path: str = "logs/chat_pki.log"

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_types()

    def _validate_types(self):
        """Ensure all configuration values have correct types."""
        if not isinstance(self.key_size, int) or self.key_size < 2048:
            raise ValueError("key_size must be an integer of at least 2048")

        if not isinstance(self.ca_validity_days, int) or self.ca_validity_days <= 0:
            raise ValueError("ca_validity_days must be a positive integer")

        if not isinstance(self.intermediate_validity_days, int) or self.intermediate_validity_days <= 0:
            raise ValueError("intermediate_validity_days must be a positive integer")

        if not isinstance(self.api_port, int) or not (1 <= self.api_port <= 65535):
            raise ValueError("api_port must be an integer between 1 and 65535")

        if self.log_level not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            raise ValueError("log_level must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL")

        for field_name in ("ca_country", "intermediate_country"):
            country = getattr(self, field_name)
            if not isinstance(country, str) or (country and (len(country) != 2 or not country.isalpha())):
                raise ValueError(f"{field_name} must be a two-letter country code")

    def ca_subject(self) -> SubjectIdentity:
        return SubjectIdentity(self.ca_common_name, self.ca_organization, self.ca_country)

    def intermediate_subject(self) -> SubjectIdentity:
        return SubjectIdentity(
            self.intermediate_common_name,
            self.intermediate_organization,
            self.intermediate_country
        )


@dataclass
class ConfigValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    severity: str = "error"  # error, warning

    def __str__(self):
        return f"{self.severity.upper()}: {self.field} - {self.message}"


@dataclass
class ConfigValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: list[ConfigValidationError]
    warnings: list[ConfigValidationError]

    def __post_init__(self):
        """Separate errors and warnings."""
        all_issues = self.errors + self.warnings
        self.errors = [e for e in all_issues if e.severity == "error"]
        self.warnings = [e for e in all_issues if e.severity == "warning"]

    def has_errors(self) -> bool:
        """Check if there are any validation errors."""
        return len(self.errors) > 0

    def has_warnings(self) -> bool:
        """Check if there are any validation warnings."""
        return len(self.warnings) > 0

    def get_error_summary(self) -> str:
        """Get a formatted summary of all errors and warnings."""
        lines = []

        if self.errors:
            lines.append("Configuration Errors:")
            for error in self.errors:
                lines.append(f"  - {error}")

        if self.warnings:
            lines.append("Configuration Warnings:")
            for warning in self.warnings:
                lines.append(f"  - {warning}")

        return "\n".join(lines) if lines else "Configuration is valid"
