"""Configuration settings for MediaPortal Live TV service."""

from dataclasses import dataclass

from pydantic_settings import BaseSettings

PLUGIN_VERSION = "0.1.0"

# MPExtended release this adapter is built against.
EXPECTED_SERVICE_VERSION = "0.6.0.4-Emby"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of checking the connection settings."""

    is_valid: bool
    summary: str = ""


class Settings(BaseSettings):
    """Application settings."""

    # Service settings
    host: str = "0.0.0.0"
    port: int = 8766
    debug: bool = False
    log_level: str = "info"

    # MPExtended connection
    api_host_name: str = "localhost"
    api_port_number: int = 4322
    requires_authentication: bool = False
    user_name: str = ""
    password: str = ""
    request_timeout: float = 30.0  # seconds

    # Live TV behavior
    default_channel_group: int = 0
    enable_recording_import: bool = False
    skip_already_in_library: bool = False
    streaming_profile: str = "Direct"
    stream_idle_timeout: int = 300  # seconds

    class Config:
        env_prefix = "MEDIAPORTAL_TV_"
        env_file = ".env"

    @property
    def base_url(self) -> str:
        return f"http://{self.api_host_name}:{self.api_port_number}/MPExtended/"

    def validate_connection(self) -> ValidationResult:
        """Check that the MPExtended connection settings are usable."""
        errors = []

        if not self.api_host_name.strip():
            errors.append("Please specify an API HostName (the box MPExtended is installed on).")

        if not 0 < self.api_port_number < 65536:
            errors.append("Please specify an API Port Number between 1 and 65535.")

        if self.requires_authentication:
            if not self.user_name.strip():
                errors.append("Please specify a UserName (check MPExtended - Authentication).")
            if not self.password.strip():
                errors.append("Please specify a Password (check MPExtended - Authentication).")

        return ValidationResult(is_valid=not errors, summary=" ".join(errors))


settings = Settings()
