"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path

from wren.middleware.security_headers import SecurityConfig


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, port=3000, secret_key="s3cr3t")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    shutdown_timeout: float = 5.0  # Grace period for in-flight requests

    # Security
    secret_key: str = ""
    security: SecurityConfig | None = None  # None = DEFAULT_SECURITY
    csrf_enabled: bool = False

    # Templates
    template_dir: str | Path = "templates"
    autoescape: bool = True

    # Static files (always mounted at /static/)
    static_dir: str | Path | None = "static"

    # Time zone handed to handlers via ctx.location (IANA name; None = UTC)
    time_zone: str | None = None

    # Logging
    log_level: str = "info"
