"""Runtime settings for mailform."""

from __future__ import annotations

import os
from dataclasses import dataclass

ENVIRONMENTS = ("development", "test", "production")


@dataclass(frozen=True)
class MailFormSettings:
    """Process-level settings.

    Attributes:
        environment: One of development, test, production
        dispatcher: Name of the registered notification dispatcher to use
        log_level: Logging level name used by the CLI
    """

    environment: str = "production"
    dispatcher: str = "outbox"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.environment not in ENVIRONMENTS:
            raise ValueError(
                f"Unknown environment '{self.environment}'. "
                "Expected one of: " + ", ".join(ENVIRONMENTS)
            )

    @classmethod
    def from_env(cls) -> MailFormSettings:
        """Create settings from environment variables.

        Resolution:
        1. MAILFORM_ENV (default: production)
        2. MAILFORM_DISPATCHER (default: outbox)
        3. MAILFORM_LOG_LEVEL (default: INFO)
        """
        return cls(
            environment=os.environ.get("MAILFORM_ENV", "production").lower(),
            dispatcher=os.environ.get("MAILFORM_DISPATCHER", "outbox"),
            log_level=os.environ.get("MAILFORM_LOG_LEVEL", "INFO").upper(),
        )

    @property
    def is_development(self) -> bool:
        return self.environment == "development"
