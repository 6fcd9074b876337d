"""
Settings and logging configuration.

Settings are read from environment variables and validated up front,
so a misconfigured deployment fails at startup instead of on the first
request.

Environment variables:
    JWT_SECRET             HMAC secret or PEM public key (required, >= 32 chars)
    JWT_ALGORITHM          Signing algorithm (default: HS256)
    JWT_AUDIENCE           Expected ``aud`` claim (optional)
    JWT_ISSUER             Expected ``iss`` claim (optional)
    JWT_LEEWAY_SECONDS     Clock skew tolerance (default: 0)
    LOG_LEVEL              DEBUG, INFO, WARNING, ERROR or CRITICAL (default: INFO)
    EVENT_BUS_DELIVERY     ``await`` or ``background`` (default: await)
    EVENT_BUS_STRICT       Raise handler failures to the publisher (default: false)
    EVENT_BUS_DEDUPLICATE  Ignore repeated subscriptions (default: false)
    AUTH_PUBLIC_PATHS      Comma-separated path prefixes skipped by the middleware
"""

import logging
import logging.config
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from rbac_audit.infrastructure.adapters.event_bus import DeliveryMode

logger = logging.getLogger(__name__)

MIN_SECRET_LENGTH = 32
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def _parse_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class AuthSettings:
    """Validated runtime settings for authentication and auditing."""

    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_audience: Optional[str] = None
    jwt_issuer: Optional[str] = None
    jwt_leeway_seconds: int = 0
    log_level: str = "INFO"
    event_bus_delivery: DeliveryMode = DeliveryMode.AWAIT
    event_bus_strict: bool = False
    event_bus_deduplicate: bool = False
    public_paths: List[str] = field(default_factory=lambda: ["/health"])

    def __post_init__(self):
        if not self.jwt_secret or len(self.jwt_secret) < MIN_SECRET_LENGTH:
            raise ValueError(
                f"JWT_SECRET must be at least {MIN_SECRET_LENGTH} characters long"
            )
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {self.log_level}"
            )
        if self.jwt_leeway_seconds < 0:
            raise ValueError("JWT_LEEWAY_SECONDS must not be negative")
        try:
            self.event_bus_delivery = DeliveryMode(self.event_bus_delivery)
        except ValueError:
            raise ValueError(
                f"EVENT_BUS_DELIVERY must be 'await' or 'background', "
                f"got {self.event_bus_delivery!r}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AuthSettings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ`` (for tests)

        Raises:
            ValueError: If a variable is missing or invalid
        """
        env = os.environ if environ is None else environ

        leeway = env.get("JWT_LEEWAY_SECONDS", "0")
        try:
            leeway_seconds = int(leeway)
        except ValueError:
            raise ValueError(f"JWT_LEEWAY_SECONDS must be an integer, got {leeway!r}")

        kwargs: Dict[str, Any] = {
            "jwt_secret": env.get("JWT_SECRET", ""),
            "jwt_algorithm": env.get("JWT_ALGORITHM", "HS256"),
            "jwt_audience": env.get("JWT_AUDIENCE") or None,
            "jwt_issuer": env.get("JWT_ISSUER") or None,
            "jwt_leeway_seconds": leeway_seconds,
            "log_level": env.get("LOG_LEVEL", "INFO"),
            "event_bus_delivery": env.get("EVENT_BUS_DELIVERY", "await").strip().lower(),
            "event_bus_strict": _parse_bool(
                "EVENT_BUS_STRICT", env.get("EVENT_BUS_STRICT", "false")
            ),
            "event_bus_deduplicate": _parse_bool(
                "EVENT_BUS_DEDUPLICATE", env.get("EVENT_BUS_DEDUPLICATE", "false")
            ),
        }
        if "AUTH_PUBLIC_PATHS" in env:
            kwargs["public_paths"] = _parse_list(env["AUTH_PUBLIC_PATHS"])

        return cls(**kwargs)

    def as_dict(self) -> Dict[str, Any]:
        """Nested dict for ``providers.Configuration.from_dict``."""
        return {
            "jwt": {
                "secret": self.jwt_secret,
                "algorithms": [self.jwt_algorithm],
                "audience": self.jwt_audience,
                "issuer": self.jwt_issuer,
                "leeway": self.jwt_leeway_seconds,
            },
            "event_bus": {
                "delivery": self.event_bus_delivery.value,
                "strict": self.event_bus_strict,
                "deduplicate": self.event_bus_deduplicate,
            },
            "auth": {
                "public_paths": list(self.public_paths),
            },
            "log_level": self.log_level,
        }


def configure_logging(level: str = "INFO") -> None:
    """
    Install a console logging config for the ``rbac_audit`` loggers.

    Host applications with their own logging setup don't need this.
    """
    level = level.upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {level}")

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                "rbac_audit": {
                    "handlers": ["console"],
                    "level": level,
                    "propagate": False,
                },
            },
        }
    )
    logger.debug(f"Logging configured at {level}")
