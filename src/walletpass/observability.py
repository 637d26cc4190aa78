"""Structured logging setup for wallet pass issuance.

Configures structlog with the processor chain used across the service:
JSON output for log shipping, or a console renderer for local runs.
"""

import logging
import sys
import typing as t

import structlog

# Keys whose values must never reach a log line
SENSITIVE_KEYS = (
    "password",
    "passphrase",
    "private_key",
    "certificate_base64",
    "secret",
    "api_key",
    "token",
    "authorization",
)


def scrub_secrets(logger: t.Any, method_name: str, event_dict: dict[str, t.Any]) -> dict[str, t.Any]:
    """Redact secret-bearing fields from log events."""

    def _scrub_dict(d: t.Any) -> t.Any:
        if not isinstance(d, dict):
            return d

        for key in list(d.keys()):
            if any(sensitive in str(key).lower() for sensitive in SENSITIVE_KEYS):
                d[key] = "[REDACTED]"
            elif isinstance(d[key], dict):
                d[key] = _scrub_dict(d[key])

        return d

    return t.cast(dict[str, t.Any], _scrub_dict(event_dict))


def build_processors(json_output: bool = True) -> list[t.Any]:
    """Build the structlog processor chain.

    Args:
        json_output: Render as JSON when True, otherwise for a terminal.

    Returns:
        The list of processors, renderer last.
    """
    renderer: t.Any = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    return [
        structlog.contextvars.merge_contextvars,  # Merge context variables
        structlog.stdlib.add_logger_name,  # Add logger name
        structlog.stdlib.add_log_level,  # Add log level
        structlog.stdlib.PositionalArgumentsFormatter(),  # Format positional args
        structlog.processors.TimeStamper(fmt="iso"),  # Add ISO timestamp
        structlog.processors.StackInfoRenderer(),  # Render stack info
        structlog.processors.format_exc_info,  # Format exceptions
        structlog.processors.UnicodeDecoder(),  # Decode unicode
        scrub_secrets,  # Scrub secrets before serialization
        renderer,
    ]


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """Configure stdlib logging and structlog for the process.

    Args:
        level: Minimum log level name (e.g. "INFO", "DEBUG").
        json_output: Emit JSON lines instead of console-formatted output.
    """
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level.upper(), force=True)

    structlog.configure(
        processors=build_processors(json_output),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
