"""
Configuration management for the GraphQL header middleware.
All settings come from environment variables with safe defaults.
"""

import os
import re

DEFAULT_QUERY_HEADER = "X-GraphQL-Queries"
DEFAULT_MUTATION_HEADER = "X-GraphQL-Mutations"

# RFC 7230 token characters
_HEADER_NAME_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


def resolve_header_name(value, default: str) -> str:
    """Unset or blank header names fall back to the default."""
    if value is None:
        return default
    value = str(value).strip()
    return value or default


def is_valid_header_name(name: str) -> bool:
    return bool(_HEADER_NAME_RE.match(name))


class HeaderKitConfig:
    """Centralized configuration for graphql-headerkit."""

    def __init__(self):
        # Deployment name stamped on audit events as "env"
        self.ENV = os.getenv("GRAPHQL_HEADERKIT_ENV", "production")

        # Header names set on the forwarded request
        self.QUERY_HEADER = resolve_header_name(
            os.getenv("GRAPHQL_HEADERKIT_QUERY_HEADER"), DEFAULT_QUERY_HEADER
        )
        self.MUTATION_HEADER = resolve_header_name(
            os.getenv("GRAPHQL_HEADERKIT_MUTATION_HEADER"), DEFAULT_MUTATION_HEADER
        )

        # Bodies above this size are forwarded without inspection
        self.MAX_BODY_BYTES = int(os.getenv("GRAPHQL_HEADERKIT_MAX_BODY_BYTES", "1048576"))  # 1 MiB

        # Logging, Audit and Metrics
        self.LOG_LEVEL = os.getenv("GRAPHQL_HEADERKIT_LOG_LEVEL", "INFO")
        self.AUDIT_LOG_ENABLED = os.getenv("GRAPHQL_HEADERKIT_AUDIT_LOG", "true").lower() == "true"
        self.METRICS_ENABLED = os.getenv("GRAPHQL_HEADERKIT_METRICS", "true").lower() == "true"

        # Validate critical settings
        self._validate()

    def _validate(self):
        """Validate configuration settings."""
        for setting in ("QUERY_HEADER", "MUTATION_HEADER"):
            name = getattr(self, setting)
            if not is_valid_header_name(name):
                raise ValueError(f"Invalid {setting}: {name!r} is not a valid HTTP header name")

        if self.QUERY_HEADER.lower() == self.MUTATION_HEADER.lower():
            raise ValueError("QUERY_HEADER and MUTATION_HEADER must be different headers")

        if self.MAX_BODY_BYTES <= 0:
            raise ValueError("MAX_BODY_BYTES must be a positive number of bytes")

    def __repr__(self):
        return (
            f"<HeaderKitConfig query_header={self.QUERY_HEADER} "
            f"mutation_header={self.MUTATION_HEADER} "
            f"max_body_bytes={self.MAX_BODY_BYTES} "
            f"env={self.ENV}>"
        )


# Global config instance
config = HeaderKitConfig()
