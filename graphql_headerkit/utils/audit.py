"""
Audit Logging System

Structured JSON logging for request classification events.
Compatible with Datadog, Splunk, CloudWatch, ELK, etc.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)


class AuditLogger:
    """
    Audit logger that emits structured JSON through the module logger.

    Tracked events:
    - OPERATIONS_CLASSIFIED
    - BODY_DECODE_FALLBACK
    - BODY_TOO_LARGE
    """

    def __init__(self, enabled: bool = True, environment: Optional[str] = None):
        """
        Args:
            enabled: If False, audit logs are silenced
            environment: Deployment name stamped on every event as "env"
        """
        self.enabled = enabled
        self.environment = environment

    def _emit(self, event: Dict[str, Any]) -> None:
        if not self.enabled:
            return

        if "timestamp" not in event:
            event["timestamp"] = datetime.now(timezone.utc).isoformat()
        if self.environment:
            event.setdefault("env", self.environment)

        # Log as single-line JSON (parseable)
        logger.info(json.dumps(event, ensure_ascii=False))

    def operations_classified(
        self,
        method: str,
        path: str,
        queries: List[str],
        mutations: List[str],
    ) -> None:
        """
        Log the resource names extracted from one request.

        Args:
            method: HTTP method
            path: Request path (/graphql, ...)
            queries: Root fields of query operations
            mutations: Root fields of mutation operations
        """
        event: Dict[str, Union[str, List[str]]] = {
            "event_type": "OPERATIONS_CLASSIFIED",
            "method": method,
            "path": path,
            "queries": queries,
            "mutations": mutations,
        }

        self._emit(event)

    def body_decode_fallback(self, path: str, reason: str) -> None:
        """
        Log a JSON body that had to be read as raw GraphQL text.

        Args:
            path: Request path
            reason: Why the JSON envelope was rejected
        """
        event: Dict[str, str] = {
            "event_type": "BODY_DECODE_FALLBACK",
            "path": path,
            "reason": reason,
        }

        self._emit(event)

    def body_too_large(self, path: str, size: int, limit: int) -> None:
        event: Dict[str, Union[str, int]] = {
            "event_type": "BODY_TOO_LARGE",
            "path": path,
            "size": size,
            "limit": limit,
        }

        self._emit(event)


# ========================================
# Global Singleton Instance
# ========================================

_audit_logger: Optional[AuditLogger] = None


def get_audit_logger() -> AuditLogger:
    """
    Returns audit logger singleton.

    Returns:
        Global AuditLogger instance
    """
    global _audit_logger

    if _audit_logger is None:
        from .config import config

        _audit_logger = AuditLogger(enabled=config.AUDIT_LOG_ENABLED, environment=config.ENV)

    return _audit_logger


# ========================================
# Convenience Functions
# ========================================


def log_operations_classified(
    method: str, path: str, queries: List[str], mutations: List[str]
) -> None:
    """Convenience function for a classified request."""
    get_audit_logger().operations_classified(method, path, queries, mutations)


def log_body_decode_fallback(path: str, reason: str) -> None:
    """Convenience function for a raw-text fallback."""
    get_audit_logger().body_decode_fallback(path, reason)


def log_body_too_large(path: str, size: int, limit: int) -> None:
    """Convenience function for an oversized body."""
    get_audit_logger().body_too_large(path, size, limit)
