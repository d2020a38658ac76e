"""
GraphQL Header Middleware

Tags GraphQL requests with the resource names they address, so downstream
services (routers, proxies, log pipelines) can act on them without parsing
the body themselves.
"""

import json
import logging
import time
from typing import Optional, Tuple

from starlette.datastructures import MutableHeaders
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from graphql_headerkit.api.health import (
    track_decode_fallback,
    track_extraction_duration,
    track_request_inspected,
)
from graphql_headerkit.core.graphql_analyzer import GraphQLOperationAnalyzer, OperationFields
from graphql_headerkit.utils.audit import (
    log_body_decode_fallback,
    log_body_too_large,
    log_operations_classified,
)
from graphql_headerkit.utils.config import config, resolve_header_name

logger = logging.getLogger(__name__)


def decode_raw_body(body: bytes) -> str:
    return body.decode("utf-8", errors="replace")


def resolve_json_document(body: bytes) -> Tuple[str, Optional[str]]:
    """
    Read the GraphQL document out of a ``{query, operationName, variables}``
    JSON envelope.

    Returns:
        (document, fallback_reason). ``fallback_reason`` is None when the
        envelope was usable; otherwise the document is the raw body text.
        An envelope without ``query`` yields an empty document.
    """
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        reason = f"invalid JSON: {e}"
    else:
        if isinstance(payload, dict):
            query = payload.get("query")
            if query is None:
                return "", None
            if isinstance(query, str):
                return query, None
            reason = f"'query' is {type(query).__name__}, expected string"
        else:
            reason = f"body is a JSON {type(payload).__name__}, expected object"

    return decode_raw_body(body), reason


class GraphQLHeaderMiddleware(BaseHTTPMiddleware):
    """
    Request-tagging middleware for GraphQL endpoints.

    Features:
    - Inspects POST requests with a JSON or GraphQL content type
    - Sets comma-joined query / mutation root fields as request headers
    - Raw-text fallback for bodies that are not a JSON envelope
    - Body restored for downstream consumption
    - Audit logging and metrics
    """

    INSPECTED_METHOD = "POST"
    JSON_CONTENT_TYPE = "application/json"
    GRAPHQL_CONTENT_TYPE = "application/graphql"

    def __init__(
        self,
        app,
        query_header: Optional[str] = None,
        mutation_header: Optional[str] = None,
        max_body_bytes: Optional[int] = None,
    ):
        super().__init__(app)
        self.query_header = resolve_header_name(query_header, config.QUERY_HEADER)
        self.mutation_header = resolve_header_name(mutation_header, config.MUTATION_HEADER)
        self.max_body_bytes = max_body_bytes or config.MAX_BODY_BYTES
        self.metrics_enabled = config.METRICS_ENABLED

    async def dispatch(self, request: Request, call_next):
        content_type = request.headers.get("content-type", "").lower()

        # 1. Pass through anything that is not a GraphQL POST
        if not self._should_inspect(request.method, content_type):
            return await call_next(request)

        path = request.url.path
        body = await request.body()

        # 2. Oversized bodies are forwarded untouched
        if len(body) > self.max_body_bytes:
            logger.warning(
                f"Skipping GraphQL inspection on {path}: body is {len(body)} bytes "
                f"(limit {self.max_body_bytes})"
            )
            log_body_too_large(path, len(body), self.max_body_bytes)
            self._track_outcome("too_large")
        else:
            # 3. Classify and tag
            document = self._extract_document(body, content_type, path)

            started = time.perf_counter()
            result = GraphQLOperationAnalyzer.extract(document)
            if self.metrics_enabled:
                track_extraction_duration(time.perf_counter() - started)

            self._apply_headers(request, result)

            if result.is_empty:
                self._track_outcome("empty")
            else:
                self._track_outcome("classified")
                log_operations_classified(
                    request.method, path, result.queries, result.mutations
                )

        # 4. Re-inject body for downstream consumption
        async def receive():
            return {"type": "http.request", "body": body, "more_body": False}

        request = Request(request.scope, receive=receive)
        return await call_next(request)

    # ========================================
    # REQUEST INSPECTION
    # ========================================

    def _should_inspect(self, method: str, content_type: str) -> bool:
        """Only POST requests carrying JSON or GraphQL bodies are inspected."""
        if method != self.INSPECTED_METHOD:
            return False
        return self.JSON_CONTENT_TYPE in content_type or self.GRAPHQL_CONTENT_TYPE in content_type

    def _extract_document(self, body: bytes, content_type: str, path: str) -> str:
        """Resolve the GraphQL document, recording any raw-text fallback."""
        if self.JSON_CONTENT_TYPE not in content_type:
            return decode_raw_body(body)

        document, reason = resolve_json_document(body)
        if reason:
            logger.debug(f"Reading body of {path} as raw GraphQL: {reason}")
            log_body_decode_fallback(path, reason)
            if self.metrics_enabled:
                track_decode_fallback()
        return document

    # ========================================
    # HEADER INJECTION
    # ========================================

    def _apply_headers(self, request: Request, result: OperationFields) -> None:
        """
        Set (or clear) the classification headers on the forwarded request.

        Headers are written into the ASGI scope, which downstream apps read
        from. A client-supplied value is never forwarded for an empty result.
        """
        headers = MutableHeaders(scope=request.scope)

        for name, fields in (
            (self.query_header, result.queries),
            (self.mutation_header, result.mutations),
        ):
            if fields:
                headers[name] = ",".join(fields)
                logger.debug(f"{name}: {headers[name]}")
            elif name in headers:
                del headers[name]

    def _track_outcome(self, outcome: str) -> None:
        if self.metrics_enabled:
            track_request_inspected(outcome)
