"""
graphql-headerkit

Tags GraphQL requests with the resource names their operations address.
"""

__version__ = "0.1.0"

# Export public API
from .utils.config import config
from .core.graphql_analyzer import GraphQLOperationAnalyzer, OperationFields, extract
from .core.middleware import GraphQLHeaderMiddleware

# Primary entrypoints for the package
__all__ = [
    "__version__",
    "GraphQLHeaderMiddleware",
    "GraphQLOperationAnalyzer",
    "OperationFields",
    "extract",
    "config",
]
