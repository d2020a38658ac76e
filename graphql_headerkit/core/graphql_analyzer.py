"""
GraphQL Operation Analyzer - resource names per operation type.

Heuristic, parser-free classification of a GraphQL document: the root fields
of every ``query`` and ``mutation`` operation, in document order.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from graphql_headerkit.core.field_extractor import extract_root_fields
from graphql_headerkit.core.scanner import OperationKind, locate_operation_blocks, strip_comments

logger = logging.getLogger(__name__)


@dataclass
class OperationFields:
    """
    Root field names found in a document.

    Unpacks as a ``(queries, mutations)`` pair. Duplicates are kept in scan
    order.
    """

    queries: List[str] = field(default_factory=list)
    mutations: List[str] = field(default_factory=list)

    def __iter__(self) -> Iterator[List[str]]:
        yield self.queries
        yield self.mutations

    @property
    def is_empty(self) -> bool:
        return not self.queries and not self.mutations


class GraphQLOperationAnalyzer:
    """
    Tolerant resource-name extraction for GraphQL documents.

    Never raises: malformed input degrades to partial or empty results.
    """

    @staticmethod
    def extract(document: Optional[str]) -> OperationFields:
        """
        Extract root field names for queries and mutations.

        Examples:
            >>> GraphQLOperationAnalyzer.extract("query Q { user { id } }")
            OperationFields(queries=['user'], mutations=[])
            >>> GraphQLOperationAnalyzer.extract("mutation { launchRun(id: 1) { ok } }")
            OperationFields(queries=[], mutations=['launchRun'])
        """
        if not document or not isinstance(document, str):
            return OperationFields()

        text = strip_comments(document)
        return OperationFields(
            queries=GraphQLOperationAnalyzer._collect(text, OperationKind.QUERY),
            mutations=GraphQLOperationAnalyzer._collect(text, OperationKind.MUTATION),
        )

    @staticmethod
    def _collect(text: str, kind: OperationKind) -> List[str]:
        """Root fields of every block of one kind; a failure here never affects the other kind."""
        fields: List[str] = []
        try:
            for block in locate_operation_blocks(text, kind):
                fields.extend(extract_root_fields(block))
        except Exception as e:
            logger.warning(f"Failed to scan GraphQL {kind.value} blocks: {e}")
        return fields

    @staticmethod
    def extract_query_fields(document: Optional[str]) -> List[str]:
        """Root field names of all query operations."""
        return GraphQLOperationAnalyzer.extract(document).queries

    @staticmethod
    def extract_mutation_fields(document: Optional[str]) -> List[str]:
        """Root field names of all mutation operations."""
        return GraphQLOperationAnalyzer.extract(document).mutations

    @staticmethod
    def is_mutation(document: Optional[str]) -> bool:
        """Quick check if the document contains any mutation root field."""
        return len(GraphQLOperationAnalyzer.extract_mutation_fields(document)) > 0


def extract(document: Optional[str]) -> OperationFields:
    """Module-level shortcut for GraphQLOperationAnalyzer.extract()."""
    return GraphQLOperationAnalyzer.extract(document)
