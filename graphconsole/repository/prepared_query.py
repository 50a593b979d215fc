"""
Prepared Queries

A prepared query has passed syntax and query-form checks; evaluating it
hands back a lazy, single-pass result.
"""

import logging
from typing import TYPE_CHECKING, Dict, Optional

import pyoxigraph as px

from .query_results import GraphQueryResult, TupleQueryResult
from .repository_errors import MalformedQueryError, QueryEvaluationError

if TYPE_CHECKING:
    from .connection import RepositoryConnection

logger = logging.getLogger(__name__)


class PreparedQuery:
    """Query text bound to the connection that prepared it."""

    def __init__(self, connection: "RepositoryConnection", query_text: str, query_form: str,
                 prefixes: Optional[Dict[str, str]] = None):
        self.connection = connection
        self.query_text = query_text
        self.query_form = query_form
        self.prefixes = dict(prefixes or {})

    def _run(self):
        store = self.connection.get_store()
        logger.debug(f"Evaluating {self.query_form}: {self.query_text}")
        try:
            return store.query(self.query_text, prefixes=self.prefixes)
        except SyntaxError as e:
            raise MalformedQueryError(f"Malformed query: {e}") from e
        except (OSError, RuntimeError, ValueError) as e:
            raise QueryEvaluationError(f"Query evaluation failed: {e}") from e


class PreparedTupleQuery(PreparedQuery):

    def evaluate(self) -> TupleQueryResult:
        results = self._run()
        if not isinstance(results, px.QuerySolutions):
            raise MalformedQueryError(f"Not a tuple query: {self.query_form}")
        return TupleQueryResult(results, self.connection.get_parser_config)


class PreparedGraphQuery(PreparedQuery):

    def evaluate(self) -> GraphQueryResult:
        results = self._run()
        if not isinstance(results, px.QueryTriples):
            raise MalformedQueryError(f"Not a graph query: {self.query_form}")
        return GraphQueryResult(iter(results), self.connection.get_parser_config)


class PreparedBooleanQuery(PreparedQuery):

    def evaluate(self) -> bool:
        results = self._run()
        if not isinstance(results, px.QueryBoolean):
            raise MalformedQueryError(f"Not a boolean query: {self.query_form}")
        return bool(results)
