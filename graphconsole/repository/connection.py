"""
Repository Connection

Single-owner handle on a repository. A connection prepares queries, lists
and edits namespaces, loads data and carries the parser config applied to
the results it produces. It must be closed exactly once; use it as a
context manager or close it in a finally block.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterator, Optional, Tuple

import pyoxigraph as px
from rdflib.plugins.sparql import prepareQuery

from ..rdf.namespaces import Namespace
from .parser_config import ParserConfig
from .prepared_query import PreparedBooleanQuery, PreparedGraphQuery, PreparedTupleQuery
from .query_language import QueryLanguage
from .repository_errors import MalformedQueryError, RepositoryError, UnsupportedQueryLanguageError

if TYPE_CHECKING:
    from .repository import GraphRepository

logger = logging.getLogger(__name__)

TUPLE_QUERY_FORMS = ("SelectQuery",)
GRAPH_QUERY_FORMS = ("ConstructQuery", "DescribeQuery")
BOOLEAN_QUERY_FORMS = ("AskQuery",)


class RepositoryConnection:
    """Connection to a GraphRepository."""

    def __init__(self, repository: "GraphRepository", store: px.Store, parser_config: ParserConfig):
        self.repository = repository
        self._store = store
        self._parser_config = parser_config
        self._open = True

    # Lifecycle

    def is_open(self) -> bool:
        return self._open

    def close(self) -> None:
        """Release the connection. Later calls are no-ops."""
        if not self._open:
            return
        self._open = False
        self._store = None
        logger.debug("Connection closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def get_store(self) -> px.Store:
        self._check_open()
        return self._store

    # Parser config

    def get_parser_config(self) -> ParserConfig:
        return self._parser_config

    def set_parser_config(self, parser_config: ParserConfig) -> None:
        """Replace the parser config for the rest of this connection's life."""
        self._check_open()
        self._parser_config = parser_config

    # Queries

    def prepare_tuple_query(self, language: QueryLanguage, query_text: str) -> PreparedTupleQuery:
        form, prefixes = self._parse_query(language, query_text, TUPLE_QUERY_FORMS)
        return PreparedTupleQuery(self, query_text, form, prefixes)

    def prepare_graph_query(self, language: QueryLanguage, query_text: str) -> PreparedGraphQuery:
        form, prefixes = self._parse_query(language, query_text, GRAPH_QUERY_FORMS)
        return PreparedGraphQuery(self, query_text, form, prefixes)

    def prepare_boolean_query(self, language: QueryLanguage, query_text: str) -> PreparedBooleanQuery:
        form, prefixes = self._parse_query(language, query_text, BOOLEAN_QUERY_FORMS)
        return PreparedBooleanQuery(self, query_text, form, prefixes)

    def initial_prefixes(self) -> Dict[str, str]:
        """Known namespaces as a prefix map; the first entry for a prefix wins."""
        self._check_open()
        prefixes = {}
        for ns in self.repository.namespaces():
            prefixes.setdefault(ns.prefix, ns.name)
        return prefixes

    def _parse_query(self, language: QueryLanguage, query_text: str,
                     expected_forms: Tuple[str, ...]) -> Tuple[str, Dict[str, str]]:
        """
        Parse a query and check its form.

        Known namespaces are available to the query as initial prefixes;
        PREFIX declarations in the query text take precedence.

        Returns:
            Name of the parsed query form, e.g. 'SelectQuery', and the
            initial prefixes the query was parsed with

        Raises:
            UnsupportedQueryLanguageError: If the language cannot be executed
            MalformedQueryError: If parsing fails or the form is not expected
        """
        self._check_open()
        if language is not QueryLanguage.SPARQL:
            raise UnsupportedQueryLanguageError(f"Unsupported query language: {language.display_name}")

        prefixes = self.initial_prefixes()
        try:
            parsed = prepareQuery(query_text, initNs=prefixes)
        except Exception as e:
            raise MalformedQueryError(f"Malformed query: {e}") from e

        form = parsed.algebra.name
        if form not in expected_forms:
            raise MalformedQueryError(f"Unexpected query form {form}, expected one of {', '.join(expected_forms)}")
        logger.debug(f"Prepared {form}")
        return form, prefixes

    # Namespaces

    def get_namespaces(self) -> Iterator[Namespace]:
        """Known namespaces, in declaration order."""
        self._check_open()
        return iter(self.repository.namespaces())

    def get_namespace(self, prefix: str) -> Optional[str]:
        self._check_open()
        for ns in self.repository.namespaces():
            if ns.prefix == prefix:
                return ns.name
        return None

    def set_namespace(self, prefix: str, name: str) -> None:
        self._check_open()
        self.repository.set_namespace(prefix, name)

    def remove_namespace(self, prefix: str) -> None:
        self._check_open()
        self.repository.remove_namespace(prefix)

    def clear_namespaces(self) -> None:
        self._check_open()
        self.repository.clear_namespaces()

    # Data

    def add_statement(self, subject, predicate, obj) -> None:
        """Add one triple to the default graph."""
        self.get_store().add(px.Quad(subject, predicate, obj))

    def load_file(self, file_path: str, rdf_format: Optional[px.RdfFormat] = None) -> int:
        """
        Load an RDF file into the default graph.

        Args:
            file_path: Path to the file
            rdf_format: Format, detected from the file extension if None

        Returns:
            Number of statements added

        Raises:
            RepositoryError: If the file is missing, unrecognised or unparsable
        """
        store = self.get_store()
        path = Path(file_path)
        if not path.is_file():
            raise RepositoryError(f"File does not exist: {file_path}")

        if rdf_format is None:
            rdf_format = px.RdfFormat.from_extension(path.suffix.lstrip('.'))
            if rdf_format is None:
                raise RepositoryError(f"Unable to determine RDF format of: {file_path}")

        before = len(store)
        try:
            store.load(path=str(path), format=rdf_format, lenient=self._parser_config.is_lenient)
        except (SyntaxError, OSError, ValueError) as e:
            raise RepositoryError(f"Failed to load {file_path}: {e}") from e

        added = len(store) - before
        logger.info(f"Loaded {added} statements from {file_path}")
        return added

    def size(self) -> int:
        return len(self.get_store())

    def _check_open(self) -> None:
        if not self._open:
            raise RepositoryError("Connection has been closed")
