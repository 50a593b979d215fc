"""
Query Result Sequences

Single-pass wrappers around the lazy pyoxigraph result iterators. A result
can be consumed once, front to back, and must be closed exactly once by its
owner. Terms are verified against the owning connection's parser config as
they are pulled.
"""

import logging
from typing import Callable, Iterator, List, Optional, Tuple

import pyoxigraph as px

from ..rdf.value_renderer import Value
from .parser_config import ParserConfig
from .repository_errors import QueryEvaluationError

logger = logging.getLogger(__name__)


class BindingSet:
    """One solution of a tuple query, ordered by binding name."""

    def __init__(self, binding_names: List[str], values: List[Optional[Value]]):
        self._binding_names = binding_names
        self._values = values

    def get_value(self, binding_name: str) -> Optional[Value]:
        """Value bound to a name, None when unbound or unknown."""
        try:
            return self._values[self._binding_names.index(binding_name)]
        except ValueError:
            return None

    def get_binding_names(self) -> List[str]:
        return list(self._binding_names)

    def __len__(self) -> int:
        return sum(1 for value in self._values if value is not None)

    def __repr__(self) -> str:
        pairs = ", ".join(f"{name}={value}" for name, value in zip(self._binding_names, self._values))
        return f"BindingSet({pairs})"


class QueryResult:
    """
    Forward-only result sequence.

    Exposes has_next/next/close plus the iterator protocol. There is no
    way to rewind or index a result.
    """

    def __init__(self, source: Iterator, parser_config_getter: Callable[[], ParserConfig]):
        self._source = source
        self._parser_config_getter = parser_config_getter
        self._lookahead = None
        self._has_lookahead = False
        self._exhausted = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def has_next(self) -> bool:
        """Whether another element is available. May block on the store."""
        self._check_open()
        if self._has_lookahead:
            return True
        if self._exhausted:
            return False
        try:
            raw = next(self._source)
        except StopIteration:
            self._exhausted = True
            return False
        except (OSError, RuntimeError, ValueError) as e:
            raise QueryEvaluationError(f"Query evaluation failed: {e}") from e
        self._lookahead = self._convert(raw)
        self._has_lookahead = True
        return True

    def next(self):
        """Take the next element."""
        if not self.has_next():
            raise StopIteration
        element = self._lookahead
        self._lookahead = None
        self._has_lookahead = False
        return element

    def close(self) -> None:
        """Release the result. Later calls are no-ops."""
        if self._closed:
            return
        self._closed = True
        self._lookahead = None
        self._has_lookahead = False
        self._source = iter(())
        logger.debug(f"Closed {self.__class__.__name__}")

    def __iter__(self):
        return self

    def __next__(self):
        return self.next()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _check_open(self) -> None:
        if self._closed:
            raise QueryEvaluationError("Result has already been closed")

    def _verify(self, term) -> None:
        self._parser_config_getter().verify(term)

    def _convert(self, raw):
        raise NotImplementedError


class TupleQueryResult(QueryResult):
    """Result sequence of BindingSet rows from a SELECT query."""

    def __init__(self, solutions: px.QuerySolutions, parser_config_getter: Callable[[], ParserConfig]):
        super().__init__(iter(solutions), parser_config_getter)
        self._binding_names = [variable.value for variable in solutions.variables]

    def get_binding_names(self) -> List[str]:
        return list(self._binding_names)

    def _convert(self, raw: px.QuerySolution) -> BindingSet:
        values = []
        for name in self._binding_names:
            value = raw[name]
            if value is not None:
                self._verify(value)
            values.append(value)
        return BindingSet(self._binding_names, values)


class GraphQueryResult(QueryResult):
    """Result sequence of (subject, predicate, object) triples from CONSTRUCT or DESCRIBE."""

    def _convert(self, raw: px.Triple) -> Tuple[Value, Value, Value]:
        self._verify(raw)
        return raw.subject, raw.predicate, raw.object
