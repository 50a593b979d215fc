"""
Query Dispatch

Works out the language and form of a query typed at the console, adds
PREFIX declarations for known namespaces and hands the query to the
matching evaluator.
"""

import logging
import re
import time
from contextlib import closing
from typing import Iterable, Optional, Tuple

from ..rdf.namespaces import Namespace
from ..repository.query_language import QueryLanguage
from ..repository.repository_errors import MalformedQueryError
from .console_io import ConsoleIO
from .console_parameters import ConsoleParameters
from .console_state import ConsoleState
from .tuple_graph_evaluator import TupleAndGraphQueryEvaluator, elapsed_ms

logger = logging.getLogger(__name__)

_PROLOGUE = re.compile(
    r'^(?:\s+|#[^\n]*\n|PREFIX\s+[^\s:]*:\s*<[^>]*>|BASE\s*<[^>]*>)*',
    re.IGNORECASE,
)
_DECLARED_PREFIX = re.compile(r'PREFIX\s+([^\s:]*):', re.IGNORECASE)
# IRI references, string literals and comments cannot hold prefixed names
_NON_NAME_TOKENS = re.compile(
    r'<[^<>"{}|^`\\\s]*>'
    r'|"""(?:[^"\\]|\\.|"(?!""))*"""'
    r"|'''(?:[^'\\]|\\.|'(?!''))*'''"
    r'|"(?:[^"\\\n]|\\.)*"'
    r"|'(?:[^'\\\n]|\\.)*'"
    r'|#[^\n]*',
    re.DOTALL,
)


def add_query_prefixes(query_text: str, namespaces: Iterable[Namespace]) -> str:
    """
    Prepend PREFIX declarations for namespaces the query uses but does not declare.

    Only the first entry for a given prefix is used.
    """
    declared = set(_DECLARED_PREFIX.findall(query_text))
    names_text = _NON_NAME_TOKENS.sub(" ", query_text)
    declarations = []
    for ns in namespaces:
        if ns.prefix in declared:
            continue
        declared.add(ns.prefix)
        if re.search(r'(?<![\w.\-:])' + re.escape(ns.prefix) + r':', names_text):
            declarations.append(f"PREFIX {ns.prefix}: <{ns.name}>\n")
    return "".join(declarations) + query_text


def split_language(query_text: str) -> Tuple[QueryLanguage, str]:
    """Strip an optional leading language keyword; SPARQL when absent."""
    stripped = query_text.strip()
    parts = stripped.split(None, 1)
    language = QueryLanguage.from_name(parts[0]) if parts else None
    if language is None:
        return QueryLanguage.SPARQL, stripped
    return language, parts[1] if len(parts) > 1 else ""


def query_form(query_text: str) -> str:
    """First keyword after the prologue, upper-cased ('SELECT', 'ASK', ...)."""
    body = query_text[_PROLOGUE.match(query_text).end():]
    match = re.match(r'[A-Za-z]+', body)
    return match.group(0).upper() if match else ""


class QueryEvaluator:
    """Entry point for queries entered at the console."""

    def __init__(self, console_io: ConsoleIO, state: ConsoleState, parameters: ConsoleParameters):
        self.console_io = console_io
        self.state = state
        self.parameters = parameters
        self.tuple_graph_evaluator = TupleAndGraphQueryEvaluator(console_io, state, parameters)

    def evaluate(self, query_text: str) -> Optional[Tuple[object, int]]:
        """
        Evaluate a query of any supported form.

        Returns:
            (result, elapsed_ms) from the evaluator used, None without an open repository

        Raises:
            MalformedQueryError: If the query form is not SELECT, CONSTRUCT, DESCRIBE or ASK
        """
        if not self.state.is_open():
            self.console_io.write_unopened_error()
            return None

        language, body = split_language(query_text)
        if self.parameters.is_query_prefix():
            body = self._with_prefixes(body)

        form = query_form(body)
        logger.debug(f"Dispatching {language.display_name} {form} query")
        if form == "SELECT":
            return self.tuple_graph_evaluator.evaluate_tuple_query(language, body)
        if form in ("CONSTRUCT", "DESCRIBE"):
            return self.tuple_graph_evaluator.evaluate_graph_query(language, body)
        if form == "ASK":
            return self.evaluate_boolean_query(language, body)
        raise MalformedQueryError(f"Unknown query form: {form or query_text.strip()}")

    def evaluate_boolean_query(self, query_language: QueryLanguage, query_text: str) -> Optional[Tuple[bool, int]]:
        """Evaluate an ASK query and write the answer."""
        repository = self.state.get_repository()
        if repository is None:
            self.console_io.write_unopened_error()
            return None

        with closing(repository.get_connection()) as con:
            self.console_io.writeln(f"Evaluating {query_language.display_name} query...")
            prepared_query = con.prepare_boolean_query(query_language, query_text)
            start_time = time.time()
            answer = prepared_query.evaluate()
            elapsed = elapsed_ms(start_time)
        self.console_io.writeln(f"Answer: {'true' if answer else 'false'} ({elapsed} ms)")
        return answer, elapsed

    def _with_prefixes(self, query_text: str) -> str:
        with closing(self.state.get_repository().get_connection()) as con:
            namespaces = list(con.get_namespaces())
        return add_query_prefixes(query_text, namespaces)
