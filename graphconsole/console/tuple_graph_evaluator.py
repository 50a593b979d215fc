"""
Tuple and Graph Query Evaluation

Runs SELECT queries into a fixed-width text table and CONSTRUCT/DESCRIBE
queries into one line per triple. Results are streamed: each row or triple
is rendered as soon as it is pulled, and nothing is buffered.

Column width is computed once from the console width and the number of
bindings. Cells are padded to it but, unless truncation is enabled, never
cut, so long values push the rest of the row out of alignment.
"""

import logging
import time
from contextlib import closing
from typing import List, Tuple

from ..rdf.namespaces import Namespace
from ..rdf.value_renderer import render_value
from ..repository.parser_config import NON_VERIFYING_PARSER_CONFIG
from ..repository.query_language import QueryLanguage
from .console_io import ConsoleIO
from .console_parameters import ConsoleParameters
from .console_state import ConsoleState

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "   "
ELLIPSIS = "..."


def column_width_for(console_width: int, binding_count: int) -> int:
    """Width of each table column, excluding the '| ' cell lead."""
    return (console_width - 1) // binding_count - 3


def separator_line(binding_count: int, column_width: int) -> str:
    return ("+" + "-" * (column_width + 1)) * binding_count + "+"


def table_row(cells: List[str], column_width: int) -> str:
    return "".join("| " + cell + " " * (column_width - len(cell)) for cell in cells) + "|"


def truncate_cell(cell: str, column_width: int) -> str:
    if len(cell) <= column_width:
        return cell
    if column_width <= len(ELLIPSIS):
        return cell[:max(column_width, 0)]
    return cell[:column_width - len(ELLIPSIS)] + ELLIPSIS


def elapsed_ms(start_time: float) -> int:
    return int((time.time() - start_time) * 1000)


class TupleAndGraphQueryEvaluator:
    """
    Evaluates tuple and graph queries against the console's open repository.

    Both evaluate methods return (result_count, elapsed_ms). When no
    repository is open they write the unopened notice and return (0, 0)
    without touching any repository.
    """

    def __init__(self, console_io: ConsoleIO, state: ConsoleState, parameters: ConsoleParameters):
        self.console_io = console_io
        self.state = state
        self.parameters = parameters

    def evaluate_tuple_query(self, query_language: QueryLanguage, query_text: str) -> Tuple[int, int]:
        """
        Evaluate a SELECT query and render the bindings as a table.

        Args:
            query_language: Language of the query
            query_text: Query string

        Returns:
            Tuple of (result_count, elapsed_ms)

        Raises:
            UnsupportedQueryLanguageError, MalformedQueryError: Before any row is written
            QueryEvaluationError: While rows are being pulled, after cleanup
            RepositoryError: If no connection can be obtained
        """
        repository = self.state.get_repository()
        if repository is None:
            self.console_io.write_unopened_error()
            return 0, 0

        with closing(repository.get_connection()) as con:
            namespaces = list(con.get_namespaces())
            self.console_io.writeln(f"Evaluating {query_language.display_name} query...")
            prepared_query = con.prepare_tuple_query(query_language, query_text)
            start_time = time.time()
            with closing(prepared_query.evaluate()) as query_result:
                result_count = 0
                binding_names = query_result.get_binding_names()
                if not binding_names:
                    while query_result.has_next():
                        query_result.next()
                        result_count += 1
                else:
                    result_count = self._write_table(query_result, binding_names, namespaces)
                elapsed = elapsed_ms(start_time)
                self.console_io.writeln(f"{result_count} result(s) ({elapsed} ms)")
        logger.debug(f"Tuple query returned {result_count} results in {elapsed} ms")
        return result_count, elapsed

    def _write_table(self, query_result, binding_names: List[str], namespaces: List[Namespace]) -> int:
        column_width = column_width_for(self.parameters.get_width(), len(binding_names))
        abbreviate = self.parameters.is_show_prefix()
        truncate = self.parameters.is_truncating()
        separator = separator_line(len(binding_names), column_width)

        self.console_io.writeln(separator)
        self.console_io.writeln(table_row(binding_names, column_width))
        self.console_io.writeln(separator)

        result_count = 0
        while query_result.has_next():
            binding_set = query_result.next()
            result_count += 1
            cells = []
            for binding_name in binding_names:
                cell = render_value(binding_set.get_value(binding_name), namespaces, abbreviate)
                if truncate:
                    cell = truncate_cell(cell, column_width)
                cells.append(cell)
            self.console_io.writeln(table_row(cells, column_width))

        self.console_io.writeln(separator)
        return result_count

    def evaluate_graph_query(self, query_language: QueryLanguage, query_text: str) -> Tuple[int, int]:
        """
        Evaluate a CONSTRUCT or DESCRIBE query and write one line per triple.

        Term verification is switched off on the connection first, so
        results with ill-typed literals or odd IRIs are still shown.

        Returns:
            Tuple of (result_count, elapsed_ms)
        """
        repository = self.state.get_repository()
        if repository is None:
            self.console_io.write_unopened_error()
            return 0, 0

        with closing(repository.get_connection()) as con:
            con.set_parser_config(NON_VERIFYING_PARSER_CONFIG)
            namespaces = list(con.get_namespaces())
            abbreviate = self.parameters.is_show_prefix()
            self.console_io.writeln(f"Evaluating {query_language.display_name} query...")
            prepared_query = con.prepare_graph_query(query_language, query_text)
            start_time = time.time()
            with closing(prepared_query.evaluate()) as query_result:
                result_count = 0
                while query_result.has_next():
                    subject, predicate, obj = query_result.next()
                    result_count += 1
                    self.console_io.write(render_value(subject, namespaces, abbreviate))
                    self.console_io.write(FIELD_SEPARATOR)
                    self.console_io.write(render_value(predicate, namespaces, abbreviate))
                    self.console_io.write(FIELD_SEPARATOR)
                    self.console_io.write(render_value(obj, namespaces, abbreviate))
                    self.console_io.writeln()
                elapsed = elapsed_ms(start_time)
                self.console_io.writeln(f"{result_count} results ({elapsed} ms)")
        logger.debug(f"Graph query returned {result_count} triples in {elapsed} ms")
        return result_count, elapsed
