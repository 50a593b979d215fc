#!/usr/bin/env python3
"""
Test suite for GraphConsoleREPL command handling.

Commands are fed straight to execute_command; output is captured from the
console streams.
"""

import io
import sys
from pathlib import Path

import pytest

# Add the parent directory to Python path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from graphconsole.cmd.graphconsole_cmd import GraphConsoleREPL, parse_args
from graphconsole.config.config_loader import GraphConsoleConfig
from graphconsole.console.console_io import ConsoleIO

TURTLE_DATA = """
@prefix ex: <http://example.org/> .
ex:alice ex:knows ex:bob .
ex:bob ex:knows ex:carol .
"""


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "people.ttl"
    path.write_text(TURTLE_DATA, encoding="utf-8")
    return path


@pytest.fixture
def repl():
    out = io.StringIO()
    err = io.StringIO()
    instance = GraphConsoleREPL(GraphConsoleConfig(), ConsoleIO(out=out, err=err))
    yield instance, out, err
    instance.close_repository()


class TestGraphConsoleREPL:

    def test_parse_command(self, repl):
        instance, _, _ = repl
        assert instance.parse_command("OPEN /data;") == ("open", ["/data"])
        assert instance.parse_command("   ") == ("", [])

    def test_query_before_open(self, repl):
        instance, out, err = repl
        assert instance.execute_command("select * where { ?s ?p ?o };") is True
        assert "please open a repository first" in err.getvalue()
        assert out.getvalue() == ""

    def test_open_load_and_query(self, repl, data_file):
        instance, out, err = repl
        instance.execute_command("open;")
        assert "Opened repository 'memory'" in out.getvalue()

        instance.execute_command(f"load {data_file};")
        assert f"Loaded 2 statements from {data_file}" in out.getvalue()

        instance.execute_command("namespace ex http://example.org/;")
        instance.execute_command("set width=40;")
        instance.execute_command("select ?s ?o\nwhere { ?s ex:knows ?o }\norder by ?s;")
        output = out.getvalue()
        assert "| ex:alice" + " " * 8 + "| ex:bob" in output
        assert "2 result(s)" in output
        assert err.getvalue() == ""

    def test_construct_query(self, repl, data_file):
        instance, out, _ = repl
        instance.execute_command("open;")
        instance.execute_command(f"load {data_file};")
        instance.execute_command("namespace ex: <http://example.org/>;")
        instance.execute_command("construct where { ex:alice ?p ?o };")
        assert "ex:alice   ex:knows   ex:bob" in out.getvalue()
        assert "1 results" in out.getvalue()

    def test_query_errors_are_reported(self, repl):
        instance, _, err = repl
        instance.execute_command("open;")
        assert instance.execute_command("select ?s where { ?s ?p };") is True
        assert "ERROR: Malformed query" in err.getvalue()

    def test_namespace_listing(self, repl):
        instance, out, _ = repl
        instance.execute_command("open;")
        instance.execute_command("namespace;")
        output = out.getvalue()
        assert "Prefix" in output
        assert "http://www.w3.org/2001/XMLSchema#" in output

    def test_set_parameters(self, repl):
        instance, out, err = repl
        instance.execute_command("set showprefix=off;")
        instance.execute_command("set overflow=truncate;")
        instance.execute_command("set width=3;")
        assert instance.parameters.show_prefix is False
        assert instance.parameters.is_truncating()
        assert instance.parameters.get_width() == 80
        assert "Invalid value for width" in err.getvalue()

        instance.execute_command("set;")
        assert "showprefix: off" in out.getvalue()
        assert "overflow: truncate" in out.getvalue()

    def test_open_twice_and_close(self, repl):
        instance, out, _ = repl
        instance.execute_command("open;")
        instance.execute_command("open;")
        assert "Repository already open" in out.getvalue()
        instance.execute_command("close;")
        assert "Closed repository 'memory'" in out.getvalue()
        assert not instance.state.is_open()

    def test_info(self, repl, data_file):
        instance, out, _ = repl
        instance.execute_command("open;")
        instance.execute_command(f"load {data_file};")
        instance.execute_command("info;")
        assert "Statements" in out.getvalue()

    def test_unknown_command_and_exit(self, repl):
        instance, out, _ = repl
        assert instance.execute_command("frobnicate;") is True
        assert "Unknown command: frobnicate" in out.getvalue()
        assert instance.execute_command("exit;") is False


class TestParseArgs:

    def test_arguments(self):
        args = parse_args(["--config", "c.yaml", "-r", "./data", "-e", "info;"])
        assert args.config == "c.yaml"
        assert args.repository == "./data"
        assert args.execute == "info;"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
