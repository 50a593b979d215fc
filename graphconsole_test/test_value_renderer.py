#!/usr/bin/env python3
"""
Test suite for value rendering and namespace prefix resolution.
"""

import sys
from pathlib import Path

import pyoxigraph as px
import pytest

# Add the parent directory to Python path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from graphconsole.rdf.namespaces import Namespace, default_namespaces, resolve_prefix
from graphconsole.rdf.value_renderer import canonical_form, render_value, split_iri

XSD_INTEGER = px.NamedNode("http://www.w3.org/2001/XMLSchema#integer")


@pytest.fixture
def namespaces():
    return [
        Namespace("ex", "http://example.org/"),
        Namespace("foaf", "http://xmlns.com/foaf/0.1/"),
        Namespace("owl", "http://www.w3.org/2002/07/owl#"),
    ]


@pytest.fixture
def sample_values():
    return [
        px.NamedNode("http://example.org/alice"),
        px.NamedNode("http://unknown.org/thing"),
        px.Literal("plain"),
        px.Literal("bonjour", language="fr"),
        px.Literal("42", datatype=XSD_INTEGER),
        px.BlankNode("b0"),
    ]


class TestSplitIri:

    def test_split_on_hash(self):
        assert split_iri("http://www.w3.org/2002/07/owl#Class") == ("http://www.w3.org/2002/07/owl#", "Class")

    def test_split_on_slash(self):
        assert split_iri("http://example.org/people/alice") == ("http://example.org/people/", "alice")

    def test_split_on_colon(self):
        assert split_iri("urn:isbn") == ("urn:", "isbn")
        assert split_iri("ex:s") == ("ex:", "s")

    def test_hash_wins_over_later_slash(self):
        assert split_iri("http://example.org/a#b/c") == ("http://example.org/a#", "b/c")

    def test_trailing_separator_gives_empty_local_name(self):
        assert split_iri("http://example.org/") == ("http://example.org/", "")


class TestResolvePrefix:

    def test_exact_match(self, namespaces):
        assert resolve_prefix("http://example.org/", namespaces) == "ex"

    def test_no_match(self, namespaces):
        assert resolve_prefix("http://example.org", namespaces) is None
        assert resolve_prefix("http://example.org/", []) is None

    def test_first_entry_wins_on_duplicates(self):
        duplicates = [Namespace("a", "http://example.org/"), Namespace("b", "http://example.org/")]
        assert resolve_prefix("http://example.org/", duplicates) == "a"
        assert resolve_prefix("http://example.org/", list(reversed(duplicates))) == "b"

    def test_default_namespaces(self):
        prefixes = [ns.prefix for ns in default_namespaces()]
        assert prefixes == ["rdf", "rdfs", "xsd", "owl"]
        assert resolve_prefix("http://www.w3.org/2001/XMLSchema#", default_namespaces()) == "xsd"


class TestRenderValue:

    def test_none_renders_empty(self, namespaces):
        assert render_value(None, namespaces, True) == ""
        assert render_value(None, namespaces, False) == ""

    def test_canonical_forms(self):
        assert canonical_form(px.NamedNode("http://example.org/alice")) == "<http://example.org/alice>"
        assert canonical_form(px.Literal("plain")) == '"plain"'
        assert canonical_form(px.Literal("bonjour", language="fr")) == '"bonjour"@fr'
        assert canonical_form(px.Literal("42", datatype=XSD_INTEGER)) == \
            '"42"^^<http://www.w3.org/2001/XMLSchema#integer>'
        assert canonical_form(px.BlankNode("b0")) == "_:b0"

    def test_literal_escaping(self):
        assert canonical_form(px.Literal('say "hi"\n')) == '"say \\"hi\\"\\n"'

    def test_abbreviation_off_is_canonical(self, namespaces, sample_values):
        for value in sample_values:
            assert render_value(value, namespaces, False) == canonical_form(value)
            assert render_value(value, [], False) == canonical_form(value)

    def test_known_namespace_is_abbreviated(self, namespaces):
        assert render_value(px.NamedNode("http://example.org/alice"), namespaces, True) == "ex:alice"
        assert render_value(px.NamedNode("http://www.w3.org/2002/07/owl#Class"), namespaces, True) == "owl:Class"

    def test_unknown_namespace_falls_back(self, namespaces):
        value = px.NamedNode("http://unknown.org/thing")
        assert render_value(value, namespaces, True) == "<http://unknown.org/thing>"

    def test_non_iri_values_never_abbreviated(self, namespaces):
        literal = px.Literal("http://example.org/alice")
        assert render_value(literal, namespaces, True) == '"http://example.org/alice"'
        assert render_value(px.BlankNode("b0"), namespaces, True) == "_:b0"

    def test_typed_literal_datatype_not_abbreviated(self):
        value = px.Literal("42", datatype=XSD_INTEGER)
        assert render_value(value, default_namespaces(), True) == '"42"^^<http://www.w3.org/2001/XMLSchema#integer>'

    def test_prefix_style_iri(self):
        assert render_value(px.NamedNode("ex:s"), [Namespace("ex", "ex:")], True) == "ex:s"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
