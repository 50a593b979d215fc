#!/usr/bin/env python3
"""
Test suite for term verification by ParserConfig.
"""

import sys
from pathlib import Path

import pyoxigraph as px
import pytest

# Add the parent directory to Python path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from graphconsole.repository.parser_config import NON_VERIFYING_PARSER_CONFIG, ParserConfig
from graphconsole.repository.repository_errors import QueryEvaluationError

XSD_INTEGER = px.NamedNode("http://www.w3.org/2001/XMLSchema#integer")


class TestParserConfig:

    def test_defaults(self):
        config = ParserConfig()
        assert config.verify_datatype_values is False
        assert config.verify_language_tags is True
        assert config.verify_relative_uris is True
        assert not config.is_lenient

    def test_non_verifying_config_is_lenient(self):
        assert NON_VERIFYING_PARSER_CONFIG.is_lenient
        assert not NON_VERIFYING_PARSER_CONFIG.verify_datatype_values
        assert not NON_VERIFYING_PARSER_CONFIG.verify_language_tags
        assert not NON_VERIFYING_PARSER_CONFIG.verify_relative_uris

    def test_ill_typed_literal_rejected_when_verifying(self):
        config = ParserConfig(verify_datatype_values=True)
        with pytest.raises(QueryEvaluationError):
            config.verify(px.Literal("abc", datatype=XSD_INTEGER))

    def test_well_typed_literal_accepted(self):
        config = ParserConfig(verify_datatype_values=True)
        config.verify(px.Literal("42", datatype=XSD_INTEGER))
        config.verify(px.Literal("plain"))
        config.verify(px.Literal("hello", language="en"))

    def test_ill_typed_literal_accepted_when_lenient(self):
        NON_VERIFYING_PARSER_CONFIG.verify(px.Literal("abc", datatype=XSD_INTEGER))
        ParserConfig().verify(px.Literal("abc", datatype=XSD_INTEGER))

    def test_iris_and_blank_nodes(self):
        config = ParserConfig(verify_datatype_values=True)
        config.verify(px.NamedNode("http://example.org/s"))
        config.verify(px.NamedNode("urn:x"))
        config.verify(px.BlankNode("b1"))
        config.verify(None)

    def test_relative_iris_never_reach_verification(self):
        with pytest.raises(ValueError):
            px.NamedNode("relative/path")
        config = ParserConfig(verify_relative_uris=True)
        config.verify(px.NamedNode("mailto:alice@example.org"))
        config.verify(px.NamedNode("tag:example.org,2024:x"))

    def test_triple_terms_checked(self):
        config = ParserConfig(verify_datatype_values=True)
        triple = px.Triple(
            px.NamedNode("http://example.org/s"),
            px.NamedNode("http://example.org/p"),
            px.Literal("abc", datatype=XSD_INTEGER),
        )
        with pytest.raises(QueryEvaluationError):
            config.verify(triple)
        NON_VERIFYING_PARSER_CONFIG.verify(triple)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
