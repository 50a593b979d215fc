"""
Parser Configuration

Controls which terms a connection rejects while results are being read.
"""

import re
from dataclasses import dataclass

import pyoxigraph as px
from rdflib import Literal, URIRef

from .repository_errors import QueryEvaluationError

_LANGUAGE_TAG = re.compile(r'^[a-zA-Z]{1,8}(-[a-zA-Z0-9]{1,8})*$')
_IRI_SCHEME = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.\-]*:')


@dataclass(frozen=True)
class ParserConfig:
    """Term verification settings for a connection."""
    verify_datatype_values: bool = False
    verify_language_tags: bool = True
    verify_relative_uris: bool = True

    @property
    def is_lenient(self) -> bool:
        return not (self.verify_datatype_values or self.verify_language_tags or self.verify_relative_uris)

    def verify(self, term) -> None:
        """
        Check a term against the enabled verifications.

        pyoxigraph only builds NamedNode values from absolute IRIs, so store
        results always pass the relative IRI check; it still rejects a
        NamedNode whose value has no scheme.

        Args:
            term: pyoxigraph term, or None for an unbound value

        Raises:
            QueryEvaluationError: If the term fails an enabled verification
        """
        if isinstance(term, px.NamedNode):
            if self.verify_relative_uris and not _IRI_SCHEME.match(term.value):
                raise QueryEvaluationError(f"Relative IRI not allowed: {term.value}")
        elif isinstance(term, px.Literal):
            if self.verify_language_tags and term.language and not _LANGUAGE_TAG.match(term.language):
                raise QueryEvaluationError(f"Invalid language tag: {term.language}")
            if self.verify_datatype_values and not term.language:
                literal = Literal(term.value, datatype=URIRef(term.datatype.value))
                if literal.ill_typed:
                    raise QueryEvaluationError(f"Invalid value for datatype: {term}")
        elif isinstance(term, px.Triple):
            self.verify(term.subject)
            self.verify(term.predicate)
            self.verify(term.object)


NON_VERIFYING_PARSER_CONFIG = ParserConfig(
    verify_datatype_values=False,
    verify_language_tags=False,
    verify_relative_uris=False,
)
