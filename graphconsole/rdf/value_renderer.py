"""
Value Rendering for GraphConsole

Turns RDF terms produced by query results into display strings. IRIs can be
abbreviated to ``prefix:localName`` when their namespace is known; every
other term is shown in N-Triples syntax.
"""

from typing import Iterable, Optional, Tuple, Union

import pyoxigraph as px

from .namespaces import Namespace, resolve_prefix

Value = Union[px.NamedNode, px.BlankNode, px.Literal]


def split_iri(iri: str) -> Tuple[str, str]:
    """
    Split an IRI into namespace and local name.

    The local name starts after the last '#', or failing that the last '/',
    or failing that the last ':'. An IRI without any of these is all
    namespace.

    Returns:
        Tuple of (namespace, local_name)
    """
    index = iri.rfind('#')
    if index < 0:
        index = iri.rfind('/')
    if index < 0:
        index = iri.rfind(':')
    if index < 0:
        return iri, ""
    return iri[:index + 1], iri[index + 1:]


def canonical_form(value: Value) -> str:
    """N-Triples representation of a term: <iri>, _:id or a quoted literal."""
    return str(value)


def render_value(value: Optional[Value], namespaces: Iterable[Namespace], abbreviate: bool) -> str:
    """
    Get the display string for a value.

    Args:
        value: Term to render, None for an unbound variable
        namespaces: Known namespaces
        abbreviate: Whether IRIs in a known namespace use their prefix

    Returns:
        Display string, empty for None
    """
    if value is None:
        return ""
    if abbreviate and isinstance(value, px.NamedNode):
        namespace, local_name = split_iri(value.value)
        prefix = resolve_prefix(namespace, namespaces)
        if prefix is not None:
            return f"{prefix}:{local_name}"
    return canonical_form(value)
