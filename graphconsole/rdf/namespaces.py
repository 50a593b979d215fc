"""
Namespace Utilities for GraphConsole

Namespace entries are kept as an ordered sequence rather than a mapping:
when two entries share a namespace string, the first one in enumeration
order wins the prefix lookup.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from rdflib.namespace import OWL, RDF, RDFS, XSD


@dataclass(frozen=True)
class Namespace:
    """A declared short prefix for a namespace IRI."""
    prefix: str
    name: str

    def __str__(self) -> str:
        return f"{self.prefix} :: {self.name}"


def default_namespaces() -> List[Namespace]:
    """Well-known namespaces installed in newly opened repositories."""
    return [
        Namespace("rdf", str(RDF)),
        Namespace("rdfs", str(RDFS)),
        Namespace("xsd", str(XSD)),
        Namespace("owl", str(OWL)),
    ]


def resolve_prefix(namespace: str, namespaces: Iterable[Namespace]) -> Optional[str]:
    """
    Get the prefix declared for a namespace.

    Args:
        namespace: Full namespace string, compared by exact equality
        namespaces: Known namespaces, scanned in order

    Returns:
        Prefix of the first matching entry, or None
    """
    for ns in namespaces:
        if namespace == ns.name:
            return ns.prefix
    return None
