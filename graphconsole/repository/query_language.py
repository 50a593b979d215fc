"""Query languages known to the console."""

from enum import Enum
from typing import Optional


class QueryLanguage(Enum):
    """Query languages recognised by the console."""
    SPARQL = "SPARQL"
    SERQL = "SeRQL"

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> Optional["QueryLanguage"]:
        """Look up a language by case-insensitive name, None if unknown."""
        for language in cls:
            if language.value.lower() == name.lower():
                return language
        return None
