"""
Console Parameters

Rendering settings read by the query evaluators. Values can be changed
between queries with the 'set' command; they stay fixed while a query
is being rendered.
"""

from typing import Any, Dict


OVERFLOW = "overflow"
TRUNCATE = "truncate"
OVERFLOW_POLICIES = (OVERFLOW, TRUNCATE)

DEFAULT_WIDTH = 80
MIN_WIDTH = 10


class ConsoleParameters:
    """Display width, prefix abbreviation and related rendering switches."""

    def __init__(self, width: int = DEFAULT_WIDTH, show_prefix: bool = True,
                 query_prefix: bool = True, overflow: str = OVERFLOW):
        self.width = width
        self.show_prefix = show_prefix
        self.query_prefix = query_prefix
        self.overflow = overflow

    @classmethod
    def from_config(cls, console_config: Dict[str, Any]) -> "ConsoleParameters":
        params = cls()
        params.set_width(int(console_config.get('width', DEFAULT_WIDTH)))
        params.show_prefix = bool(console_config.get('show_prefix', True))
        params.query_prefix = bool(console_config.get('query_prefix', True))
        params.set_overflow(console_config.get('overflow', OVERFLOW))
        return params

    def get_width(self) -> int:
        return self.width

    def set_width(self, width: int) -> None:
        if width < MIN_WIDTH:
            raise ValueError(f"Width must be at least {MIN_WIDTH}")
        self.width = width

    def is_show_prefix(self) -> bool:
        return self.show_prefix

    def is_query_prefix(self) -> bool:
        return self.query_prefix

    def set_overflow(self, overflow: str) -> None:
        if overflow not in OVERFLOW_POLICIES:
            raise ValueError(f"Overflow policy must be one of: {', '.join(OVERFLOW_POLICIES)}")
        self.overflow = overflow

    def is_truncating(self) -> bool:
        return self.overflow == TRUNCATE

    def as_dict(self) -> Dict[str, Any]:
        return {
            'width': self.width,
            'showprefix': 'on' if self.show_prefix else 'off',
            'queryprefix': 'on' if self.query_prefix else 'off',
            'overflow': self.overflow,
        }
