"""Mutable state of an interactive console session."""

from typing import Optional

from ..repository.repository import GraphRepository


class ConsoleState:
    """Holds the currently open repository, if any."""

    def __init__(self, repository: Optional[GraphRepository] = None):
        self.repository = repository

    def get_repository(self) -> Optional[GraphRepository]:
        return self.repository

    def set_repository(self, repository: Optional[GraphRepository]) -> None:
        self.repository = repository

    def is_open(self) -> bool:
        return self.repository is not None
