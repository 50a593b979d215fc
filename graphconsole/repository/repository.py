"""
Graph Repository

A pyoxigraph store, either in memory or in a data directory, together with
its namespace declarations. On-disk repositories keep their namespaces in
a YAML file next to the store files.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

import pyoxigraph as px
import yaml

from ..rdf.namespaces import Namespace, default_namespaces
from .connection import RepositoryConnection
from .parser_config import ParserConfig
from .repository_errors import RepositoryError

logger = logging.getLogger(__name__)

NAMESPACES_FILE = "namespaces.yaml"


class GraphRepository:
    """
    Repository backed by a pyoxigraph store.

    Call init() before requesting connections and shut_down() when done.
    """

    def __init__(self, data_dir: Optional[str] = None,
                 parser_config: Optional[ParserConfig] = None,
                 namespaces: Optional[Iterable[Namespace]] = None,
                 with_default_namespaces: bool = False):
        self.data_dir = Path(data_dir) if data_dir else None
        self.parser_config = parser_config or ParserConfig()
        self._initial_namespaces = list(namespaces or [])
        self._with_default_namespaces = with_default_namespaces
        self._namespaces: List[Namespace] = []
        self._store: Optional[px.Store] = None

    @property
    def name(self) -> str:
        return str(self.data_dir) if self.data_dir else "memory"

    def is_initialized(self) -> bool:
        return self._store is not None

    def init(self) -> None:
        """
        Open the underlying store.

        Raises:
            RepositoryError: If the data directory cannot be opened
        """
        if self._store is not None:
            return
        try:
            if self.data_dir:
                self.data_dir.mkdir(parents=True, exist_ok=True)
                self._store = px.Store(str(self.data_dir))
            else:
                self._store = px.Store()
        except OSError as e:
            raise RepositoryError(f"Unable to open repository {self.name}: {e}") from e

        stored = self._read_namespaces()
        if stored is not None:
            self._namespaces = stored
        else:
            self._namespaces = default_namespaces() if self._with_default_namespaces else []
            for ns in self._initial_namespaces:
                self._put_namespace(ns.prefix, ns.name)
            self._write_namespaces()
        logger.info(f"Opened repository {self.name} with {len(self._namespaces)} namespaces")

    def shut_down(self) -> None:
        if self._store is None:
            return
        if self.data_dir:
            self._store.flush()
        self._store = None
        logger.info(f"Shut down repository {self.name}")

    def get_connection(self) -> RepositoryConnection:
        """
        Open a new connection.

        Raises:
            RepositoryError: If the repository is not initialized
        """
        if self._store is None:
            raise RepositoryError(f"Repository {self.name} is not initialized")
        return RepositoryConnection(self, self._store, self.parser_config)

    # Namespaces

    def namespaces(self) -> List[Namespace]:
        return list(self._namespaces)

    def set_namespace(self, prefix: str, name: str) -> None:
        self._put_namespace(prefix, name)
        self._write_namespaces()

    def remove_namespace(self, prefix: str) -> None:
        self._namespaces = [ns for ns in self._namespaces if ns.prefix != prefix]
        self._write_namespaces()

    def clear_namespaces(self) -> None:
        self._namespaces = []
        self._write_namespaces()

    def _put_namespace(self, prefix: str, name: str) -> None:
        entry = Namespace(prefix, name)
        for i, ns in enumerate(self._namespaces):
            if ns.prefix == prefix:
                self._namespaces[i] = entry
                return
        self._namespaces.append(entry)

    def _namespaces_file(self) -> Optional[Path]:
        return self.data_dir / NAMESPACES_FILE if self.data_dir else None

    def _read_namespaces(self) -> Optional[List[Namespace]]:
        ns_file = self._namespaces_file()
        if ns_file is None or not ns_file.exists():
            return None
        try:
            with open(ns_file, 'r', encoding='utf-8') as f:
                entries = yaml.safe_load(f) or []
        except yaml.YAMLError as e:
            raise RepositoryError(f"Corrupted namespace file {ns_file}: {e}") from e
        return [Namespace(str(entry['prefix']), str(entry['namespace'])) for entry in entries]

    def _write_namespaces(self) -> None:
        ns_file = self._namespaces_file()
        if ns_file is None:
            return
        entries = [{'prefix': ns.prefix, 'namespace': ns.name} for ns in self._namespaces]
        with open(ns_file, 'w', encoding='utf-8') as f:
            yaml.safe_dump(entries, f, sort_keys=False)

    def __str__(self) -> str:
        return f"GraphRepository(name={self.name}, initialized={self.is_initialized()})"
