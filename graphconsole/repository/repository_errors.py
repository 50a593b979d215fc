"""
Repository Errors

Typed failures raised by repositories, connections and query evaluation.
"""


class GraphConsoleError(Exception):
    """Base class for GraphConsole errors."""
    pass


class RepositoryError(GraphConsoleError):
    """Raised when the repository or a connection cannot be used."""
    pass


class UnsupportedQueryLanguageError(GraphConsoleError):
    """Raised when a query language cannot be executed by the repository."""
    pass


class MalformedQueryError(GraphConsoleError):
    """Raised when a query cannot be parsed or has the wrong query form."""
    pass


class QueryEvaluationError(GraphConsoleError):
    """Raised when evaluation fails while results are being produced."""
    pass
