"""GraphConsole: interactive SPARQL console for pyoxigraph repositories."""

__version__ = "0.1.0"
