# network/exceptions.py


class GraphError(Exception):
    """Base class for everything the graph engine raises."""


class ConfigurationError(GraphError):
    """Raised while building a graph from descriptors (or parsing them)."""


class EvaluationError(GraphError):
    """Raised by compute(); the graph itself stays usable afterwards."""
