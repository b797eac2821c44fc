"""Error taxonomy for the question → SQL → answer pipeline."""


class DataAgentError(Exception):
    """Base class for failures that abort a query request."""


class CatalogError(DataAgentError):
    """The schema catalog could not be read."""


class GenerationError(DataAgentError):
    """The language model could not produce a SQL statement."""


class ExecutionError(DataAgentError):
    """The database rejected or failed the generated statement."""


class QueryTimeoutError(DataAgentError):
    """The generated statement did not finish within the deadline."""
