"""Exceptions raised by the diagram core."""


class VoronoiError(Exception):
    """Base class for all diagram errors."""


class MalformedInputError(VoronoiError, ValueError):
    """Rejected construction input: bad domain, too few distinct sites."""


class PreconditionError(VoronoiError, RuntimeError):
    """An operation was called in a state that does not allow it."""


class EndPointAlreadySetError(PreconditionError):
    """The end point of a bisector edge was set twice."""


class DegenerateRegionError(PreconditionError):
    """A region's vertex loop has fewer than three vertices."""
