"""Domain exceptions for downtime management and SLI reporting.

Every failure surfaced to callers is one of these types. The API layer maps
them to HTTP status codes; the original cause is always chained with
``raise ... from``.
"""


class SliReportingError(Exception):
    """Base exception for all SLI reporting failures."""

    pass


class ValidationError(SliReportingError, ValueError):
    """Input is malformed or violates a downtime window invariant."""

    pass


class ExternalIdConflictError(ValidationError):
    """The external ID is already used by a different downtime window."""

    pass


class NotFoundError(SliReportingError):
    """The requested downtime window does not exist."""

    pass


class UpstreamError(SliReportingError):
    """A metrics or cluster fact backend failed or returned an unexpected shape."""

    pass


class InternalError(SliReportingError):
    """The persistence layer returned data that violates stored invariants."""

    pass
