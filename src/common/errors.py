"""Exceptions raised by the traffic guidance planner."""


class TGSError(Exception):
    """Base class for planner errors."""


class ExternalServiceError(TGSError):
    """A collaborator service failed or returned nothing usable.

    These are recoverable: the message is shown to the operator, who may
    retry.
    """


class ExternalRouteError(ExternalServiceError):
    """Routing request failed or the response carried no geometry."""


class ExternalLookupError(ExternalServiceError):
    """Place lookup failed or produced no candidates."""


class InvalidRouteGeometry(TGSError, ValueError):
    """Route polyline has fewer than two points."""


class PreconditionNotMet(TGSError):
    """Planner invoked without a lane or without exactly two workzone bounds."""
