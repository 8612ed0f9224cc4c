"""
Domain exceptions raised by the transportation services.

Routes translate these into HTTP errors; an empty result is never one of them.
"""


class TransportError(Exception):
    """Base class for transportation errors."""


class NotFoundError(TransportError):
    """A referenced traveller does not exist or has the wrong role."""


class InvalidInputError(TransportError):
    """Options or payload values are contradictory or out of range."""
