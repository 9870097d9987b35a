class EmitterError(Exception):
    """Base exception for the syncemit package."""


class InvalidArgument(EmitterError, TypeError, ValueError):
    """Raised when an emitter operation receives an unusable argument.

    Covers non-callable listeners and invalid max-listener bounds. Subclasses both
    ``TypeError`` and ``ValueError`` so callers can catch the builtin category they expect.
    """
