"""Base exception for acommit."""


class AcommitError(Exception):
    """Base class for errors that abort an acommit run."""

    pass
