"""Error taxonomy for position queries."""


class PositionsError(Exception):
    """Base class for every error raised by this package."""


class UsageError(PositionsError):
    """Bad or missing input from the caller (address, network name, env value)."""


class RemoteCallError(PositionsError):
    """The node could not be reached or answered with an error."""


class DecodeError(PositionsError):
    """A contract reverted or returned data that does not fit its ABI."""
