"""Exception hierarchy shared by the toolkit."""


class TabularMLError(Exception):
    pass


class InvalidArgumentError(TabularMLError, ValueError):
    """A caller-supplied parameter violates a precondition."""


class InvalidStateError(TabularMLError, RuntimeError):
    """An operation was attempted before a required prior step."""
