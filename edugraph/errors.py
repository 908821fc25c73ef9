"""Exception types raised at the edugraph call boundaries."""


class EduGraphError(Exception):
    """Base class for edugraph errors."""


class InvalidParameterError(EduGraphError, ValueError):
    """A numeric or structural parameter is outside its accepted range."""


class InvalidReferenceError(EduGraphError, ValueError):
    """An edge or lookup names a node id that does not exist."""
