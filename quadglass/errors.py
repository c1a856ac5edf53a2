# quadglass/errors.py


class QuadglassError(Exception):
    """Base class for every failure raised by quadglass."""


class InvalidInputError(QuadglassError, ValueError):
    """Source grid is empty or ragged."""


class NoMoreRefinableNodesError(QuadglassError, RuntimeError):
    """Every remaining leaf is too small to split."""

    def __init__(self, msg: str = "no more nodes to refine"):
        super().__init__(msg)


class DecodeError(QuadglassError, OSError):
    """Image could not be opened or decoded."""


class EncodeError(QuadglassError, OSError):
    """Image or animation could not be written."""
