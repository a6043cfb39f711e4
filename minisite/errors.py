from __future__ import annotations


class MinisiteError(Exception):
    """Base class for every fatal build error."""


class ConfigurationError(MinisiteError):
    pass


class RenderError(MinisiteError):
    pass


class ContentError(MinisiteError):
    pass


class IndexOrderError(MinisiteError, ValueError):
    pass


class PublishedDateError(MinisiteError, ValueError):
    pass
