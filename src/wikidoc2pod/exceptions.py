"""Custom exceptions for wikidoc2pod."""


class Wikidoc2podError(Exception):
    """Base exception for wikidoc2pod operations."""


class FilterError(Wikidoc2podError):
    """Error while extracting wikidoc from a source file."""


class DispatchTableError(Wikidoc2podError):
    """Renderer tables do not cover every node kind."""
