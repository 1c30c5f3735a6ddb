"""Exceptions raised by the theme engine."""

from typing import List, Optional, Any


class ThemeForgeError(Exception):
    """Base class for theme-forge errors."""


class TokenResolutionError(ThemeForgeError):
    """Raised when a token reference cannot be resolved to a literal."""

    def __init__(self, message: str, path: str, chain: Optional[List[str]] = None):
        self.path = path
        self.chain = list(chain or [])
        super().__init__(message)


class UnresolvedTokenError(TokenResolutionError):
    """A reference points at a path that does not exist or is not a leaf."""


class TokenCycleError(TokenResolutionError):
    """A reference chain revisits a path or exceeds the resolution bound."""


class ThemeValidationError(ThemeForgeError):
    """Raised when a caller asks for a theme that fails validation."""

    def __init__(self, message: str, issues: Optional[List[Any]] = None):
        self.issues = list(issues or [])
        super().__init__(message)
