"""Whisker error hierarchy.

All whisker-specific errors inherit from WhiskerError for easy catching.
"""


class WhiskerError(Exception):
    """Base error for all whisker operations."""


class ConfigError(WhiskerError):
    """Invalid or missing configuration."""


class TransportError(WhiskerError):
    """Error delivering a payload to connected clients."""


class AcceptedDepsError(WhiskerError):
    """An ``import.meta.hot.accept()`` call could not be lexed.

    Accepted dependencies must be statically known string literals, so
    anything else inside the dependency array (including template
    interpolation) is rejected.

    Attributes:
        pos: Offset into the module source where lexing failed.

    """

    def __init__(self, pos: int) -> None:
        super().__init__(
            "import.meta.hot.accept() can only accept string literals or an "
            "Array of string literals."
        )
        self.pos = pos
