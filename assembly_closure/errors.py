"""Exceptions raised by assembly-closure."""


class ClosureError(Exception):
    """Base class for assembly-closure errors."""

    pass


class NotAContainerError(ClosureError):
    """Raised by a reader when a file is not a readable managed module.

    Covers files that are not PE images at all, native images without a CLI
    header, and images whose metadata has no Assembly row.
    """

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class UnreadableModuleError(ClosureError):
    """Raised when an input module does not expose a retrievable name.

    Only inputs trigger this (the entry point, explicit dependencies and
    platform directory contents). Discovered references never do.
    """

    def __init__(self, path: str, reason: str):
        super().__init__(f"Unable to read module name from '{path}': {reason}")
        self.path = path
        self.reason = reason
