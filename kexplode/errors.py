"""Exception hierarchy for kexplode.

Library code raises these; only the CLI turns them into exit codes.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path


class KexplodeError(Exception):
    """Base exception for all application-specific errors."""


class ConfigLoadError(KexplodeError):
    """Raised when a kubeconfig file cannot be read or parsed."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"unable to load kubeconfig {str(self.path)!r}: {reason}")


class NoContextsError(KexplodeError):
    """Raised when the loaded kubeconfig holds no contexts at all."""

    def __init__(self) -> None:
        super().__init__("no contexts found")


class UsageError(KexplodeError):
    """Raised when neither context names nor --all were given."""


class ContextNotFoundError(KexplodeError):
    """Raised when explicitly requested contexts are missing from the document."""

    def __init__(self, names: list[str]) -> None:
        self.names = list(names)
        quoted = ", ".join(repr(n) for n in self.names)
        noun = "context" if len(self.names) == 1 else "contexts"
        super().__init__(f"could not find {noun} {quoted}")


class ReferenceKind(StrEnum):
    """Which link of a context failed to resolve."""

    CONTEXT = "context"
    CLUSTER = "cluster"
    AUTHINFO = "authinfo"


class ReferenceNotFoundError(KexplodeError):
    """Raised when a context, or an entry it references, is absent."""

    def __init__(self, kind: ReferenceKind, name: str, context: str = "") -> None:
        self.kind = kind
        self.name = name
        self.context = context
        message = f"cannot find {kind.value} {name!r}"
        if context and kind != ReferenceKind.CONTEXT:
            message += f" referenced by context {context!r}"
        super().__init__(message)


class DestinationError(KexplodeError):
    """Raised when an output file cannot be inspected or written."""

    def __init__(self, path: Path | str, action: str, reason: str) -> None:
        self.path = Path(path)
        super().__init__(f"unable to {action} file {str(self.path)!r}: {reason}")
