
"""
Defines the core data types for the playground session layer.

This module provides the session value, the example catalog entries, the
two-tag evaluation outcome, the module loading states and the exceptions
raised across the playground components.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple, Union


class PlaygroundError(Exception):
    """Base class for all playground failures."""
    pass


class NotReady(PlaygroundError):
    def __init__(self, message: str = "evaluation module is not loaded"):
        super().__init__(message)


class FetchError(PlaygroundError):
    def __init__(self, locator: str, reason: str):
        super().__init__(f"cannot fetch {locator}: {reason}")
        self.locator = locator
        self.reason = reason


class ManifestError(PlaygroundError):
    pass


class ModuleLoadError(PlaygroundError):
    pass


class UnknownOutcomeStatus(PlaygroundError):
    def __init__(self, status: Any):
        super().__init__(f"unknown outcome status: {status!r}")
        self.status = status


# =================================================================
# Catalog
# =================================================================

@dataclass(frozen=True)
class ExampleRef:
    """A named example program; `file` is relative to the examples root."""
    name: str
    file: str


# =================================================================
# Evaluation outcome
# =================================================================

@dataclass(frozen=True)
class Ok:
    value: str
    # Secondary output stream; None when the module does not report one.
    output: Optional[str] = None


@dataclass(frozen=True)
class Err:
    message: str


EvaluationOutcome = Union[Ok, Err]


# =================================================================
# Module loading states
# =================================================================

@dataclass(frozen=True)
class Unloaded:
    pass


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Ready:
    handle: Any = field(compare=False)


@dataclass(frozen=True)
class Failed:
    error: str


ModuleState = Union[Unloaded, Loading, Ready, Failed]


# =================================================================
# Notices
# =================================================================

NOT_READY = "not-ready"
EVALUATION_ERROR = "evaluation-error"
EXAMPLE_ERROR = "example-error"


@dataclass(frozen=True)
class Notice:
    """An interruptive, user-visible message tied to the action that caused it."""
    kind: str
    message: str


# =================================================================
# Session
# =================================================================

@dataclass(frozen=True)
class Session:
    """The state of one playground instance. Replaced wholesale on every change."""
    program: str = ""
    module: ModuleState = field(default_factory=Unloaded)
    examples: Tuple[ExampleRef, ...] = ()
    result: str = ""
    output: str = ""
    selected: Optional[str] = None
    running: bool = False

    @property
    def ready(self) -> bool:
        return isinstance(self.module, Ready)
