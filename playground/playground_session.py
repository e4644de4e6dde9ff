"""
Pure session transitions.

Every user action and every asynchronous completion is an event. `apply`
maps the current session and one event to the next session together with
the notices and console effects the transition raises. Nothing here
performs I/O.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Tuple, Union
from typing import assert_never

from playground.playground_datatypes import (
    Session, ExampleRef, Notice, Ok, Err, EvaluationOutcome,
    Loading, Ready, Failed,
    NOT_READY, EVALUATION_ERROR, EXAMPLE_ERROR,
)

NOT_READY_MESSAGE = "Module not loaded!"
EXAMPLE_ERROR_MESSAGE = "Cannot load example. See console for details."


# ===================================================================
# Events
# ===================================================================

@dataclass(frozen=True)
class ProgramEdited:
    text: str

@dataclass(frozen=True)
class ModuleLoading:
    pass

@dataclass(frozen=True)
class ModuleLoaded:
    handle: Any = field(compare=False)

@dataclass(frozen=True)
class ModuleLoadFailed:
    error: str

@dataclass(frozen=True)
class CatalogLoaded:
    examples: Tuple[ExampleRef, ...]

@dataclass(frozen=True)
class CatalogFailed:
    error: str

@dataclass(frozen=True)
class ExampleLoaded:
    ref: ExampleRef
    text: str

@dataclass(frozen=True)
class ExampleFailed:
    ref: ExampleRef
    error: str

@dataclass(frozen=True)
class RunStarted:
    pass

@dataclass(frozen=True)
class RunRejected:
    pass

@dataclass(frozen=True)
class RunCompleted:
    outcome: EvaluationOutcome

@dataclass(frozen=True)
class RunFailed:
    error: str


Event = Union[
    ProgramEdited, ModuleLoading, ModuleLoaded, ModuleLoadFailed,
    CatalogLoaded, CatalogFailed, ExampleLoaded, ExampleFailed,
    RunStarted, RunRejected, RunCompleted, RunFailed,
]


@dataclass
class Transition:
    """The next session plus what the transition asks the host to surface."""
    session: Session
    notices: List[Notice] = field(default_factory=list)
    effects: List[Dict] = field(default_factory=list)


def diagnostic(operation: str, message: str) -> Dict:
    return {'topics': ['stderr'], 'message': f"Unexpected error in {operation}. [Message: {message}]"}


def _apply_outcome(session: Session, outcome: EvaluationOutcome) -> Transition:
    done = replace(session, running=False)
    match outcome:
        case Ok(value=value, output=None):
            return Transition(replace(done, result=value))
        case Ok(value=value, output=output):
            return Transition(replace(done, result=value, output=output))
        case Err(message=message):
            return Transition(done, notices=[Notice(EVALUATION_ERROR, message)])
        case _:
            assert_never(outcome)


def apply(session: Session, event: Event) -> Transition:
    """Compute the transition for one event."""
    match event:
        case ProgramEdited(text=text):
            return Transition(replace(session, program=text))

        case ModuleLoading():
            if session.ready:
                return Transition(session)
            return Transition(replace(session, module=Loading()))

        case ModuleLoaded(handle=handle):
            # A loaded module is never replaced.
            if session.ready:
                return Transition(session)
            return Transition(replace(session, module=Ready(handle)))

        case ModuleLoadFailed(error=error):
            if session.ready:
                return Transition(session)
            return Transition(
                replace(session, module=Failed(error)),
                effects=[diagnostic("loadModule", error)],
            )

        case CatalogLoaded(examples=examples):
            return Transition(replace(session, examples=tuple(examples)))

        case CatalogFailed(error=error):
            return Transition(session, effects=[diagnostic("loadExamples", error)])

        case ExampleLoaded(ref=ref, text=text):
            return Transition(replace(session, program=text, selected=ref.file))

        case ExampleFailed(error=error):
            return Transition(
                session,
                notices=[Notice(EXAMPLE_ERROR, EXAMPLE_ERROR_MESSAGE)],
                effects=[diagnostic("loadExample", error)],
            )

        case RunStarted():
            return Transition(replace(session, running=True))

        case RunRejected():
            return Transition(
                replace(session, running=False),
                notices=[Notice(NOT_READY, NOT_READY_MESSAGE)],
            )

        case RunCompleted(outcome=outcome):
            return _apply_outcome(session, outcome)

        case RunFailed(error=error):
            # The module itself crashed; surface it like an evaluation error.
            return Transition(
                replace(session, running=False),
                notices=[Notice(EVALUATION_ERROR, error)],
                effects=[diagnostic("run", error)],
            )

        case _:
            assert_never(event)
