"""
Gateway to the external evaluation module.

The module is imported lazily and exactly once. It must expose
`exec(program) -> ExecResult`, where `ExecResult.status` is one of the
module's `ExecResultStatus.Ok` / `ExecResultStatus.Err` and
`ExecResult.get_value()` yields the text payload. An optional
`ExecResult.get_output()` provides a secondary output stream.
"""

import asyncio
import importlib
import inspect
from typing import Any, Awaitable, Callable, Optional, Union

from playground.playground_datatypes import (
    Ok, Err, EvaluationOutcome, ModuleState,
    Unloaded, Loading, Ready, Failed,
    NotReady, ModuleLoadError, UnknownOutcomeStatus,
)

Loader = Callable[[], Union[Any, Awaitable[Any]]]

OK_TAG = "Ok"
ERR_TAG = "Err"


def _status_tag(status: Any, module: Any) -> str:
    statuses = getattr(module, "ExecResultStatus", None)
    if statuses is not None:
        if status == getattr(statuses, OK_TAG, object()):
            return OK_TAG
        if status == getattr(statuses, ERR_TAG, object()):
            return ERR_TAG
        raise UnknownOutcomeStatus(status)
    # Modules without a status enum report the tag by name.
    tag = getattr(status, "name", status)
    if tag in (OK_TAG, ERR_TAG):
        return tag
    raise UnknownOutcomeStatus(status)


def to_outcome(result: Any, module: Any = None) -> EvaluationOutcome:
    """Convert a module's exec result into an Ok/Err outcome without touching its payload."""
    if isinstance(result, (Ok, Err)):
        return result
    tag = _status_tag(result.status, module)
    value = result.get_value()
    if tag == OK_TAG:
        get_output = getattr(result, "get_output", None)
        output = get_output() if callable(get_output) else None
        return Ok(value, output)
    return Err(value)


class EvaluationGateway:
    """Loads the evaluation module on demand and invokes it."""

    def __init__(self, module_name: Optional[str] = None, loader: Optional[Loader] = None):
        if module_name is None and loader is None:
            raise ValueError("EvaluationGateway needs a module name or a loader")
        self.module_name = module_name
        self._loader = loader
        self._state: ModuleState = Unloaded()
        self._load_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> ModuleState:
        return self._state

    @property
    def handle(self) -> Any:
        match self._state:
            case Ready(handle=handle):
                return handle
            case _:
                raise NotReady()

    async def _acquire(self) -> Any:
        if self._loader is not None:
            module = self._loader()
            if inspect.isawaitable(module):
                module = await module
        else:
            module = await asyncio.to_thread(importlib.import_module, self.module_name)
        if not callable(getattr(module, "exec", None)):
            raise ModuleLoadError(f"evaluation module {self.module_name or module!r} has no exec()")
        return module

    async def _load(self) -> ModuleState:
        try:
            module = await self._acquire()
        except Exception as e:
            self._state = Failed(f"{type(e).__name__}: {e}")
        else:
            self._state = Ready(module)
        return self._state

    async def load(self) -> ModuleState:
        """
        Acquire the module. Concurrent callers share one in-flight load.
        Never raises: a failure is reported as the Failed state.
        """
        if isinstance(self._state, Ready):
            return self._state
        if self._load_task is None or self._load_task.done():
            self._state = Loading()
            self._load_task = asyncio.ensure_future(self._load())
        return await asyncio.shield(self._load_task)

    async def invoke(self, program: str) -> EvaluationOutcome:
        module = self.handle
        result = await asyncio.to_thread(module.exec, program)
        return to_outcome(result, module)
