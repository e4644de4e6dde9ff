import asyncio
import sys
import types

import pytest

from playground.playground_datatypes import (
    Ok, Err, Unloaded, Ready, Failed, NotReady, UnknownOutcomeStatus,
)
from playground.playground_gateway import EvaluationGateway, to_outcome

from conftest import ExecResult, ExecResultStatus, make_module


def test_gateway_requires_module_name_or_loader():
    with pytest.raises(ValueError):
        EvaluationGateway()


@pytest.mark.asyncio
async def test_invoke_before_load_raises_not_ready():
    gw = EvaluationGateway(loader=lambda: make_module(lambda p: ('ok', p)))
    assert gw.state == Unloaded()
    with pytest.raises(NotReady):
        await gw.invoke("1")


@pytest.mark.asyncio
async def test_load_imports_module_by_name(monkeypatch):
    fake = make_module(lambda p: ('ok', f"ran {p}"))
    monkeypatch.setitem(sys.modules, "fake_rufus_wasm", fake)

    gw = EvaluationGateway("fake_rufus_wasm")
    state = await gw.load()
    assert isinstance(state, Ready)
    assert gw.handle is fake
    assert await gw.invoke("x") == Ok("ran x")


@pytest.mark.asyncio
async def test_load_failure_is_reported_not_raised():
    gw = EvaluationGateway("definitely_not_an_installed_module_xyz")
    state = await gw.load()
    assert isinstance(state, Failed)
    assert "ModuleNotFoundError" in state.error
    with pytest.raises(NotReady):
        gw.handle


@pytest.mark.asyncio
async def test_module_without_exec_fails_to_load():
    gw = EvaluationGateway(loader=lambda: types.SimpleNamespace())
    state = await gw.load()
    assert isinstance(state, Failed)
    assert "has no exec()" in state.error


@pytest.mark.asyncio
async def test_failed_load_can_be_retried():
    attempts = []
    module = make_module(lambda p: ('ok', p))

    def loader():
        attempts.append(1)
        if len(attempts) == 1:
            raise OSError("network down")
        return module

    gw = EvaluationGateway(loader=loader)
    assert isinstance(await gw.load(), Failed)
    assert isinstance(await gw.load(), Ready)
    assert len(attempts) == 2


@pytest.mark.asyncio
async def test_concurrent_loads_share_one_fetch():
    attempts = []
    module = make_module(lambda p: ('ok', p))

    async def loader():
        attempts.append(1)
        await asyncio.sleep(0.01)
        return module

    gw = EvaluationGateway(loader=loader)
    first, second = await asyncio.gather(gw.load(), gw.load())
    assert first == second == Ready(module)
    await gw.load()
    assert attempts == [1]


@pytest.mark.asyncio
async def test_invoke_returns_outcome_unchanged():
    message = "  ParseError: expected `->`\n  (line 1, col 5)  "
    gw = EvaluationGateway(loader=lambda: make_module(lambda p: ('err', message)))
    await gw.load()
    assert await gw.invoke("fun x") == Err(message)


def test_to_outcome_with_status_enum():
    module = make_module(lambda p: ('ok', p))
    assert to_outcome(ExecResult(ExecResultStatus.Ok, "1"), module) == Ok("1")
    assert to_outcome(ExecResult(ExecResultStatus.Err, "bad"), module) == Err("bad")


def test_to_outcome_without_status_enum_uses_tag_names():
    assert to_outcome(ExecResult("Ok", "1")) == Ok("1")
    assert to_outcome(ExecResult(ExecResultStatus.Err, "bad")) == Err("bad")


def test_to_outcome_passes_outcomes_through():
    assert to_outcome(Ok("v", "o")) == Ok("v", "o")
    assert to_outcome(Err("m")) == Err("m")


def test_to_outcome_rejects_unknown_status():
    module = make_module(lambda p: ('ok', p))
    with pytest.raises(UnknownOutcomeStatus):
        to_outcome(ExecResult("Pending", ""), module)
    with pytest.raises(UnknownOutcomeStatus):
        to_outcome(ExecResult(2, ""))
