import asyncio
import datetime
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass

import pytest

from asyncresults.errors import EmptyResult
from asyncresults.results import (
    LazyResult,
    Result,
    ResultPromise,
    ResultState,
    ResultStatus,
)


class CustomError(Exception):
    def __init__(self, ident):
        super().__init__(f"custom error {ident}")
        self.ident = ident


@dataclass(frozen=True)
class Fail:
    ident: int


IDLE = object()
SHARED_OBJECT = ["shared", "object"]
VALUES = [123456789, "hello world", None, SHARED_OBJECT]
OUTCOMES = [*VALUES, Fail(123456789)]


def new_pair():
    promise = ResultPromise()
    return promise, promise.get_result()


def as_function(outcome):
    def func():
        if isinstance(outcome, Fail):
            raise CustomError(outcome.ident)
        return outcome

    return func


def settle(promise, outcome):
    if isinstance(outcome, Fail):
        promise.set_exception(CustomError(outcome.ident))
    elif outcome is not IDLE:
        promise.set_result(outcome)


def expected_status(outcome):
    if outcome is IDLE:
        return ResultStatus.IDLE
    if isinstance(outcome, Fail):
        return ResultStatus.EXCEPTION
    return ResultStatus.VALUE


def check_get(result, outcome):
    if isinstance(outcome, Fail):
        with pytest.raises(CustomError) as info:
            result.get()
        assert info.value.ident == outcome.ident
    else:
        value = result.get()
        assert value == outcome
        assert (value is SHARED_OBJECT) == (outcome is SHARED_OBJECT)
    assert not result


def check_ready(result, outcome):
    assert result.status() is expected_status(outcome)
    check_get(result, outcome)


async def check_await(awaitable, outcome):
    if isinstance(outcome, Fail):
        with pytest.raises(CustomError) as info:
            await awaitable
        assert info.value.ident == outcome.ident
    else:
        assert await awaitable == outcome


def produce_at(deadline, action):
    def run():
        while (remaining := deadline - time.monotonic()) > 0:
            time.sleep(remaining)
        action()

    thread = threading.Thread(target=run)
    thread.start()
    return thread


@contextmanager
def arranged(outcome, delay):
    """Yield a result and the time it is set: now, or after *delay* on another thread."""
    promise, result = new_pair()
    deadline = time.monotonic() + delay
    thread = None
    if delay:
        thread = produce_at(deadline, lambda: settle(promise, outcome))
    else:
        settle(promise, outcome)
    try:
        yield result, deadline
    finally:
        if thread is not None:
            thread.join()


def submit(func):
    promise, result = new_pair()
    threading.Thread(target=promise.set_from_function, args=(func,)).start()
    return result


def _wait(result):
    result.wait()
    return result.status()


WAITERS = {
    "wait": _wait,
    "wait_for": lambda r: r.wait_for(10),
    "wait_until": lambda r: r.wait_until(time.monotonic() + 10),
}


# constructor


def test_default_result_is_empty():
    assert not Result()


def test_promise_result_is_idle():
    _, result = new_pair()
    assert result
    assert result.status() is ResultStatus.IDLE


@pytest.mark.parametrize(
    "call",
    [
        lambda r: r.status(),
        lambda r: r.wait(),
        lambda r: r.wait_for(1),
        lambda r: r.wait_until(time.monotonic() + 10),
        lambda r: r.get(),
        lambda r: r.resolve(),
    ],
)
def test_empty_result_raises(call):
    with pytest.raises(EmptyResult):
        call(Result())


# status


@pytest.mark.parametrize("outcome", OUTCOMES)
def test_status_from_function(outcome):
    promise, result = new_pair()
    promise.set_from_function(as_function(outcome))
    assert result.status() is expected_status(outcome)


def test_status_many_calls():
    with arranged(5, 0) as (result, _):
        assert [result.status() for _ in range(10)] == [ResultStatus.VALUE] * 10


# get


@pytest.mark.parametrize("outcome", OUTCOMES)
def test_get_blocks_until_set(outcome):
    with arranged(outcome, 0.15) as (result, deadline):
        check_get(result, outcome)
        now = time.monotonic()
        assert deadline <= now < deadline + 1


@pytest.mark.parametrize("outcome", OUTCOMES)
def test_get_ready_returns_immediately(outcome):
    with arranged(outcome, 0) as (result, _):
        before = time.monotonic()
        check_ready(result, outcome)
        assert time.monotonic() - before <= 0.05


# wait, wait_for, wait_until


@pytest.mark.parametrize("name", list(WAITERS))
@pytest.mark.parametrize("outcome", OUTCOMES)
def test_waiting_blocks_until_set(name, outcome):
    with arranged(outcome, 0.15) as (result, deadline):
        status = WAITERS[name](result)
        now = time.monotonic()
        assert status is expected_status(outcome)
        assert deadline <= now < deadline + 1
        check_ready(result, outcome)


@pytest.mark.parametrize("name", list(WAITERS))
@pytest.mark.parametrize("outcome", OUTCOMES)
def test_waiting_on_ready_returns_immediately(name, outcome):
    with arranged(outcome, 0) as (result, _):
        before = time.monotonic()
        status = WAITERS[name](result)
        assert time.monotonic() - before <= 0.05
        assert status is expected_status(outcome)
        check_ready(result, outcome)


def test_wait_many_calls():
    with arranged("done", 0.05) as (result, _):
        for _ in range(10):
            result.wait()
        check_ready(result, "done")


def test_wait_for_timeout_returns_idle():
    _, result = new_pair()
    before = time.monotonic()
    status = result.wait_for(datetime.timedelta(milliseconds=50))
    assert status is ResultStatus.IDLE
    assert time.monotonic() - before >= 0.045


def test_wait_for_many_calls():
    with arranged(2, 0.15) as (result, _):
        statuses = [result.wait_for(0.01) for _ in range(10)]
    assert set(statuses) <= {ResultStatus.IDLE, ResultStatus.VALUE}
    assert result.wait_for(0.01) is ResultStatus.VALUE


@pytest.mark.parametrize("outcome", [IDLE, 3, Fail(4)])
def test_wait_until_past_deadline_is_status(outcome):
    promise, result = new_pair()
    if outcome is not IDLE:
        promise.set_from_function(as_function(outcome))
    now = time.monotonic()
    time.sleep(0.005)
    assert result.wait_until(now) is expected_status(outcome)


def test_wait_until_timeout_returns_idle():
    _, result = new_pair()
    later = time.monotonic() + 0.05
    assert result.wait_until(later) is ResultStatus.IDLE
    assert time.monotonic() >= later - 0.005


def test_wait_until_accepts_datetime():
    _, result = new_pair()
    later = datetime.datetime.now() + datetime.timedelta(milliseconds=50)
    assert result.wait_until(later) is ResultStatus.IDLE
    assert datetime.datetime.now() >= later - datetime.timedelta(milliseconds=5)


# promise and state


def test_promise_get_result_twice_raises():
    promise, _ = new_pair()
    with pytest.raises(RuntimeError):
        promise.get_result()


def test_promise_set_twice_raises():
    promise, result = new_pair()
    promise.set_result(1)
    with pytest.raises(EmptyResult):
        promise.set_result(2)
    assert result.get() == 1


def test_state_set_twice_raises():
    state = ResultState()
    state.set_result(1)
    with pytest.raises(RuntimeError):
        state.set_exception(CustomError(1))
    assert state.get() == 1


def test_state_set_exception_none_raises():
    with pytest.raises(ValueError):
        ResultState().set_exception(None)


def test_state_callback_runs_on_set():
    state = ResultState()
    calls = []
    state.add_done_callback(lambda: calls.append(state.status()))
    assert calls == []
    state.set_result(0)
    assert calls == [ResultStatus.VALUE]


# await and resolve


@pytest.mark.asyncio
@pytest.mark.parametrize("delay", [0, 0.05])
@pytest.mark.parametrize("outcome", OUTCOMES)
async def test_await(outcome, delay):
    with arranged(outcome, delay) as (result, _):
        await check_await(result, outcome)
        assert not result


@pytest.mark.asyncio
async def test_await_empty_raises():
    with pytest.raises(EmptyResult):
        await Result()


@pytest.mark.asyncio
@pytest.mark.parametrize("delay", [0, 0.05])
@pytest.mark.parametrize("outcome", OUTCOMES)
async def test_resolve(outcome, delay):
    with arranged(outcome, delay) as (result, _):
        done = await result.resolve()
        assert not result
        check_ready(done, outcome)


# coroutines


async def lazy_recursive(depth, max_depth, outcome):
    if depth < max_depth:
        return await LazyResult(lazy_recursive(depth + 1, max_depth, outcome))
    await asyncio.sleep(0.01)
    return as_function(outcome)()


@pytest.mark.parametrize("outcome", [*VALUES, Fail(1234)])
def test_lazy_recursive(outcome):
    result = LazyResult(lazy_recursive(0, 20, outcome)).run()
    result.wait()
    check_ready(result, outcome)


async def combo(outcome):
    number = await submit(lambda: 42)
    assert number == 42
    text = await submit(lambda: str(number))
    assert text == "42"
    assert await submit(lambda: None) is None
    assert await submit(lambda: SHARED_OBJECT) is SHARED_OBJECT
    as_function(outcome)()


@pytest.mark.parametrize("outcome", [None, Fail(1234)])
def test_combo_coroutine(outcome):
    result = LazyResult(combo(outcome)).run()
    result.wait()
    check_ready(result, outcome)


@pytest.mark.asyncio
async def test_lazy_run_inside_loop():
    result = LazyResult(lazy_recursive(0, 3, "deep")).run()
    assert await result == "deep"


@pytest.mark.asyncio
async def test_lazy_await_directly():
    assert await LazyResult(lazy_recursive(0, 3, 7)) == 7


def test_lazy_run_twice_raises():
    lazy = LazyResult(lazy_recursive(0, 0, 1))
    result = lazy.run()
    assert not lazy
    with pytest.raises(EmptyResult):
        lazy.run()
    assert result.get() == 1