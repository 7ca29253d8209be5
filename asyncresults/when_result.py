"""Combinators that wait for several results at once."""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass, field
from typing import Any, Generator, Sequence

from .errors import EmptyResult, throw_runtime_shutdown
from .results import LazyResult, Result, ResultState, ResultStatus, _wait_ready

_WHEN_ALL_EMPTY_RESULT = "when_all() - one of the result objects is empty."
_WHEN_ALL_NULL_EXECUTOR = "when_all() - given resume executor is None."
_WHEN_ANY_EMPTY_RESULT = "when_any() - one of the result objects is empty."
_WHEN_ANY_NULL_EXECUTOR = "when_any() - given resume executor is None."
_WHEN_ANY_EMPTY_RANGE = "when_any() - given range contains no elements."
_WHEN_ANY_NO_RESULTS = "when_any() - the function must accept at least one result object."


@dataclass
class WhenAnyResult:
    """The index of the first result to complete, and every result given."""

    index: int = -1
    results: Sequence[Result] = field(default_factory=list)


class _Ready:
    """Awaitable that finishes once a state is set, without consuming it."""

    __slots__ = ("_state",)

    def __init__(self, state: ResultState) -> None:
        self._state = state

    def __await__(self) -> Generator[Any, None, None]:
        yield from _wait_ready(self._state)


def _split_args(args: tuple[Any, ...]) -> tuple[list[Any], bool]:
    """Return the results given and whether they came as one iterable."""
    if len(args) == 1 and not isinstance(args[0], Result):
        return list(args[0]), True
    return list(args), False


def _check_results(results: list[Any], message: str) -> None:
    for result in results:
        if not isinstance(result, Result):
            raise TypeError(f"expected a Result, got {type(result).__name__}")
        if not result:
            raise EmptyResult(message)


def _check_executor(executor: Any, message: str) -> None:
    if executor is None:
        raise ValueError(message)
    if not callable(getattr(executor, "submit", None)):
        raise TypeError("the resume executor must provide submit()")


async def _resume_on(executor: Any) -> int:
    """Hand a step to *executor*; return the ident of the thread that ran it."""
    try:
        future = executor.submit(threading.get_ident)
    except RuntimeError:
        throw_runtime_shutdown(type(executor).__name__)
    return await asyncio.wrap_future(future)


async def _first_completed(states: list[ResultState]) -> int:
    for index, state in enumerate(states):
        if state.status() is not ResultStatus.IDLE:
            return index

    loop = asyncio.get_running_loop()
    winner: asyncio.Future = loop.create_future()

    def settle(index: int) -> None:
        if not winner.done():
            winner.set_result(index)

    def make_callback(index: int):
        def callback() -> None:
            try:
                loop.call_soon_threadsafe(settle, index)
            except RuntimeError:
                pass  # the loop is already closed

        return callback

    callbacks = [make_callback(index) for index in range(len(states))]
    try:
        for state, callback in zip(states, callbacks):
            state.add_done_callback(callback)
        return await winner
    finally:
        for state, callback in zip(states, callbacks):
            state.remove_done_callback(callback)


def when_all(resume_executor: Any, *args: Any) -> LazyResult:
    """Wait for every given result, then continue through *resume_executor*.

    Results passed one by one come back as a tuple; a single iterable of
    results comes back as a list. The given results are emptied.
    """
    results, as_list = _split_args(args)
    _check_results(results, _WHEN_ALL_EMPTY_RESULT)
    _check_executor(resume_executor, _WHEN_ALL_NULL_EXECUTOR)

    if not results and not as_list:

        async def nothing() -> tuple:
            return ()

        return LazyResult(nothing())

    states = [result._release_state() for result in results]

    async def gather() -> Sequence[Result]:
        for state in states:
            await _Ready(state)
        await _resume_on(resume_executor)
        done = [Result(state) for state in states]
        return done if as_list else tuple(done)

    return LazyResult(gather())


def when_any(resume_executor: Any, *args: Any) -> LazyResult:
    """Wait for the first of the given results, then continue through *resume_executor*.

    The awaited value is a :class:`WhenAnyResult` holding every result given.
    """
    results, as_list = _split_args(args)
    if not as_list and not results:
        raise ValueError(_WHEN_ANY_NO_RESULTS)
    _check_results(results, _WHEN_ANY_EMPTY_RESULT)
    if not results:
        raise ValueError(_WHEN_ANY_EMPTY_RANGE)
    _check_executor(resume_executor, _WHEN_ANY_NULL_EXECUTOR)

    states = [result._release_state() for result in results]

    async def first() -> WhenAnyResult:
        index = await _first_completed(states)
        await _resume_on(resume_executor)
        done = [Result(state) for state in states]
        return WhenAnyResult(index, done if as_list else tuple(done))

    return LazyResult(first())