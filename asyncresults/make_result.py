"""Results that are complete from the moment they are made."""

from __future__ import annotations

from typing import Any

from .results import Result, ResultState


def make_ready_result(value: Any = None) -> Result:
    """Return a result that already holds *value*."""
    state = ResultState()
    state.set_result(value)
    return Result(state)


def make_exceptional_result(exception: BaseException) -> Result:
    """Return a result that already holds *exception*."""
    if exception is None:
        raise ValueError("make_exceptional_result() - given exception is None.")
    state = ResultState()
    state.set_exception(exception)
    return Result(state)