"""Results whose value any number of consumers may read."""

from __future__ import annotations

import datetime as _dt
from typing import Any, Awaitable, Generator

from .errors import EmptyResult
from .results import Result, ResultState, ResultStatus, _wait_ready


class _SharedResolveAwaitable:
    def __init__(self, state: ResultState) -> None:
        self._state = state

    def __await__(self) -> Generator[Any, None, SharedResult]:
        yield from _wait_ready(self._state)
        return SharedResult(self._state)


class SharedResult:
    """A result whose value stays readable; copies share the same state."""

    def __init__(self, source: Result | ResultState | None = None) -> None:
        if isinstance(source, Result):
            self._state = source._release_state()
        elif source is None or isinstance(source, ResultState):
            self._state = source
        else:
            raise TypeError("SharedResult() - expected a Result or a ResultState")

    def __bool__(self) -> bool:
        return self._state is not None

    def _require(self, method: str) -> ResultState:
        if self._state is None:
            raise EmptyResult(f"SharedResult.{method}() - result is empty.")
        return self._state

    def status(self) -> ResultStatus:
        return self._require("status").status()

    def wait(self) -> None:
        self._require("wait").wait()

    def wait_for(self, timeout: float | _dt.timedelta) -> ResultStatus:
        return self._require("wait_for").wait_for(timeout)

    def wait_until(self, deadline: float | _dt.datetime) -> ResultStatus:
        return self._require("wait_until").wait_until(deadline)

    def get(self) -> Any:
        """Block until ready, then return the value or raise; the result stays full."""
        state = self._require("get")
        state.wait()
        return state.get()

    def resolve(self) -> Awaitable[SharedResult]:
        """Return an awaitable that gives a shared result once this one is ready."""
        return _SharedResolveAwaitable(self._require("resolve"))

    def __await__(self) -> Generator[Any, None, Any]:
        state = self._require("__await__")
        yield from _wait_ready(state)
        return state.get()