"""Results shared between a producer and a consumer, in threads or in asyncio."""

from __future__ import annotations

import asyncio
import datetime as _dt
import enum
import threading
import time
from typing import Any, Awaitable, Callable, Generator

from .errors import EmptyResult


class ResultStatus(enum.Enum):
    """Whether a result is still pending or holds a value or an exception."""

    IDLE = "idle"
    VALUE = "value"
    EXCEPTION = "exception"


def _to_seconds(timeout: float | _dt.timedelta) -> float:
    if isinstance(timeout, _dt.timedelta):
        return timeout.total_seconds()
    return float(timeout)


def _seconds_until(deadline: float | _dt.datetime) -> float:
    """Seconds left until *deadline*: a ``datetime`` or a ``time.monotonic()`` value."""
    if isinstance(deadline, _dt.datetime):
        return (deadline - _dt.datetime.now(deadline.tzinfo)).total_seconds()
    return float(deadline) - time.monotonic()


class ResultState:
    """The shared slot into which a producer places a value or an exception."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._status = ResultStatus.IDLE
        self._value: Any = None
        self._exception: BaseException | None = None
        self._callbacks: list[Callable[[], None]] = []

    def _complete(self, status: ResultStatus, value: Any, exception: BaseException | None) -> None:
        with self._cond:
            if self._status is not ResultStatus.IDLE:
                raise RuntimeError("the result has already been set")
            self._value = value
            self._exception = exception
            self._status = status
            self._cond.notify_all()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def set_result(self, value: Any = None) -> None:
        """Publish *value* and wake every consumer."""
        self._complete(ResultStatus.VALUE, value, None)

    def set_exception(self, error: BaseException) -> None:
        """Publish *error* and wake every consumer."""
        if error is None:
            raise ValueError("set_exception() - the given exception is None")
        if not isinstance(error, BaseException):
            raise TypeError("set_exception() - expected an exception instance")
        self._complete(ResultStatus.EXCEPTION, None, error)

    def from_callable(self, func: Callable[[], Any]) -> None:
        """Call *func* and publish what it returns or what it raises."""
        try:
            value = func()
        except Exception as error:
            self.set_exception(error)
        else:
            self.set_result(value)

    def add_done_callback(self, callback: Callable[[], None]) -> None:
        """Call *callback* once the result is set, at once if it already is."""
        with self._cond:
            if self._status is ResultStatus.IDLE:
                self._callbacks.append(callback)
                return
        callback()

    def remove_done_callback(self, callback: Callable[[], None]) -> bool:
        """Withdraw a callback that has not yet run; report whether it was found."""
        with self._cond:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                return False
            return True

    def status(self) -> ResultStatus:
        with self._cond:
            return self._status

    def wait(self) -> None:
        """Block until the result is set."""
        with self._cond:
            self._cond.wait_for(lambda: self._status is not ResultStatus.IDLE)

    def wait_for(self, timeout: float | _dt.timedelta) -> ResultStatus:
        """Block for at most *timeout* and return the status reached."""
        seconds = max(0.0, _to_seconds(timeout))
        with self._cond:
            self._cond.wait_for(lambda: self._status is not ResultStatus.IDLE, seconds)
            return self._status

    def wait_until(self, deadline: float | _dt.datetime) -> ResultStatus:
        """Block until *deadline* at the latest and return the status reached."""
        remaining = _seconds_until(deadline)
        if remaining <= 0:
            return self.status()
        return self.wait_for(remaining)

    def get(self) -> Any:
        """Wait, then return the value or raise the stored exception."""
        self.wait()
        if self._exception is not None:
            raise self._exception
        return self._value


def _settle(future: asyncio.Future) -> None:
    if not future.done():
        future.set_result(None)


def _wait_ready(state: ResultState) -> Generator[Any, None, None]:
    """Suspend the running asyncio task until *state* is set."""
    if state.status() is not ResultStatus.IDLE:
        return
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def wake() -> None:
        try:
            loop.call_soon_threadsafe(_settle, future)
        except RuntimeError:
            pass  # the loop is already closed

    state.add_done_callback(wake)
    try:
        yield from future.__await__()
    finally:
        state.remove_done_callback(wake)


class _ResolveAwaitable:
    def __init__(self, state: ResultState) -> None:
        self._state = state

    def __await__(self) -> Generator[Any, None, Result]:
        yield from _wait_ready(self._state)
        return Result(self._state)


class Result:
    """The consumer side of an asynchronous value; its value can be taken once."""

    def __init__(self, state: ResultState | None = None) -> None:
        self._state = state

    def __bool__(self) -> bool:
        return self._state is not None

    def _require(self, method: str) -> ResultState:
        if self._state is None:
            raise EmptyResult(f"Result.{method}() - result is empty.")
        return self._state

    def _release_state(self) -> ResultState | None:
        state, self._state = self._state, None
        return state

    def status(self) -> ResultStatus:
        return self._require("status").status()

    def wait(self) -> None:
        self._require("wait").wait()

    def wait_for(self, timeout: float | _dt.timedelta) -> ResultStatus:
        return self._require("wait_for").wait_for(timeout)

    def wait_until(self, deadline: float | _dt.datetime) -> ResultStatus:
        return self._require("wait_until").wait_until(deadline)

    def add_done_callback(self, callback: Callable[[], None]) -> None:
        """Call *callback* with no arguments once the result is set."""
        self._require("add_done_callback").add_done_callback(callback)

    def remove_done_callback(self, callback: Callable[[], None]) -> bool:
        return self._require("remove_done_callback").remove_done_callback(callback)

    def get(self) -> Any:
        """Block until ready, empty this result, and return its value or raise."""
        state = self._require("get")
        state.wait()
        self._state = None
        return state.get()

    def resolve(self) -> Awaitable[Result]:
        """Empty this result; the returned awaitable gives it back once it is ready."""
        state = self._require("resolve")
        self._state = None
        return _ResolveAwaitable(state)

    def __await__(self) -> Generator[Any, None, Any]:
        state = self._require("__await__")
        self._state = None
        yield from _wait_ready(state)
        return state.get()


class ResultPromise:
    """The producer side of a :class:`Result`."""

    def __init__(self) -> None:
        self._state: ResultState | None = ResultState()
        self._retrieved = False

    def __bool__(self) -> bool:
        return self._state is not None

    def _take(self, method: str) -> ResultState:
        if self._state is None:
            raise EmptyResult(f"ResultPromise.{method}() - promise is empty.")
        state, self._state = self._state, None
        return state

    def get_result(self) -> Result:
        if self._state is None:
            raise EmptyResult("ResultPromise.get_result() - promise is empty.")
        if self._retrieved:
            raise RuntimeError("ResultPromise.get_result() - result was already retrieved.")
        self._retrieved = True
        return Result(self._state)

    def set_result(self, value: Any = None) -> None:
        self._take("set_result").set_result(value)

    def set_exception(self, error: BaseException) -> None:
        if error is None:
            raise ValueError("ResultPromise.set_exception() - the given exception is None")
        self._take("set_exception").set_exception(error)

    def set_from_function(self, func: Callable[[], Any]) -> None:
        self._take("set_from_function").from_callable(func)


_background_tasks: set[asyncio.Task] = set()


class LazyResult:
    """A coroutine that does nothing until it is awaited or run."""

    def __init__(self, coroutine: Awaitable[Any]) -> None:
        self._coroutine: Awaitable[Any] | None = coroutine

    def __bool__(self) -> bool:
        return self._coroutine is not None

    def _take(self, method: str) -> Awaitable[Any]:
        if self._coroutine is None:
            raise EmptyResult(f"LazyResult.{method}() - lazy result is empty.")
        coroutine, self._coroutine = self._coroutine, None
        return coroutine

    def run(self) -> Result:
        """Start the coroutine now and return a :class:`Result` for its outcome.

        Inside a running event loop it becomes a task of that loop; otherwise it
        runs on an event loop in a thread of its own.
        """
        coroutine = self._take("run")
        state = ResultState()

        async def drive() -> None:
            try:
                value = await coroutine
            except BaseException as error:
                state.set_exception(error)
                if not isinstance(error, Exception):
                    raise
            else:
                state.set_result(value)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            threading.Thread(target=asyncio.run, args=(drive(),), daemon=True).start()
        else:
            task = loop.create_task(drive())
            _background_tasks.add(task)
            task.add_done_callback(_background_tasks.discard)
        return Result(state)

    def __await__(self) -> Generator[Any, None, Any]:
        coroutine = self._take("__await__")
        return (yield from coroutine.__await__())