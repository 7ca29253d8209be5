"""Exceptions raised by results and executors."""

from __future__ import annotations

EXECUTOR_SHUTDOWN_SUFFIX = " - shutdown has been called on this executor."


class EmptyResult(RuntimeError):
    """An operation was attempted on a result that holds no state."""


class RuntimeShutdown(RuntimeError):
    """Work was handed to an executor that has been shut down."""


def throw_runtime_shutdown(executor_name: str) -> None:
    """Raise :class:`RuntimeShutdown` for the executor called *executor_name*."""
    raise RuntimeShutdown(executor_name + EXECUTOR_SHUTDOWN_SUFFIX)


def make_executor_worker_name(executor_name: str) -> str:
    """Return the name given to the worker threads of an executor."""
    return f"{executor_name} worker"