# asyncresults

Result objects that carry a value or an exception from a producer to a
consumer. They work across threads, through blocking waits, and inside
asyncio, through `await`. The package also has a promise that produces them,
lazy and shared variants, and helpers that wait for several results at once.
It has no dependencies outside the standard library.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

### `asyncresults.results`

- `ResultStatus` has three members: `IDLE`, `VALUE` and `EXCEPTION`.
- `ResultState` is the slot that the producer and the consumer share. A
  producer fills it once, with `set_result(value)`, `set_exception(error)` or
  `from_callable(func)`. `from_callable` stores what `func` returns or what
  it raises. Setting the slot a second time raises `RuntimeError`. A consumer
  can call `status()`, `wait()`, `wait_for(timeout)`, `wait_until(deadline)`
  or `get()`. It can also register and withdraw callbacks with
  `add_done_callback` and `remove_done_callback`.
- `ResultPromise` is the producer side.
  - `get_result()` returns the matching `Result`. It may be called only once.
  - `set_result`, `set_exception` and `set_from_function` fulfil the promise
    and leave it empty. A later call on the empty promise raises
    `EmptyResult`.
- `Result` is the consumer side.
  - `status()`, `wait()`, `wait_for(timeout)` and `wait_until(deadline)` do
    not consume the result. A timeout is given in seconds or as a
    `timedelta`. A deadline is either a `datetime` or a `time.monotonic()`
    value. If the deadline has already passed, `wait_until` returns the
    current status straight away.
  - `get()` blocks until the result is ready and then empties the result. It
    returns the value or raises the stored exception.
  - `await result` suspends the task until the result is ready, without
    blocking the event loop. It empties the result and returns the value.
  - `await result.resolve()` empties the result. It hands back a ready
    `Result` instead of its value.
  - `bool(result)` is false once the result is empty. Any method called on an
    empty result raises `EmptyResult`.
- `LazyResult` wraps a coroutine that starts only when it is awaited or run.
  `run()` starts it and returns a `Result`. Inside a running event loop the
  coroutine becomes a task of that loop. Outside one, it runs on an event
  loop in a daemon thread.

### `asyncresults.make_result`

- `make_ready_result(value=None)` returns a result that already holds a
  value.
- `make_exceptional_result(exception)` returns a result that already holds an
  exception. Passing `None` raises `ValueError`.

### `asyncresults.shared_result`

`SharedResult` can be built from a `Result`, which it empties, or from a
`ResultState`. Its value stays readable: `get()` and `await` can be used any
number of times, and copies share the same state. `await shared.resolve()`
returns a `SharedResult` once the result is ready.

### `asyncresults.when_result`

- `when_all(resume_executor, *results)` returns a `LazyResult`. Awaiting it
  waits for every given result.
- `when_any(resume_executor, *results)` returns a `LazyResult`. Awaiting it
  waits for the first result to complete. Its value is a `WhenAnyResult`,
  with `index` for the result that completed first and `results` holding
  every result given.

Both helpers take the results in one of two forms:

- One by one. The results come back as a tuple.
- As a single iterable. The results come back as a list.

Both empty the results passed to them. An empty result among them raises
`EmptyResult`. A `None` executor raises `ValueError`. `when_any` also raises
`ValueError` when it is given no results.

The `resume_executor` can be any object whose `submit(fn)` returns a
`concurrent.futures.Future`, such as a `ThreadPoolExecutor`. Before the
helper continues, one step is handed to this executor. If `submit` raises
`RuntimeError`, for example because the pool has been shut down, the helper
raises `RuntimeShutdown`.

### `asyncresults.errors`

- `EmptyResult` is raised when a result or promise with no state is used.
- `RuntimeShutdown` is raised when work is handed to an executor that has
  been shut down.
- `throw_runtime_shutdown(executor_name)` raises `RuntimeShutdown` with a
  message that names the executor.
- `make_executor_worker_name(executor_name)` returns `"<name> worker"`.

### `asyncresults.examples`

Small workloads:

- `read_lines(text)` yields the lines of `text`, split at each newline. The
  last part is always yielded.
- `is_prime(num)` tells whether `num` is prime.
- `find_primes(begin, end)` returns the primes in `[begin, end)`.
- `count_even(numbers, concurrency_level)` counts the even numbers across
  `concurrency_level` thread-pool workers. The list is cut into chunks of
  equal size, and any elements left over after the last full chunk are not
  counted.
- `replace_chars(data, old, new)` replaces one byte with another in `data`.

## Examples

A promise fulfilled from another thread:

```python
import threading
import time

from asyncresults.results import ResultPromise, ResultStatus

promise = ResultPromise()
result = promise.get_result()

def worker():
    time.sleep(0.1)
    promise.set_result("hello world")

threading.Thread(target=worker).start()

assert result.wait_for(5.0) is ResultStatus.VALUE
print(result.get())      # hello world
print(bool(result))      # False: get() consumes the result
```

Results that are ready from the start:

```python
from asyncresults.make_result import make_ready_result, make_exceptional_result

ready = make_ready_result(42)
assert ready.get() == 42

failed = make_exceptional_result(RuntimeError("failure"))
try:
    failed.get()
except RuntimeError as error:
    print(error)         # failure
```

Waiting for several results:

```python
import asyncio
from concurrent.futures import ThreadPoolExecutor

from asyncresults.make_result import make_ready_result
from asyncresults.when_result import when_all

async def main():
    with ThreadPoolExecutor() as pool:
        done = await when_all(pool, make_ready_result(1), make_ready_result(2))
        print([r.get() for r in done])   # [1, 2]

asyncio.run(main())
```

## What this package does not do

- It has no executors of its own: no thread pool, worker thread, manual
  executor or runtime object. Use `concurrent.futures` executors where an
  executor is needed.
- It has no timers or delay objects.
- It has no command-line program.