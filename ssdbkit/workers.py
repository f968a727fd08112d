"""Thread-safe queues and a pool of worker threads that hands back finished jobs."""

from __future__ import annotations

import os
import threading
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Deque, Generic, List, Optional, TypeVar

T = TypeVar("T")
J = TypeVar("J")


class BlockingQueue(Generic[T]):
    """A FIFO queue whose pop waits until an item is available."""

    def __init__(self) -> None:
        self._items: Deque[T] = deque()
        self._cond = threading.Condition()

    def __len__(self) -> int:
        return self.size()

    def empty(self) -> bool:
        with self._cond:
            return not self._items

    def size(self) -> int:
        with self._cond:
            return len(self._items)

    def push(self, item: T) -> None:
        """Add an item and wake one waiting reader."""
        with self._cond:
            self._items.append(item)
            self._cond.notify()

    def pop(self) -> T:
        """Remove and return the oldest item, waiting for one if needed."""
        with self._cond:
            self._cond.wait_for(lambda: bool(self._items))
            return self._items.popleft()


class SelectableQueue(Generic[T]):
    """A FIFO queue for many writers and one reader that can wait on it with select.

    Every pushed item makes one byte readable on :meth:`fileno`.
    """

    def __init__(self) -> None:
        self._read_fd, self._write_fd = os.pipe()
        self._lock = threading.Lock()
        self._items: Deque[T] = deque()
        self._closed = False

    def __enter__(self) -> SelectableQueue[T]:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __len__(self) -> int:
        return self.size()

    def fileno(self) -> int:
        """Descriptor that becomes readable while items are queued."""
        return self._read_fd

    def size(self) -> int:
        with self._lock:
            return len(self._items)

    def push(self, item: T) -> None:
        """Add an item; safe to call from any thread."""
        with self._lock:
            self._items.append(item)
            os.write(self._write_fd, b"1")

    def pop(self) -> T:
        """Remove and return the oldest item, blocking until one is pushed.

        Raises EOFError if the notification pipe has been closed.
        """
        if not os.read(self._read_fd, 1):
            raise EOFError("queue closed")
        with self._lock:
            if not self._items:
                raise RuntimeError("queue signalled but holds no item")
            return self._items.popleft()

    def close(self) -> None:
        """Release the notification pipe."""
        if self._closed:
            return
        self._closed = True
        os.close(self._read_fd)
        os.close(self._write_fd)


class Worker(ABC):
    """Processes jobs inside one thread of a :class:`WorkerPool`."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.id = 0
        self.running = False

    def init(self) -> None:
        """Called in the worker's thread before the first job; marks it running."""
        self.running = True

    def destroy(self) -> None:
        """Called in the worker's thread after the last job; marks it stopped."""
        self.running = False

    @abstractmethod
    def proc(self, job) -> None:
        """Process one job, typically by updating it in place."""


class WorkerPool(Generic[J]):
    """Runs jobs on worker threads; finished jobs come back through :meth:`pop`."""

    def __init__(self, worker_factory: Callable[[str], Worker], name: str = "") -> None:
        self.name = name
        self.num_workers = 0
        self.started = False
        self._factory = worker_factory
        self._jobs: BlockingQueue[Optional[J]] = BlockingQueue()
        self._results: SelectableQueue[J] = SelectableQueue()
        self._threads: List[threading.Thread] = []

    def __enter__(self) -> WorkerPool[J]:
        return self

    def __exit__(self, *exc_info) -> None:
        if self.started:
            self.stop()
        self._results.close()

    def fileno(self) -> int:
        """Descriptor that becomes readable when finished jobs are waiting."""
        return self._results.fileno()

    def _run_worker(self, worker_id: int) -> None:
        worker = self._factory(self.name)
        worker.id = worker_id
        worker.init()
        try:
            while True:
                job = self._jobs.pop()
                if not self.started:
                    break
                worker.proc(job)
                self._results.push(job)
        finally:
            worker.destroy()

    def start(self, num_workers: int) -> None:
        """Start ``num_workers`` threads; does nothing if already started."""
        self.num_workers = num_workers
        if self.started:
            return
        self.started = True
        for worker_id in range(num_workers):
            thread = threading.Thread(
                target=self._run_worker,
                args=(worker_id,),
                name=f"{self.name}-{worker_id}",
                daemon=True,
            )
            thread.start()
            self._threads.append(thread)

    def stop(self) -> None:
        """Tell every worker to quit and wait for all of them."""
        self.started = False
        for _ in self._threads:
            self._jobs.push(None)
        for thread in self._threads:
            thread.join()
        self._threads.clear()

    def push(self, job: J) -> None:
        """Queue a job for the workers."""
        self._jobs.push(job)

    def pop(self) -> J:
        """Return the next finished job, waiting for one if needed."""
        return self._results.pop()