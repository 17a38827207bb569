"""
Batched execution: many API calls, one HTTP exchange.

:class:`BatchRequest` queues calls without sending them.  Flushing sends one
``API.getBulkRequest`` exchange whose sub-requests are numbered by queue
position, then routes item *i* of the JSON reply back to the
:class:`PendingCall` queued at position *i*.

Guarantees:
- A remote fault on one item rejects only that item's handle.
- A fault of the exchange itself (transport failure, undecodable or
  mis-sized reply, remote fault for the whole envelope) rejects every handle
  of the batch with the same exception instance.
- Flushing detaches the current generation atomically; calls queued
  afterwards start a new generation at position 0.
- Done callbacks run only after every handle of the generation is settled.
- Nothing is sent until :meth:`BatchRequest.flush`, :meth:`BatchRequest.send`,
  or :meth:`PendingCall.result` is called.  There is no timer.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from concurrent.futures import Future
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from loguru import logger

from .config import BULK_ITEM_KEY, BULK_METHOD, FORMAT_KEY, ROUTING_KEYS, ClientConfig
from .encoder import EncodedValue, encode_bulk_item, encode_params
from .errors import ApiError, MatomoError
from .executor import apply_call_defaults
from .modules import bind_modules
from .parser import classify_result, split_bulk_response

if TYPE_CHECKING:
    from .executor import CoreClient


class CallState(Enum):
    """Lifecycle of a queued call.  ``RESOLVED`` and ``REJECTED`` are final."""

    ENQUEUED = "enqueued"
    IN_FLIGHT = "in_flight"
    RESOLVED = "resolved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class CallDescriptor:
    """One remote method name plus its parameters, before wire encoding."""

    method: str
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Snapshot the caller's mapping; later changes to it are not seen.
        object.__setattr__(self, "params", dict(self.params or {}))


class PendingCall:
    """
    Handle to one queued call's eventual result.

    Calling :meth:`result` or :meth:`exception` before the batch was sent
    flushes the batch first.
    """

    def __init__(
        self,
        batch: BatchRequest,
        call: CallDescriptor,
        encoded: dict[str, EncodedValue],
        position: int,
        generation: int,
    ) -> None:
        self._batch = batch
        self.call = call
        self.encoded = encoded
        self.position = position
        self.generation = generation
        self._future: Future = Future()
        self._dispatched = False
        # Callbacks are held here rather than on the Future: they only run
        # once every handle of the generation is settled.
        self._callbacks: list[Callable[[PendingCall], Any]] = []
        self._callbacks_lock = threading.Lock()
        self._callbacks_run = False

    def __repr__(self) -> str:
        return (
            f"<PendingCall {self.method} gen={self.generation} "
            f"pos={self.position} {self.state.value}>"
        )

    @property
    def method(self) -> str:
        return self.call.method

    @property
    def params(self) -> Mapping[str, Any]:
        return self.call.params

    @property
    def state(self) -> CallState:
        if not self._future.done():
            return CallState.IN_FLIGHT if self._dispatched else CallState.ENQUEUED
        if self._future.exception() is not None:
            return CallState.REJECTED
        return CallState.RESOLVED

    def done(self) -> bool:
        """Return ``True`` once the call is resolved or rejected."""
        return self._future.done()

    def result(self, timeout: float | None = None) -> Any:
        """
        Return the call's decoded result, flushing its batch if needed.

        Args:
            timeout: Seconds to wait for another thread's flush to finish.

        Raises:
            ApiError: The remote rejected this item.
            TransportError: The batch exchange failed.
            DecodeError: The batch reply could not be demultiplexed.
            concurrent.futures.TimeoutError: ``timeout`` expired.
        """
        self._ensure_sent()
        return self._future.result(timeout)

    def exception(self, timeout: float | None = None) -> BaseException | None:
        """Return the call's fault (or ``None``), flushing its batch if needed."""
        self._ensure_sent()
        return self._future.exception(timeout)

    def add_done_callback(self, fn: Callable[[PendingCall], Any]) -> None:
        """
        Call ``fn(handle)`` once the call is resolved or rejected.

        Callbacks run in the flushing thread after every call of the batch
        has its outcome, so ``fn`` may read sibling handles.  When the call
        is already settled, ``fn`` runs immediately.  Exceptions raised by
        ``fn`` are logged and ignored.
        """
        with self._callbacks_lock:
            if not self._callbacks_run:
                self._callbacks.append(fn)
                return
        self._invoke(fn)

    def _invoke(self, fn: Callable[[PendingCall], Any]) -> None:
        try:
            fn(self)
        except Exception:
            logger.exception("Done callback for {} raised", self.method)

    def _run_callbacks(self) -> None:
        with self._callbacks_lock:
            self._callbacks_run = True
            callbacks, self._callbacks = self._callbacks, []
        for fn in callbacks:
            self._invoke(fn)

    def _ensure_sent(self) -> None:
        if not self._dispatched:
            self._batch._flush_generation(self.generation)

    def _resolve(self, value: Any) -> None:
        self._future.set_result(value)

    def _reject(self, exc: BaseException) -> None:
        self._future.set_exception(exc)


# ---------------------------------------------------------------------------
# Envelope construction
# ---------------------------------------------------------------------------

def build_envelope(config: ClientConfig, calls: list[PendingCall]) -> dict[str, str]:
    """
    Build the bulk-call parameters for one generation of queued calls.

    Each call's encoded parameters, with the per-call connection defaults
    merged, become the sub-request string ``urls[<position>]``.  The envelope
    always asks for JSON: the reply has to be split back into items.

    Args:
        config: Connection configuration.
        calls: Calls of one generation, in position order.

    Returns:
        Parameter mapping for ``API.getBulkRequest``.
    """
    envelope: dict[str, str] = {FORMAT_KEY: "json"}
    for call in calls:
        key = BULK_ITEM_KEY.format(index=call.position)
        envelope[key] = encode_bulk_item(
            call.method, apply_call_defaults(config, call.encoded)
        )
    return envelope


# ---------------------------------------------------------------------------
# Coordinator
# ---------------------------------------------------------------------------

class BatchRequest:
    """
    Queue of API calls sent together in one bulk exchange.

    Exposes the same module attributes as :class:`ReportingClient`, so
    ``batch.visits_summary.get(period="day", date="today")`` queues a call
    and returns its :class:`PendingCall`.

    Args:
        core: Dispatcher used for the bulk exchange.

    Usage::

        batch = core.prepare_requests()
        visits = batch.enqueue("VisitsSummary.get", {"period": "day", "date": "today"})
        version = batch.enqueue("API.getMatomoVersion")
        batch.flush()
        visits.result(), version.result()
    """

    def __init__(self, core: CoreClient) -> None:
        self._core = core
        self._lock = threading.Lock()
        self._pending: list[PendingCall] = []
        self._generation = 0
        bind_modules(self, self)

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)

    def __enter__(self) -> BatchRequest:
        return self

    def __exit__(self, exc_type, *_exc) -> None:
        if exc_type is None:
            self.flush()

    @property
    def core(self) -> CoreClient:
        return self._core

    @property
    def generation(self) -> int:
        """Number of generations sent so far; the next flush sends this one."""
        return self._generation

    def enqueue(self, method: str, params: Mapping[str, Any] | None = None) -> PendingCall:
        """
        Queue one call at the next position of the current generation.

        Parameters are encoded immediately, so invalid values fail here and
        not at flush time.

        Args:
            method: Dot-namespaced remote method name.
            params: Call parameters, same shapes as :meth:`CoreClient.execute`.

        Returns:
            Handle resolved when the batch is flushed.

        Raises:
            ValueError: Empty method name, or a routing field (including
                        ``format``) in ``params``.
            TypeError: A parameter value cannot be encoded.
        """
        if not method or not method.strip():
            raise ValueError("A remote method name is required.")

        call = CallDescriptor(method, params or {})
        encoded = encode_params(call.params)
        reserved = sorted(key for key in encoded if key in ROUTING_KEYS)
        if reserved:
            raise ValueError(
                f"Parameters {reserved} cannot be set on a batched call to '{method}'."
            )

        with self._lock:
            handle = PendingCall(
                self,
                call,
                encoded,
                position=len(self._pending),
                generation=self._generation,
            )
            self._pending.append(handle)

        logger.debug(
            "Queued {} at position {} (generation {})",
            method,
            handle.position,
            handle.generation,
        )
        return handle

    # Shared submission capability (see CoreClient.submit)
    submit = enqueue

    def flush(self) -> None:
        """
        Send every call queued in the current generation.

        Faults are delivered to the handles, not raised here.  Flushing an
        empty batch sends nothing.
        """
        self._flush_generation(None)

    def send(self, return_exceptions: bool = False) -> list:
        """
        Flush and collect the results of the current generation.

        Args:
            return_exceptions: When ``True``, a failed call contributes its
                exception to the list instead of raising it.

        Returns:
            Results in submission order; ``[]`` when nothing was queued.

        Raises:
            MatomoError: The first failed call's fault, unless
                ``return_exceptions`` is set.
        """
        with self._lock:
            calls = list(self._pending)
        self.flush()

        results: list = []
        for call in calls:
            if return_exceptions:
                exc = call.exception()
                results.append(exc if exc is not None else call.result())
            else:
                results.append(call.result())
        return results

    def _flush_generation(self, generation: int | None) -> None:
        with self._lock:
            if generation is not None and generation != self._generation:
                return  # already detached by another flush
            calls = self._pending
            if not calls:
                return
            self._pending = []
            self._generation += 1
            for call in calls:
                call._dispatched = True

        self._dispatch(calls)

    def _dispatch(self, calls: list[PendingCall]) -> None:
        logger.debug("Flushing batch of {} calls", len(calls))
        try:
            envelope = build_envelope(self._core.config, calls)
            reply = self._core.execute(BULK_METHOD, envelope)
            items = split_bulk_response(reply, len(calls))
        except Exception as exc:
            for call in calls:
                call._reject(exc)
            self._notify(calls)
            if not isinstance(exc, MatomoError):
                raise
            return

        for call, item in zip(calls, items):
            try:
                value = classify_result(item, call.method)
            except ApiError as exc:
                call._reject(exc)
            else:
                call._resolve(value)
        self._notify(calls)

    @staticmethod
    def _notify(calls: list[PendingCall]) -> None:
        # Only after the whole generation is settled, so a callback on one
        # handle never waits on a sibling this thread has yet to set.
        for call in calls:
            call._run_callbacks()
