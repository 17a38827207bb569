"""
Shared base for module classes.

A module maps typed keyword arguments onto one remote method's parameter
names and hands the result to a :class:`Submitter`.  Both
:class:`~matomo_client.executor.CoreClient` (returns the decoded result) and
:class:`~matomo_client.batch.BatchRequest` (returns a ``PendingCall``)
implement ``submit``, so a module never needs to know which one it holds.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class Submitter(Protocol):
    """Anything that accepts a remote method name plus its parameters."""

    def submit(self, method: str, params: Mapping[str, Any] | None = None) -> Any:
        ...


class ReportingModule:
    """
    Base class for one remote API module (``VisitsSummary``, ``Actions``...).

    Subclasses set :attr:`name` and call :meth:`_call` with the method's
    short name.  Absent arguments are passed as ``None`` and dropped by the
    encoder; ``extra`` keyword arguments are forwarded unchanged so newer
    remote parameters can be used without a client release.
    """

    name: str = ""

    def __init__(self, client: Submitter) -> None:
        self.client = client

    def _call(
        self,
        action: str,
        params: Mapping[str, Any] | None = None,
        extra: Mapping[str, Any] | None = None,
    ) -> Any:
        merged = dict(params or {})
        if extra:
            merged.update(extra)
        return self.client.submit(f"{self.name}.{action}", merged)
