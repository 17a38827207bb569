"""
Module layer: typed call sites over the shared ``submit`` capability.

Each class maps one remote API module.  :data:`MODULES` lists the attribute
name under which :func:`bind_modules` attaches each of them to a client or a
batch.
"""

from .actions import ActionsModule
from .api import ApiModule
from .base import ReportingModule, Submitter
from .scheduled_reports import ScheduledReportsModule
from .sites_manager import SitesManagerModule
from .visits_summary import VisitsSummaryModule

MODULES: dict[str, type[ReportingModule]] = {
    "api": ApiModule,
    "actions": ActionsModule,
    "scheduled_reports": ScheduledReportsModule,
    "sites_manager": SitesManagerModule,
    "visits_summary": VisitsSummaryModule,
}


def bind_modules(target: object, submitter: Submitter) -> None:
    """Attach one instance of every module in :data:`MODULES` to ``target``."""
    for attribute, module_cls in MODULES.items():
        setattr(target, attribute, module_cls(submitter))


__all__ = [
    "MODULES",
    "ActionsModule",
    "ApiModule",
    "ReportingModule",
    "ScheduledReportsModule",
    "SitesManagerModule",
    "Submitter",
    "VisitsSummaryModule",
    "bind_modules",
]
