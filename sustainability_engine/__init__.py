"""Sustainability ledger and metrics for Irish home gardens."""

from __future__ import annotations

from .catalog import Practice, PracticeCatalog, PracticeCategory, load_catalog
from .events import EventNotifier
from .ledger import SustainabilityLedger
from .metrics import CarbonImpact, net_carbon_impact, sdg_impact_percentage
from .storage import LedgerStore

__all__ = [
    "CarbonImpact",
    "EventNotifier",
    "LedgerStore",
    "Practice",
    "PracticeCatalog",
    "PracticeCategory",
    "SustainabilityLedger",
    "load_catalog",
    "net_carbon_impact",
    "sdg_impact_percentage",
]
