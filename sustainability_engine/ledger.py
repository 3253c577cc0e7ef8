"""Mutation operations on the sustainability ledger.

Every operation follows the same cycle: load the persisted document, apply
a transformation, save the whole document back and broadcast events so
other views can refresh. Nothing here raises for bad runtime data; unusable
amounts count as zero and unknown identifiers are logged.

Two score rules coexist on purpose. Practice toggles and challenges move
``score`` by flat points, while resource recordings overwrite ``score``
with the mean of the SDG scores.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

from .catalog import PracticeCatalog, load_catalog
from .constants import (
    CHALLENGE_SCORE_POINTS,
    CHALLENGE_SDG_POINTS,
    EVENT_CARBON_OFFSET_RECORDED,
    EVENT_DATA_CHANGED,
    EVENT_PRACTICE_ADDED,
    EVENT_PRACTICE_REMOVED,
    EVENT_RESOURCE_USAGE_UPDATED,
    MAX_SCORE,
    MONTHS,
    PRACTICE_SCORE_POINTS,
    RESOURCE_SDG_IMPACTS,
    SDG_KEYS,
)
from .events import EventNotifier
from .storage import LedgerStore
from .utils import clamp, coerce_amount, isoformat, round_clamped, utcnow_iso

_LOGGER = logging.getLogger(__name__)

DateLike = datetime | date | str | None
Event = tuple[str, dict[str, Any]]

__all__ = [
    "SustainabilityLedger",
    "apply_resource_impact",
    "mean_sdg_score",
]


def apply_resource_impact(sdg_scores: dict[str, float], kind: str, amount: float) -> dict[str, float]:
    """Nudge ``sdg_scores`` in place for a ``kind`` sample and clamp every score."""

    for impact in RESOURCE_SDG_IMPACTS.get(kind, ()):
        current = coerce_amount(sdg_scores.get(impact.sdg))
        sdg_scores[impact.sdg] = current + impact.delta(amount)
    for key, value in sdg_scores.items():
        sdg_scores[key] = clamp(coerce_amount(value), 0, MAX_SCORE)
    return sdg_scores


def mean_sdg_score(sdg_scores: Mapping[str, Any]) -> int:
    """Return the rounded mean of ``sdg_scores`` (``0`` when empty)."""

    if not sdg_scores:
        return 0
    total = sum(coerce_amount(v) for v in sdg_scores.values())
    return round_clamped(total / len(sdg_scores), 0, MAX_SCORE)


def _adjust_score(data: dict[str, Any], points: float) -> None:
    data["score"] = int(clamp(coerce_amount(data.get("score")) + points, 0, MAX_SCORE))


def _normalize_month(month: str) -> str | None:
    text = str(month).strip().casefold()
    for name in MONTHS:
        if name.casefold() == text:
            return name
    return None


class SustainabilityLedger:
    """Single-user ledger bound to a store, a practice catalog and a notifier."""

    def __init__(
        self,
        store: LedgerStore | None = None,
        catalog: PracticeCatalog | None = None,
        notifier: EventNotifier | None = None,
    ) -> None:
        self.store = store if store is not None else LedgerStore.from_env()
        self.catalog = catalog if catalog is not None else load_catalog()
        self.notifier = notifier if notifier is not None else EventNotifier()

    # ------------------------------------------------------------------
    # read accessors
    # ------------------------------------------------------------------
    def progress(self) -> dict[str, Any]:
        return self.store.load()

    def score(self) -> int:
        return int(coerce_amount(self.store.load().get("score")))

    def sdg_scores(self) -> dict[str, float]:
        return dict(self.store.load()["sdg_scores"])

    def is_active(self, practice_id: str) -> bool:
        return any(p.get("id") == practice_id for p in self.store.load()["active_practices"])

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------
    def _commit(self, data: dict[str, Any], events: Iterable[Event]) -> dict[str, Any]:
        self.store.save(data)
        for name, payload in events:
            self.notifier.emit(name, payload)
        return data

    @staticmethod
    def _changed(change_type: str, **fields: Any) -> Event:
        payload = {"change_type": change_type, "timestamp": utcnow_iso()}
        payload.update(fields)
        return EVENT_DATA_CHANGED, payload

    def _practice_points(self, practice_id: str) -> tuple[tuple[str, ...], int]:
        practice = self.catalog.get(practice_id)
        if practice is None:
            _LOGGER.debug("Practice %s not found in catalog", practice_id)
            return (), 0
        return practice.sdgs, practice.points

    # ------------------------------------------------------------------
    # practices
    # ------------------------------------------------------------------
    def add_practice(self, practice_id: str, implemented_on: DateLike = None) -> dict[str, Any]:
        """Mark ``practice_id`` active; adding an active practice changes nothing."""

        data = self.store.load()
        active = data["active_practices"]
        if any(p.get("id") == practice_id for p in active):
            return data

        active.append({"id": practice_id, "implemented_on": isoformat(implemented_on), "notes": ""})
        _adjust_score(data, PRACTICE_SCORE_POINTS)

        sdgs, points = self._practice_points(practice_id)
        scores = data["sdg_scores"]
        for sdg in sdgs:
            if sdg in scores:
                scores[sdg] = clamp(coerce_amount(scores[sdg]) + points, 0, MAX_SCORE)

        _LOGGER.debug(
            "Added practice %s (%d active practices)", practice_id, len(active)
        )
        now = utcnow_iso()
        return self._commit(
            data,
            [
                (EVENT_PRACTICE_ADDED, {"practice_id": practice_id, "timestamp": now}),
                self._changed("practice-added", practice_id=practice_id),
            ],
        )

    def remove_practice(self, practice_id: str) -> dict[str, Any]:
        """Deactivate ``practice_id`` and take back the points it earned."""

        data = self.store.load()
        active = data["active_practices"]
        remaining = [p for p in active if p.get("id") != practice_id]
        if len(remaining) == len(active):
            _LOGGER.debug("Practice %s is not active", practice_id)
            return data

        data["active_practices"] = remaining
        _adjust_score(data, -PRACTICE_SCORE_POINTS)

        sdgs, points = self._practice_points(practice_id)
        scores = data["sdg_scores"]
        for sdg in sdgs:
            if sdg in scores:
                scores[sdg] = clamp(coerce_amount(scores[sdg]) - points, 0, MAX_SCORE)

        _LOGGER.debug(
            "Removed practice %s (%d active practices)", practice_id, len(remaining)
        )
        now = utcnow_iso()
        return self._commit(
            data,
            [
                (EVENT_PRACTICE_REMOVED, {"practice_id": practice_id, "timestamp": now}),
                self._changed("practice-removed", practice_id=practice_id),
            ],
        )

    def update_practice_notes(self, practice_id: str, notes: str) -> dict[str, Any]:
        data = self.store.load()
        for entry in data["active_practices"]:
            if entry.get("id") == practice_id:
                entry["notes"] = str(notes)
                return self._commit(
                    data, [self._changed("practice-notes-updated", practice_id=practice_id)]
                )
        return data

    def update_practice_data(self, practice_id: str, values: Mapping[str, Any]) -> dict[str, Any] | None:
        """Merge ``values`` into an active practice entry.

        Returns ``None`` when ``practice_id`` is not active.
        """

        data = self.store.load()
        for index, entry in enumerate(data["active_practices"]):
            if entry.get("id") != practice_id:
                continue
            merged = {**entry, **dict(values), "id": practice_id, "last_updated": utcnow_iso()}
            data["active_practices"][index] = merged
            return self._commit(
                data,
                [self._changed("practice-data-updated", practice_id=practice_id, data=dict(values))],
            )

        _LOGGER.warning("Practice %s not found in active practices", practice_id)
        return None

    def recalculate_sdg_scores(self) -> dict[str, Any]:
        """Rebuild SDG scores from the active practices alone."""

        data = self.store.load()
        scores = {key: 0 for key in SDG_KEYS}
        for entry in data["active_practices"]:
            sdgs, points = self._practice_points(entry.get("id", ""))
            for sdg in sdgs:
                if sdg in scores:
                    scores[sdg] = clamp(scores[sdg] + points, 0, MAX_SCORE)
        data["sdg_scores"] = scores

        _LOGGER.debug(
            "Recalculated SDG scores from %d practices", len(data["active_practices"])
        )
        return self._commit(
            data, [self._changed("sdg-scores-recalculated", scores_updated=len(scores))]
        )

    # ------------------------------------------------------------------
    # resources
    # ------------------------------------------------------------------
    def _record(
        self,
        data: dict[str, Any],
        kind: str,
        amount: float,
        when: str,
        metadata: Mapping[str, Any],
    ) -> None:
        usage = data["resource_usage"]
        if not isinstance(usage.get(kind), list):
            _LOGGER.debug("Starting new resource series %s", kind)
            usage[kind] = []
        usage[kind].append({"date": when, "amount": amount, "metadata": dict(metadata)})
        apply_resource_impact(data["sdg_scores"], kind, amount)
        data["score"] = mean_sdg_score(data["sdg_scores"])

    def record_resource_usage(
        self,
        kind: str,
        amount: Any,
        when: DateLike = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Append a ``kind`` sample and update the SDG and overall scores.

        Negative water, carbon and energy amounts are savings and raise the
        related goal; positive amounts lower it.
        """

        value = coerce_amount(amount)
        timestamp = isoformat(when)
        data = self.store.load()
        self._record(data, kind, value, timestamp, metadata or {})

        payload = {"resource_type": kind, "amount": value, "timestamp": timestamp}
        return self._commit(
            data,
            [
                (EVENT_RESOURCE_USAGE_UPDATED, payload),
                self._changed("resource-usage-updated", resource_type=kind, amount=value),
            ],
        )

    def record_carbon_offset(self, amount: Any, source: str, when: DateLike = None) -> dict[str, Any]:
        """Record an emissions reduction credited to ``source``.

        The stored amount is always negative whatever the sign of ``amount``.
        """

        value = -abs(coerce_amount(amount))
        timestamp = isoformat(when)
        data = self.store.load()
        self._record(data, "carbon", value, timestamp, {"activity": "offset", "source": source})

        payload = {"amount": value, "source": source, "timestamp": timestamp}
        return self._commit(
            data,
            [
                (EVENT_CARBON_OFFSET_RECORDED, payload),
                self._changed("carbon-offset-recorded", amount=value, source=source),
            ],
        )

    # ------------------------------------------------------------------
    # challenges
    # ------------------------------------------------------------------
    def challenge_progress(self) -> dict[str, list[str]]:
        challenges = self.store.load()["challenges"]
        return {"accepted": list(challenges["accepted"]), "completed": list(challenges["completed"])}

    def accept_challenge(self, month: str) -> dict[str, Any] | None:
        name = _normalize_month(month)
        if name is None:
            _LOGGER.warning("Unknown challenge month %s", month)
            return None
        data = self.store.load()
        accepted = data["challenges"]["accepted"]
        if name in accepted:
            return data
        accepted.append(name)
        return self._commit(data, [self._changed("challenge-accepted", month=name)])

    def complete_challenge(self, month: str, sdg_ids: Iterable[str] = ()) -> dict[str, Any] | None:
        """Complete the ``month`` challenge once, awarding score and SDG points."""

        name = _normalize_month(month)
        if name is None:
            _LOGGER.warning("Unknown challenge month %s", month)
            return None
        data = self.store.load()
        completed = data["challenges"]["completed"]
        if name in completed:
            return data

        completed.append(name)
        _adjust_score(data, CHALLENGE_SCORE_POINTS)
        scores = data["sdg_scores"]
        for sdg in sdg_ids:
            if sdg in scores:
                scores[sdg] = clamp(coerce_amount(scores[sdg]) + CHALLENGE_SDG_POINTS, 0, MAX_SCORE)
        return self._commit(data, [self._changed("challenge-completed", month=name)])

    # ------------------------------------------------------------------
    # wildlife
    # ------------------------------------------------------------------
    def add_wildlife_spotting(
        self,
        species: str,
        category: str = "birds",
        spotted_on: DateLike = None,
        notes: str = "",
        location: str = "garden",
    ) -> dict[str, Any] | None:
        """Record a sighting; blank species names are ignored."""

        name = str(species or "").strip()
        if not name:
            _LOGGER.warning("Ignoring wildlife spotting without a species name")
            return None

        spotting = {
            "id": f"spotting-{uuid.uuid4().hex[:12]}",
            "species": name,
            "category": category,
            "date": isoformat(spotted_on)[:10],
            "notes": notes,
            "location": location,
            "timestamp": utcnow_iso(),
        }
        data = self.store.load()
        data["wildlife_spottings"].insert(0, spotting)
        return self._commit(
            data, [self._changed("wildlife-spotting-added", spotting_id=spotting["id"])]
        )

    def remove_wildlife_spotting(self, spotting_id: str) -> dict[str, Any]:
        data = self.store.load()
        spottings = data["wildlife_spottings"]
        remaining = [s for s in spottings if s.get("id") != spotting_id]
        if len(remaining) == len(spottings):
            return data
        data["wildlife_spottings"] = remaining
        return self._commit(
            data, [self._changed("wildlife-spotting-removed", spotting_id=spotting_id)]
        )

    # ------------------------------------------------------------------
    def reset(self) -> dict[str, Any]:
        """Delete all persisted progress."""

        data = self.store.reset()
        _LOGGER.info("Sustainability progress reset")
        self.notifier.emit(*self._changed("progress-reset"))
        return data
