"""Read-only catalog of sustainable gardening practices and SDG goals."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from functools import lru_cache
from typing import Any, Dict, Iterator, Mapping, Tuple

import voluptuous as vol

from .constants import IMPACT_LEVELS, IMPACT_POINTS, SDG_KEYS
from .utils import load_dataset, normalize_key

_LOGGER = logging.getLogger(__name__)

PRACTICES_FILE = "sustainability_practices.yaml"
SDG_GOALS_FILE = "sdg_goals.yaml"

__all__ = [
    "Practice",
    "PracticeCategory",
    "PracticeCatalog",
    "SdgGoal",
    "PRACTICE_SCHEMA",
    "CATALOG_SCHEMA",
    "impact_points",
    "build_catalog",
    "load_catalog",
    "get_practice",
    "load_sdg_goals",
    "get_sdg_goal",
]


PRACTICE_SCHEMA = vol.Schema(
    {
        vol.Required("id"): vol.All(str, vol.Length(min=1)),
        vol.Required("name"): str,
        vol.Optional("description", default=""): str,
        vol.Optional("impact", default="low"): vol.In(IMPACT_LEVELS),
        vol.Optional("difficulty", default="easy"): str,
        vol.Optional("tips", default=""): str,
        vol.Optional("sdgs"): [vol.In(SDG_KEYS)],
    },
    extra=vol.ALLOW_EXTRA,
)

CATEGORY_SCHEMA = vol.Schema(
    {
        vol.Required("name"): str,
        vol.Optional("icon", default=""): str,
        vol.Optional("description", default=""): str,
        vol.Optional("sdgs", default=list): [vol.In(SDG_KEYS)],
        vol.Required("practices"): [PRACTICE_SCHEMA],
    },
    extra=vol.ALLOW_EXTRA,
)

CATALOG_SCHEMA = vol.Schema({str: CATEGORY_SCHEMA})


def impact_points(impact: str | None) -> int:
    """Return SDG points awarded for a practice of ``impact`` tier."""

    return IMPACT_POINTS.get(str(impact or "").casefold(), IMPACT_POINTS["low"])


@dataclass(frozen=True, slots=True)
class Practice:
    """Single catalog entry."""

    id: str
    name: str
    description: str
    impact: str
    difficulty: str
    tips: str
    sdgs: Tuple[str, ...]
    category: str
    category_name: str

    @property
    def points(self) -> int:
        return impact_points(self.impact)

    def as_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["sdgs"] = list(self.sdgs)
        return data


@dataclass(frozen=True, slots=True)
class PracticeCategory:
    key: str
    name: str
    icon: str
    description: str
    sdgs: Tuple[str, ...]
    practices: Tuple[Practice, ...] = field(default_factory=tuple)

    def practice_ids(self) -> list[str]:
        return [p.id for p in self.practices]


@dataclass(frozen=True, slots=True)
class SdgGoal:
    key: str
    number: int
    name: str
    description: str = ""
    icon: str = ""
    color: str = ""

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


class PracticeCatalog:
    """Lookup structure over practice categories.

    Instances are never mutated after construction so one catalog can be
    shared by any number of ledgers.
    """

    def __init__(self, categories: Mapping[str, PracticeCategory]) -> None:
        self._categories: Dict[str, PracticeCategory] = dict(categories)
        self._index: Dict[str, Practice] = {}
        for category in self._categories.values():
            for practice in category.practices:
                if practice.id in self._index:
                    _LOGGER.warning(
                        "Duplicate practice id %s in category %s", practice.id, category.key
                    )
                    continue
                self._index[practice.id] = practice

    def __contains__(self, practice_id: object) -> bool:
        return practice_id in self._index

    def __iter__(self) -> Iterator[Practice]:
        return iter(self._index.values())

    def __len__(self) -> int:
        return len(self._index)

    @property
    def categories(self) -> Dict[str, PracticeCategory]:
        return dict(self._categories)

    def get(self, practice_id: str) -> Practice | None:
        """Return the practice with ``practice_id`` or ``None``."""

        return self._index.get(practice_id)

    def category(self, key: str) -> PracticeCategory | None:
        return self._categories.get(key) or self._categories.get(normalize_key(key))

    def practices(self) -> list[Practice]:
        """Return every practice as a flat list in catalog order."""

        return list(self._index.values())

    def by_impact(self, impact: str) -> list[Practice]:
        level = str(impact).casefold()
        return [p for p in self._index.values() if p.impact == level]

    def for_sdg(self, sdg: str) -> list[Practice]:
        return [p for p in self._index.values() if sdg in p.sdgs]


def _build_practice(raw: Mapping[str, Any], key: str, category: Mapping[str, Any]) -> Practice:
    sdgs = raw.get("sdgs")
    if not sdgs:
        sdgs = category.get("sdgs", [])
    return Practice(
        id=raw["id"],
        name=raw["name"],
        description=raw["description"].strip(),
        impact=raw["impact"],
        difficulty=raw["difficulty"],
        tips=raw["tips"].strip(),
        sdgs=tuple(sdgs),
        category=key,
        category_name=category["name"],
    )


def build_catalog(data: Mapping[str, Any]) -> PracticeCatalog:
    """Return a :class:`PracticeCatalog` from raw dataset ``data``.

    ``ValueError`` is raised when the data does not match
    :data:`CATALOG_SCHEMA`.
    """

    try:
        validated = CATALOG_SCHEMA(dict(data))
    except vol.Invalid as err:
        raise ValueError(f"Invalid practice catalog: {err}") from err

    categories: Dict[str, PracticeCategory] = {}
    for key, raw in validated.items():
        practices = tuple(_build_practice(p, key, raw) for p in raw["practices"])
        categories[key] = PracticeCategory(
            key=key,
            name=raw["name"],
            icon=raw["icon"],
            description=raw["description"].strip(),
            sdgs=tuple(raw["sdgs"]),
            practices=practices,
        )
    return PracticeCatalog(categories)


@lru_cache(maxsize=None)
def load_catalog() -> PracticeCatalog:
    """Return the packaged practice catalog (cached)."""

    catalog = build_catalog(load_dataset(PRACTICES_FILE))
    _LOGGER.debug("Loaded %d practices in %d categories", len(catalog), len(catalog.categories))
    return catalog


def get_practice(practice_id: str) -> Practice | None:
    """Return catalog practice ``practice_id`` or ``None`` when unknown."""

    return load_catalog().get(practice_id)


@lru_cache(maxsize=None)
def load_sdg_goals() -> Dict[str, SdgGoal]:
    """Return SDG reference info keyed by goal key."""

    goals: Dict[str, SdgGoal] = {}
    for key, raw in load_dataset(SDG_GOALS_FILE).items():
        if not isinstance(raw, Mapping):
            continue
        try:
            number = int(raw.get("number", 0))
        except (TypeError, ValueError):
            number = 0
        goals[key] = SdgGoal(
            key=key,
            number=number,
            name=str(raw.get("name", key)),
            description=str(raw.get("description", "")),
            icon=str(raw.get("icon", "")),
            color=str(raw.get("color", "")),
        )
    return goals


def get_sdg_goal(key: str) -> SdgGoal | None:
    return load_sdg_goals().get(key)
