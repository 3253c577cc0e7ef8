"""Strict input schemas for callers that want to reject bad input.

The ledger itself coerces unusable amounts to zero. Command line tools run
user input through these schemas first so typos are reported instead of
being silently recorded as zero.
"""

from __future__ import annotations

import math
from typing import Any, Mapping

import voluptuous as vol
from voluptuous.humanize import humanize_error

from .constants import MONTHS, RESOURCE_KINDS
from .utils import parse_timestamp

__all__ = [
    "USAGE_SCHEMA",
    "OFFSET_SCHEMA",
    "PRACTICE_SCHEMA",
    "SPOTTING_SCHEMA",
    "CHALLENGE_SCHEMA",
    "validate",
    "describe_error",
]


def finite_number(value: Any) -> float:
    """Return ``value`` as a finite float or raise :class:`vol.Invalid`."""

    if isinstance(value, bool):
        raise vol.Invalid("expected a number")
    try:
        number = float(value)
    except (TypeError, ValueError) as err:
        raise vol.Invalid(f"expected a number, got {value!r}") from err
    if not math.isfinite(number):
        raise vol.Invalid("amount must be finite")
    return number


def iso_date(value: Any) -> str:
    if parse_timestamp(value) is None:
        raise vol.Invalid(f"invalid ISO date {value!r}")
    return str(value)


NON_EMPTY = vol.All(str, vol.Strip, vol.Length(min=1))

USAGE_SCHEMA = vol.Schema(
    {
        vol.Required("kind"): vol.In(RESOURCE_KINDS),
        vol.Required("amount"): finite_number,
        vol.Optional("date"): vol.Any(None, iso_date),
        vol.Optional("metadata", default=dict): {str: object},
    }
)

OFFSET_SCHEMA = vol.Schema(
    {
        vol.Required("amount"): vol.All(finite_number, vol.Range(min=0)),
        vol.Required("source"): NON_EMPTY,
        vol.Optional("date"): vol.Any(None, iso_date),
    }
)

PRACTICE_SCHEMA = vol.Schema(
    {
        vol.Required("practice_id"): NON_EMPTY,
        vol.Optional("date"): vol.Any(None, iso_date),
    }
)

SPOTTING_SCHEMA = vol.Schema(
    {
        vol.Required("species"): NON_EMPTY,
        vol.Optional("category", default="birds"): NON_EMPTY,
        vol.Optional("date"): vol.Any(None, iso_date),
        vol.Optional("notes", default=""): str,
        vol.Optional("location", default="garden"): str,
    }
)

CHALLENGE_SCHEMA = vol.Schema(
    {
        vol.Required("month"): vol.All(str, vol.Strip, vol.Capitalize, vol.In(MONTHS)),
        vol.Optional("sdgs", default=list): [str],
    }
)


def validate(schema: vol.Schema, data: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``data`` validated by ``schema``; raises :class:`vol.Invalid`."""

    return schema(dict(data))


def describe_error(data: Mapping[str, Any], err: vol.Invalid) -> str:
    return humanize_error(dict(data), err)
