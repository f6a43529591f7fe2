"""Filename template expansion."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Optional

from .filenames import DEFAULT_EXTENSION, DEFAULT_NAME, sanitize_filename

DEFAULT_TEMPLATE = "{name}"
DEFAULT_GROUP_LABEL = "Ungrouped"

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
# Indexed by datetime.weekday(), Monday first.
DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

_TOKEN = re.compile(r"\{([A-Za-z]+)\}")


@dataclass(frozen=True)
class FilenameContext:
    """Values available to content tokens.

    Attributes:
        name: Base filename without extension.
        extension: Dotted extension appended after expansion.
        index: 1-based position of the entry within the plan.
        group: Group name, or the ungrouped label.
    """

    name: str = DEFAULT_NAME
    extension: str = DEFAULT_EXTENSION
    index: int = 1
    group: str = DEFAULT_GROUP_LABEL


def is_default_template(template: Optional[str]) -> bool:
    """Return True when ``template`` leaves resolved names untouched."""
    return not template or template == DEFAULT_TEMPLATE


def apply_template(
    template: str,
    context: FilenameContext,
    now: Optional[datetime] = None,
) -> str:
    """Expand ``template`` into a filename.

    Content (``{name}``, ``{original}``, ``{index}``, ``{group}``) and
    convenience (``{date}``, ``{time}``, ``{iso}``) tokens match in any case.
    Calendar and clock tokens are case-sensitive so ``{MM}`` (month) and
    ``{mm}`` (minute) stay distinct. Unknown tokens are kept verbatim.

    Args:
        template: User-defined filename pattern.
        context: Values for the content tokens.
        now: Moment used for date/time tokens; defaults to the local wall clock.

    Returns:
        str: Sanitized filename with ``context.extension`` appended.
    """

    moment = now or datetime.now()
    name = context.name or DEFAULT_NAME
    extension = context.extension or DEFAULT_EXTENSION
    index = context.index or 1
    group = context.group or DEFAULT_GROUP_LABEL

    exact = _calendar_tokens(moment)
    folded: Dict[str, Callable[[], str]] = {
        "name": lambda: name,
        "original": lambda: name,
        "index": lambda: str(index),
        "group": lambda: group,
        "date": lambda: f"{exact['YYYY']}-{exact['MM']}-{exact['DD']}",
        "time": lambda: f"{exact['hh']}-{exact['mm']}-{exact['ss']}",
        "iso": lambda: (
            f"{exact['YYYY']}{exact['MM']}{exact['DD']}T{exact['hh']}{exact['mm']}{exact['ss']}"
        ),
    }

    def _substitute(match: re.Match[str]) -> str:
        token = match.group(1)
        if token in exact:
            return exact[token]
        producer = folded.get(token.lower())
        if producer is not None:
            return producer()
        return match.group(0)

    expanded = _TOKEN.sub(_substitute, template)
    return sanitize_filename(expanded) + extension


def _calendar_tokens(moment: datetime) -> Dict[str, str]:
    month_name = MONTH_NAMES[moment.month - 1]
    day_name = DAY_NAMES[moment.weekday()]
    return {
        "YYYY": f"{moment.year:04d}",
        "YY": f"{moment.year % 100:02d}",
        "MMMM": month_name,
        "MMM": month_name[:3],
        "MM": f"{moment.month:02d}",
        "M": str(moment.month),
        "dddd": day_name,
        "ddd": day_name[:3],
        "DD": f"{moment.day:02d}",
        "D": str(moment.day),
        "hh": f"{moment.hour:02d}",
        "h": str(moment.hour),
        "mm": f"{moment.minute:02d}",
        "m": str(moment.minute),
        "ss": f"{moment.second:02d}",
        "s": str(moment.second),
    }


__all__ = [
    "DEFAULT_TEMPLATE",
    "DEFAULT_GROUP_LABEL",
    "FilenameContext",
    "apply_template",
    "is_default_template",
]
