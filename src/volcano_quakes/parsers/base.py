"""Abstract catalog parser and the numeric checks shared by implementations."""

from __future__ import annotations

import abc
import math
from typing import Any

from volcano_quakes.models import SeismicEvent
from volcano_quakes.sites import Location


class EventParser(abc.ABC):
    """Converts a decoded catalog response into SeismicEvents for one site."""

    @abc.abstractmethod
    def parse(self, raw: Any, location: Location) -> list[SeismicEvent]:
        """Parse a decoded API response into normalized events.

        Args:
            raw: The decoded response body.
            location: The site the query was issued for.

        Returns:
            Events that passed validation. Malformed records are dropped.
        """


def is_finite_number(value: Any) -> bool:
    """True for ints and floats that are neither NaN nor infinite. Bools are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints beyond float range
        return False
