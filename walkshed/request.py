"""Query inputs: the people whose walksheds are computed."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from walkshed.geo import Coordinate
from walkshed.search.cost import DEFAULT_WALKING_SPEED_MPS

# Budgets beyond this many minutes are treated as unlimited.
MAX_TIME_MINUTES = timedelta.max // timedelta(minutes=1)


@dataclass(frozen=True, slots=True)
class Person:
    """A person walking from `home` for at most `max_time_minutes`."""

    name: str
    home: Coordinate  # (lon, lat)
    max_time_minutes: int
    walking_speed_mps: float | None = None

    @property
    def limit(self) -> timedelta:
        if self.max_time_minutes > MAX_TIME_MINUTES:
            return timedelta.max
        if self.max_time_minutes < -MAX_TIME_MINUTES:
            return timedelta.min
        return timedelta(minutes=self.max_time_minutes)


@dataclass(frozen=True, slots=True)
class Request:
    """Ordered people sharing a single query."""

    people: list[Person] = field(default_factory=list)
    walking_speed_mps: float = DEFAULT_WALKING_SPEED_MPS

    def speed_for(self, person: Person) -> float:
        """Return the walking speed that applies to `person`."""
        if person.walking_speed_mps is not None:
            return person.walking_speed_mps
        return self.walking_speed_mps
