"""
Session allowance as a tagged variant.

The database stores a nullable integer (NULL = unlimited). Python code never
inspects that integer directly; it goes through Allowance:

  Unlimited()   - no ceiling, the allowance gate always passes
  Limited(n)    - at most n concurrently active bookings
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Unlimited:
    def permits(self, active_count: int) -> bool:
        return True

    def remaining(self, active_count: int):
        return None

    def add(self, sessions: int) -> 'Unlimited':
        # Renewing an unlimited membership keeps it unlimited
        return self

    def to_db(self):
        return None


@dataclass(frozen=True)
class Limited:
    sessions: int

    def __post_init__(self):
        if isinstance(self.sessions, bool) or not isinstance(self.sessions, int) or self.sessions < 0:
            raise ValueError(f'Allowance must be a non-negative integer, got {self.sessions!r}.')

    def permits(self, active_count: int) -> bool:
        # Fail closed on a nonsensical count
        if active_count is None or active_count < 0:
            return False
        return active_count < self.sessions

    def remaining(self, active_count: int) -> int:
        return max(0, self.sessions - active_count)

    def add(self, sessions: int) -> 'Limited':
        return Limited(self.sessions + sessions)

    def to_db(self) -> int:
        return self.sessions


Allowance = Unlimited | Limited


def allowance_from_db(value) -> Allowance:
    return Unlimited() if value is None else Limited(value)
