from dataclasses import dataclass
from typing import Dict, NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .models import Phase


class PhaseDurations(BaseModel):
    """Timer table for the timed phases (seconds)."""
    model_config = ConfigDict(frozen=True)

    preparation: float = Field(default=1.5, gt=0)
    countdown: float = Field(default=3.0, gt=0)
    hold: float = Field(default=5.0, gt=0)
    advance: float = Field(default=1.0, gt=0)  # delay between finalization and the next challenge
    tick: float = Field(default=1.0, gt=0)

    def table(self) -> Dict[Phase, Tuple[float, Optional[float]]]:
        """phase -> (duration, tick interval or None for single-shot)"""
        return {
            Phase.PREPARATION: (self.preparation, None),
            Phase.COUNTDOWN: (self.countdown, self.tick),
            Phase.HOLD: (self.hold, self.tick),
            Phase.FIXED: (self.advance, None),
        }


class TimerEvent(NamedTuple):
    phase: Phase
    at: float       # scheduled time of the event, not the time it was polled
    ticks: int      # ticks fired so far, including this one
    expired: bool


@dataclass
class _Timer:
    phase: Phase
    started_at: float
    duration: float
    interval: Optional[float]
    ticks: int = 0

    def next_offset(self) -> float:
        if self.interval is None:
            return self.duration
        return min((self.ticks + 1) * self.interval, self.duration)


class PhaseScheduler:
    """
    Drives the phase timers from a caller-supplied clock.

    At most one timer is live; starting a new one cancels the previous one,
    so a stale interval can never fire into a reset session.
    """

    def __init__(self, durations: Optional[PhaseDurations] = None):
        self.durations = durations or PhaseDurations()
        self._timer: Optional[_Timer] = None

    @property
    def active_phase(self) -> Optional[Phase]:
        return self._timer.phase if self._timer else None

    @property
    def next_deadline(self) -> Optional[float]:
        if self._timer is None:
            return None
        return self._timer.started_at + self._timer.next_offset()

    def start(self, phase: Phase, now: float) -> None:
        self.cancel()
        duration, interval = self.durations.table()[phase]
        self._timer = _Timer(phase=phase, started_at=now, duration=duration, interval=interval)

    def cancel(self) -> None:
        self._timer = None

    def due(self, now: float) -> Optional[TimerEvent]:
        """Pop the next event scheduled at or before `now`, if any."""
        timer = self._timer
        if timer is None:
            return None
        offset = timer.next_offset()
        at = timer.started_at + offset
        if at > now:
            return None

        timer.ticks += 1
        if offset >= timer.duration:
            self._timer = None
            return TimerEvent(timer.phase, at, timer.ticks, expired=True)
        return TimerEvent(timer.phase, at, timer.ticks, expired=False)
