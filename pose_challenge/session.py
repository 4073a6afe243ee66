"""
Challenge session state machine.

IDLE -> PREPARATION -> COUNTDOWN -> HOLD -> FIXED -> IDLE (next challenge) | FINISHED

Transitions are pure functions on the immutable SessionState. ChallengeSession
dispatches detector frames and timer events to them; it is single-threaded and
expects the caller to pass a monotonic clock reading with every call.
"""
import logging
import math
from typing import List, Optional, Sequence

from .config import ConfigurationError
from .models import Challenge, Phase, ScoringConfig, SessionReport, SessionState, Skeleton
from .pose_gate import PoseGate
from .results import aggregate_results, format_report
from .scheduler import PhaseDurations, PhaseScheduler, TimerEvent
from .scorer import ScoreEvaluator, final_score_tier, live_score_tier

logger = logging.getLogger(__name__)

START_MESSAGE = "Raise **both arms** straight up and hold the pose to start the challenge."


# --------------------
# TRANSITIONS
# --------------------
def reset_for_challenge(index: int) -> SessionState:
    return SessionState(challenge_index=index, phase=Phase.IDLE, guide_message=START_MESSAGE)


def begin_preparation(state: SessionState, challenge: Challenge) -> SessionState:
    return state.model_copy(update={
        'phase': Phase.PREPARATION,
        'guide_message': f"Start pose confirmed! {challenge.message}<br>Hold still...",
    })


def countdown_tick(state: SessionState, remaining: int) -> SessionState:
    return state.model_copy(update={
        'timer_display': str(remaining),
        'guide_message': f"Get into position! {remaining} s left!",
    })


def begin_countdown(state: SessionState, seconds: int) -> SessionState:
    return countdown_tick(state.model_copy(update={'phase': Phase.COUNTDOWN}), seconds)


def hold_tick(state: SessionState, second: int, total: int) -> SessionState:
    return state.model_copy(update={
        'timer_display': 'GO!',
        'guide_message': f"Hold the pose! Measuring... {second} / {total} s",
    })


def begin_hold(state: SessionState, total: int) -> SessionState:
    return hold_tick(state.model_copy(update={'phase': Phase.HOLD}), 1, total)


def live_score(state: SessionState, score: float) -> SessionState:
    return state.model_copy(update={'display_score': score, 'score_tier': live_score_tier(score)})


def fix_pose(state: SessionState) -> SessionState:
    return state.model_copy(update={
        'phase': Phase.FIXED,
        'timer_display': None,
        'guide_message': "Pose locked! Calculating your final score.",
    })


def completion_message(name: str, score: float) -> str:
    if score > 90:
        return f"**{name}** complete! Perfect!"
    if score > 70:
        return f"**{name}** complete! So close to the target!"
    return f"**{name}** complete. Nice try!"


def finalize(state: SessionState, skeleton: Skeleton, score: float, name: str) -> SessionState:
    return state.model_copy(update={
        'frozen_skeleton': skeleton,
        'display_score': score,
        'score_tier': final_score_tier(score),
        'guide_message': completion_message(name, score),
    })


def finish(state: SessionState, report: SessionReport) -> SessionState:
    return state.model_copy(update={
        'phase': Phase.FINISHED,
        'frozen_skeleton': None,
        'timer_display': None,
        'display_score': report.mean_score,
        'score_tier': report.tier,
        'guide_message': report.headline,
    })


# --------------------
# DISPATCHER
# --------------------
class ChallengeSession:
    def __init__(
        self,
        challenges: Sequence[Challenge],
        config: Optional[ScoringConfig] = None,
        durations: Optional[PhaseDurations] = None,
    ):
        if not challenges:
            raise ConfigurationError("A session needs at least one challenge")
        config = config or ScoringConfig()
        # The session owns its copies; only their score fields are ever written.
        self.challenges: List[Challenge] = [c.model_copy(deep=True) for c in challenges]
        self.evaluator = ScoreEvaluator(config)
        self.gate = PoseGate(config)
        self.scheduler = PhaseScheduler(durations)
        self.report: Optional[SessionReport] = None
        self.state = reset_for_challenge(0)

    @property
    def durations(self) -> PhaseDurations:
        return self.scheduler.durations

    @property
    def current_challenge(self) -> Optional[Challenge]:
        if self.state.challenge_index < len(self.challenges):
            return self.challenges[self.state.challenge_index]
        return None

    @property
    def is_finished(self) -> bool:
        return self.state.phase == Phase.FINISHED

    def start(self) -> SessionState:
        """Clear all scores and go back to the first challenge."""
        self.scheduler.cancel()
        for c in self.challenges:
            c.score = None
        self.report = None
        self._apply(reset_for_challenge(0))
        return self.state

    def close(self) -> None:
        self.scheduler.cancel()

    def on_frame(self, skeleton: Optional[Skeleton], now: float) -> SessionState:
        """
        Handle one detector frame. `skeleton` is None when nothing was detected.
        Timer events due at or before `now` are committed first.
        """
        self.advance_time(now)
        if skeleton is None:
            return self.state

        phase = self.state.phase
        if phase == Phase.IDLE:
            if self.gate.is_start_pose(skeleton):
                self._apply(begin_preparation(self.state, self.current_challenge))
                self.scheduler.start(Phase.PREPARATION, now)
        elif phase == Phase.HOLD:
            score = self.evaluator.score(self.current_challenge, skeleton)
            logger.debug(f"Live score {score:.1f} for challenge {self.state.challenge_index}")
            self._apply(live_score(self.state, score))
        elif phase == Phase.FIXED and self.state.frozen_skeleton is None:
            self._finalize(skeleton, now)
        return self.state

    def advance_time(self, now: float) -> SessionState:
        event = self.scheduler.due(now)
        while event is not None:
            self._on_timer(event)
            event = self.scheduler.due(now)
        return self.state

    def _on_timer(self, event: TimerEvent) -> None:
        d = self.durations
        if event.phase == Phase.PREPARATION:
            self._apply(begin_countdown(self.state, math.ceil(d.countdown)))
            self.scheduler.start(Phase.COUNTDOWN, event.at)
        elif event.phase == Phase.COUNTDOWN:
            if event.expired:
                self._apply(begin_hold(self.state, math.ceil(d.hold)))
                self.scheduler.start(Phase.HOLD, event.at)
            else:
                self._apply(countdown_tick(self.state, math.ceil(d.countdown - event.ticks * d.tick)))
        elif event.phase == Phase.HOLD:
            if event.expired:
                self._apply(fix_pose(self.state))
            else:
                self._apply(hold_tick(self.state, event.ticks + 1, math.ceil(d.hold)))
        elif event.phase == Phase.FIXED:
            self._advance()

    def _finalize(self, skeleton: Skeleton, now: float) -> None:
        challenge = self.current_challenge
        score = self.evaluator.score(challenge, skeleton)
        challenge.score = score
        logger.info(f"Challenge '{challenge.name}' finalized with score {score:.1f}")
        self._apply(finalize(self.state, skeleton, score, challenge.name))
        self.scheduler.start(Phase.FIXED, now)

    def _advance(self) -> None:
        self.scheduler.cancel()
        next_index = self.state.challenge_index + 1
        if next_index < len(self.challenges):
            self._apply(reset_for_challenge(next_index))
            return

        self.report = aggregate_results(self.challenges)
        self._apply(finish(self.state, self.report))
        logger.info("--- FINAL CHALLENGE RESULTS ---\n" + format_report(self.report))

    def _apply(self, new_state: SessionState) -> None:
        old = self.state
        if (old.phase, old.challenge_index) != (new_state.phase, new_state.challenge_index):
            logger.info(
                f"Challenge {old.challenge_index} {old.phase.value} -> "
                f"challenge {new_state.challenge_index} {new_state.phase.value}"
            )
        self.state = new_state
