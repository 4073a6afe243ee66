import json
import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union

from .models import Challenge, ScoringConfig, SessionState, Skeleton
from .scheduler import PhaseDurations
from .session import ChallengeSession

logger = logging.getLogger(__name__)

Frame = Tuple[float, Optional[Skeleton]]


def parse_recording(lines: Iterable[str]) -> List[Frame]:
    """
    Parse a landmark recording, one JSON object per line:
        {"t": 0.033, "landmarks": [[x, y, z, visibility], ... 33 entries]}
    "landmarks" is null for frames where nothing was detected.
    Raises ValueError naming the first malformed line.
    """
    frames = []
    for line_no, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
            landmarks = record.get("landmarks")
            skeleton = Skeleton.from_landmarks(landmarks) if landmarks else None
            frames.append((float(record["t"]), skeleton))
        except (ValueError, KeyError, TypeError, AttributeError, IndexError) as e:
            raise ValueError(f"Malformed recording line {line_no}: {e}") from e

    frames.sort(key=lambda f: f[0])
    logger.info(f"Parsed {len(frames)} frames")
    return frames


def load_recording(path: Union[str, Path]) -> List[Frame]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return parse_recording(f)
    except UnicodeDecodeError as e:
        raise ValueError(f"Recording {path} is not UTF-8 text: {e}") from e


def replay_session(
    frames: Sequence[Frame],
    challenges: Sequence[Challenge],
    config: Optional[ScoringConfig] = None,
    durations: Optional[PhaseDurations] = None,
    tail: float = 0.0,
    on_state: Optional[Callable[[SessionState], None]] = None,
) -> ChallengeSession:
    """
    Run a session against recorded frames, using the recorded timestamps as the clock.
    `on_state` is called with the session state after every frame.
    `tail` extra seconds of timer-only time are simulated after the last frame.
    """
    session = ChallengeSession(challenges, config=config, durations=durations)
    last_t = 0.0
    for t, skeleton in frames:
        state = session.on_frame(skeleton, t)
        if on_state is not None:
            on_state(state)
        last_t = t
        if session.is_finished:
            break

    if tail > 0 and not session.is_finished:
        state = session.advance_time(last_t + tail)
        if on_state is not None:
            on_state(state)

    if not session.is_finished:
        logger.warning(
            f"Recording ended in {session.state.phase.value} "
            f"on challenge {session.state.challenge_index + 1}/{len(session.challenges)}"
        )
    session.close()
    return session
