"""
Pose Challenge
--------------
Scores detected body keypoints against a sequence of target poses and runs the
timed challenge session (start pose, countdown, hold, final score).
"""

from .models import (
    Landmark, Point, Skeleton, Challenge, ChallengeType, TargetAngles, Tolerances,
    ScoringConfig, Phase, ScoreTier, SessionState, ChallengeScore, SessionReport,
)
from .angles import calculate_angle, vertical_tilt
from .pose_gate import PoseGate
from .scorer import ScoreEvaluator
from .scheduler import PhaseDurations, PhaseScheduler
from .session import ChallengeSession
from .results import aggregate_results, format_report
from .config import ConfigurationError, default_challenges, load_challenges, load_scoring_config

__version__ = "0.1.0"
