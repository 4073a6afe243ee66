import logging
from typing import Optional

from .angles import arm_landmarks, extract_arm_angles, extract_leg_angles, visible
from .models import Challenge, ChallengeType, Landmark, ScoreTier, ScoringConfig, Skeleton

logger = logging.getLogger(__name__)

LEG_BALANCE_LANDMARKS = (Landmark.RIGHT_KNEE, Landmark.RIGHT_ANKLE, Landmark.RIGHT_HIP, Landmark.LEFT_HIP)


def linear_score(measured: float, target: float, tolerance: float) -> float:
    """100 at the target, falling linearly to 0 at the tolerance boundary and beyond."""
    return max(0.0, 100.0 * (1.0 - abs(measured - target) / tolerance))


def hip_level_score(delta_px: float, max_delta_px: float = 20.0) -> float:
    return max(0.0, 100.0 * (1.0 - delta_px / max_delta_px))


def live_score_tier(score: float) -> ScoreTier:
    if score > 80:
        return ScoreTier.GOOD
    if score > 50:
        return ScoreTier.FAIR
    return ScoreTier.POOR


def final_score_tier(score: float) -> ScoreTier:
    if score > 90:
        return ScoreTier.GOOD
    if score > 70:
        return ScoreTier.FAIR
    return ScoreTier.POOR


def challenge_side(challenge: Challenge) -> Optional[str]:
    """Arm side from the first evaluation joint name (LEFT_ELBOW, R_SHOULDER, ...)."""
    if not challenge.eval_joints:
        return None
    joint = challenge.eval_joints[0].upper()
    if joint.startswith(('LEFT', 'L_')):
        return 'LEFT'
    if joint.startswith(('RIGHT', 'R_')):
        return 'RIGHT'
    return None


class ScoreEvaluator:
    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()

    def score_arm(self, challenge: Challenge, skeleton: Skeleton) -> float:
        """
        Single-arm raise.
        Mean of elbow and shoulder sub-scores for the side named by the challenge.
        """
        side = challenge_side(challenge)
        if side is None:
            logger.warning(f"Challenge '{challenge.name}' has no usable eval joints: {challenge.eval_joints}")
            return 0.0

        if not visible(skeleton, arm_landmarks(side).values(), self.config.min_visibility):
            return 0.0

        target = self.config.targets
        tolerance = self.config.tolerances
        angles = extract_arm_angles(skeleton, side)
        scores = [
            linear_score(angles['elbow_angle'], target.ELBOW, tolerance.ELBOW),
            linear_score(angles['shoulder_angle'], target.SHOULDER, tolerance.SHOULDER),
        ]
        return sum(scores) / len(scores)

    def score_leg_balance(self, skeleton: Skeleton) -> float:
        """
        One-leg stance on the right leg.
        1. Knee straightness: hip - knee - ankle against the straight-leg target.
        2. Trunk verticality: tilt of the hip->knee segment from vertical.
        3. Hip levelness: pixel delta between the hips on the rendering surface.
        """
        if not visible(skeleton, LEG_BALANCE_LANDMARKS, self.config.min_visibility):
            return 0.0

        target = self.config.targets
        tolerance = self.config.tolerances
        angles = extract_leg_angles(skeleton)
        hip_delta_px = abs(skeleton[Landmark.RIGHT_HIP].y - skeleton[Landmark.LEFT_HIP].y) * self.config.surface_height

        scores = [
            linear_score(angles['knee_angle'], target.KNEE_STRAIGHT, tolerance.KNEE),
            linear_score(angles['tilt_angle'], target.TILT, tolerance.TILT),
            hip_level_score(hip_delta_px, self.config.hip_level_pixels),
        ]
        return sum(scores) / len(scores)

    def score(self, challenge: Optional[Challenge], skeleton: Optional[Skeleton]) -> float:
        """Match score in [0, 100], rounded to one decimal."""
        if challenge is None or skeleton is None:
            return 0.0

        if challenge.target_type == ChallengeType.ARM:
            total = self.score_arm(challenge, skeleton)
        elif challenge.target_type == ChallengeType.LEG_BALANCE:
            total = self.score_leg_balance(skeleton)
        else:
            logger.warning(f"Unsupported target type for '{challenge.name}': {challenge.target_type}")
            return 0.0

        return round(total, 1)
