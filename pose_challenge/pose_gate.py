from typing import Optional

from .angles import arm_landmarks, extract_arm_angles, visible
from .models import ScoringConfig, Skeleton

SIDES = ('LEFT', 'RIGHT')


class PoseGate:
    """
    Start trigger: both arms raised straight up.

    Every shoulder, elbow, wrist and hip must be confidently visible, and on
    both sides the elbow and shoulder angles must sit within the start
    tolerance of their targets.
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()
        self.required = [lm for side in SIDES for lm in arm_landmarks(side).values()]

    def arm_ready(self, skeleton: Skeleton, side: str) -> bool:
        target = self.config.targets
        tolerance = self.config.tolerances.START
        angles = extract_arm_angles(skeleton, side)
        return (
            abs(angles['elbow_angle'] - target.ELBOW) <= tolerance and
            abs(angles['shoulder_angle'] - target.SHOULDER) <= tolerance
        )

    def is_start_pose(self, skeleton: Optional[Skeleton]) -> bool:
        if skeleton is None:
            return False
        if not visible(skeleton, self.required, self.config.min_visibility):
            return False
        return all(self.arm_ready(skeleton, side) for side in SIDES)
