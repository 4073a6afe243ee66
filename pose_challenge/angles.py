import numpy as np
from typing import Dict, Iterable

from .models import Landmark, Point, Skeleton


def calculate_angle(a: Point, m: Point, b: Point) -> float:
    """
    Return angle AMB (in degrees) between rays M->A and M->B on the image plane.
    z is ignored. A zero-length ray yields 0.0, which callers treat as unmeasurable.
    """
    ma = np.array([a.x - m.x, a.y - m.y])
    mb = np.array([b.x - m.x, b.y - m.y])
    norm_ma = np.linalg.norm(ma)
    norm_mb = np.linalg.norm(mb)
    if norm_ma == 0 or norm_mb == 0:
        return 0.0
    cos_angle = np.dot(ma, mb) / (norm_ma * norm_mb)
    return float(np.degrees(np.arccos(np.clip(cos_angle, -1.0, 1.0))))


def vertical_tilt(upper: Point, lower: Point) -> float:
    """Deviation of the lower->upper segment from the image vertical, folded to [0, 90]."""
    angle = abs(np.degrees(np.arctan2(upper.x - lower.x, upper.y - lower.y)))
    return float(min(angle, abs(180.0 - angle)))


def visible(skeleton: Skeleton, landmarks: Iterable[Landmark], threshold: float) -> bool:
    return all(skeleton[lm].visibility >= threshold for lm in landmarks)


def arm_landmarks(side: str) -> Dict[str, Landmark]:
    """Shoulder/elbow/wrist/hip landmarks for 'LEFT' or 'RIGHT'."""
    return {
        'shoulder': Landmark[f'{side}_SHOULDER'],
        'elbow': Landmark[f'{side}_ELBOW'],
        'wrist': Landmark[f'{side}_WRIST'],
        'hip': Landmark[f'{side}_HIP'],
    }


def extract_arm_angles(skeleton: Skeleton, side: str) -> Dict[str, float]:
    """Elbow and shoulder angles for one arm."""
    lm = arm_landmarks(side)
    return {
        # shoulder - elbow - wrist
        'elbow_angle': calculate_angle(skeleton[lm['shoulder']], skeleton[lm['elbow']], skeleton[lm['wrist']]),
        # hip - shoulder - elbow
        'shoulder_angle': calculate_angle(skeleton[lm['hip']], skeleton[lm['shoulder']], skeleton[lm['elbow']]),
    }


def extract_leg_angles(skeleton: Skeleton) -> Dict[str, float]:
    """Standing (right) leg measurements for the balance challenge."""
    hip = skeleton[Landmark.RIGHT_HIP]
    knee = skeleton[Landmark.RIGHT_KNEE]
    ankle = skeleton[Landmark.RIGHT_ANKLE]
    return {
        'knee_angle': calculate_angle(hip, knee, ankle),
        'tilt_angle': vertical_tilt(hip, knee),
    }
