from enum import Enum, IntEnum
from typing import Any, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Landmark(IntEnum):
    """MediaPipe pose landmark indices (33 points)."""
    NOSE = 0
    LEFT_EYE_INNER = 1
    LEFT_EYE = 2
    LEFT_EYE_OUTER = 3
    RIGHT_EYE_INNER = 4
    RIGHT_EYE = 5
    RIGHT_EYE_OUTER = 6
    LEFT_EAR = 7
    RIGHT_EAR = 8
    MOUTH_LEFT = 9
    MOUTH_RIGHT = 10
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_PINKY = 17
    RIGHT_PINKY = 18
    LEFT_INDEX = 19
    RIGHT_INDEX = 20
    LEFT_THUMB = 21
    RIGHT_THUMB = 22
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28
    LEFT_HEEL = 29
    RIGHT_HEEL = 30
    LEFT_FOOT_INDEX = 31
    RIGHT_FOOT_INDEX = 32


NUM_LANDMARKS = len(Landmark)


class Point(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    z: float = 0.0
    visibility: float = Field(default=0.0, ge=0.0, le=1.0)


class Skeleton(BaseModel):
    model_config = ConfigDict(frozen=True)

    points: Tuple[Point, ...]

    @field_validator("points")
    @classmethod
    def _check_size(cls, v):
        if len(v) != NUM_LANDMARKS:
            raise ValueError(f"Skeleton needs {NUM_LANDMARKS} points, got {len(v)}")
        return v

    def __getitem__(self, landmark: Landmark) -> Point:
        return self.points[int(landmark)]

    @classmethod
    def from_landmarks(cls, landmarks: Sequence[Any]) -> "Skeleton":
        """
        Build a skeleton from detector output.
        Accepts objects exposing x/y/z/visibility (MediaPipe NormalizedLandmark),
        dicts with the same keys, or (x, y, z[, visibility]) sequences.
        """
        points = []
        for lm in landmarks:
            if isinstance(lm, Point):
                points.append(lm)
            elif isinstance(lm, dict):
                points.append(Point(**lm))
            elif hasattr(lm, "x") and hasattr(lm, "y"):
                points.append(Point(
                    x=lm.x,
                    y=lm.y,
                    z=getattr(lm, "z", 0.0),
                    visibility=getattr(lm, "visibility", 0.0),
                ))
            else:
                values = list(lm)
                visibility = values[3] if len(values) > 3 else 0.0
                z = values[2] if len(values) > 2 else 0.0
                points.append(Point(x=values[0], y=values[1], z=z, visibility=visibility))
        return cls(points=tuple(points))


class ChallengeType(str, Enum):
    ARM = "ARM"
    LEG_BALANCE = "LEG_BALANCE"


class Challenge(BaseModel):
    name: str
    target_type: ChallengeType
    eval_joints: List[str] = Field(default_factory=list)  # e.g. ["LEFT_ELBOW", "LEFT_SHOULDER"]
    message: str = ""  # guide message shown while preparing
    score: Optional[float] = None  # written once on finalization


class TargetAngles(BaseModel):
    model_config = ConfigDict(frozen=True)

    ELBOW: float = 180.0
    SHOULDER: float = 180.0
    KNEE_STRAIGHT: float = 180.0
    TILT: float = 0.0


class Tolerances(BaseModel):
    model_config = ConfigDict(frozen=True)

    ELBOW: float = Field(default=30.0, gt=0)
    SHOULDER: float = Field(default=30.0, gt=0)
    KNEE: float = Field(default=20.0, gt=0)
    TILT: float = Field(default=15.0, gt=0)
    START: float = Field(default=40.0, gt=0)  # start-pose gate only


class ScoringConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    targets: TargetAngles = Field(default_factory=TargetAngles)
    tolerances: Tolerances = Field(default_factory=Tolerances)
    min_visibility: float = 0.7
    surface_height: int = Field(default=480, gt=0)  # rendering surface height in pixels
    hip_level_pixels: float = Field(default=20.0, gt=0)  # hip y-delta scored as 0


class Phase(str, Enum):
    IDLE = "IDLE"
    PREPARATION = "PREPARATION"
    COUNTDOWN = "COUNTDOWN"
    HOLD = "HOLD"
    FIXED = "FIXED"
    FINISHED = "FINISHED"


class ScoreTier(str, Enum):
    GOOD = "GOOD"
    FAIR = "FAIR"
    POOR = "POOR"


class SessionState(BaseModel):
    model_config = ConfigDict(frozen=True)

    challenge_index: int = 0
    phase: Phase = Phase.IDLE
    frozen_skeleton: Optional[Skeleton] = None
    display_score: Optional[float] = None
    guide_message: str = ""
    timer_display: Optional[str] = None  # "3", "2", "1" or "GO!"
    score_tier: ScoreTier = ScoreTier.GOOD


class ChallengeScore(BaseModel):
    name: str
    score: float


class SessionReport(BaseModel):
    scores: List[ChallengeScore] = Field(default_factory=list)
    mean_score: float
    headline: str
    tier: ScoreTier
