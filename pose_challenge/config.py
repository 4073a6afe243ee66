"""
Default challenge list and scoring tables, plus loaders for JSON overrides.

Challenge file format:
    [
      {"name": "Left Arm Raise", "target_type": "ARM",
       "eval_joints": ["LEFT_ELBOW", "LEFT_SHOULDER"], "message": "..."},
      ...
    ]

Scoring file format: the fields of ScoringConfig, e.g.
    {"targets": {"ELBOW": 180}, "tolerances": {"START": 35}, "surface_height": 720}
"""
import json
import logging
from pathlib import Path
from typing import List, Union

from pydantic import TypeAdapter, ValidationError

from .models import Challenge, ChallengeType, ScoringConfig, TargetAngles, Tolerances

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when a challenge or scoring configuration cannot be used."""


DEFAULT_TARGET_ANGLES = TargetAngles(ELBOW=180.0, SHOULDER=180.0, KNEE_STRAIGHT=180.0, TILT=0.0)
DEFAULT_TOLERANCES = Tolerances(ELBOW=30.0, SHOULDER=30.0, KNEE=20.0, TILT=15.0, START=40.0)
DEFAULT_SCORING = ScoringConfig(targets=DEFAULT_TARGET_ANGLES, tolerances=DEFAULT_TOLERANCES)

DEFAULT_CHALLENGES = [
    Challenge(
        name="Left Arm Raise",
        target_type=ChallengeType.ARM,
        eval_joints=["LEFT_ELBOW", "LEFT_SHOULDER"],
        message="Raise your **left arm** straight above your head.",
    ),
    Challenge(
        name="Right Arm Raise",
        target_type=ChallengeType.ARM,
        eval_joints=["RIGHT_ELBOW", "RIGHT_SHOULDER"],
        message="Raise your **right arm** straight above your head.",
    ),
    Challenge(
        name="One-Leg Balance",
        target_type=ChallengeType.LEG_BALANCE,
        eval_joints=["RIGHT_KNEE", "RIGHT_HIP"],
        message="Stand on your **right leg** and keep your hips level.",
    ),
]


def default_challenges() -> List[Challenge]:
    """Fresh copies, so a session can write scores without touching the defaults."""
    return [c.model_copy(deep=True) for c in DEFAULT_CHALLENGES]


def load_json(p: Union[str, Path]):
    try:
        with open(p, "r", encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"{p} is not valid JSON: {e}") from e


def load_challenges(path: Union[str, Path]) -> List[Challenge]:
    try:
        challenges = TypeAdapter(List[Challenge]).validate_python(load_json(path))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid challenge file {path}: {e}") from e

    if not challenges:
        raise ConfigurationError(f"Challenge file {path} defines no challenges")
    for c in challenges:
        if c.target_type == ChallengeType.ARM and not c.eval_joints:
            logger.warning(f"Challenge '{c.name}' has no eval joints and will always score 0")
        c.score = None

    logger.info(f"Loaded {len(challenges)} challenges from {path}")
    return challenges


def load_scoring_config(path: Union[str, Path]) -> ScoringConfig:
    try:
        return ScoringConfig.model_validate(load_json(path))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid scoring config {path}: {e}") from e
