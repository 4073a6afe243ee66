import json

import pytest

from pose_challenge.config import (
    DEFAULT_CHALLENGES,
    ConfigurationError,
    default_challenges,
    load_challenges,
    load_scoring_config,
)
from pose_challenge.models import ChallengeType


def write_json(tmp_path, name, data):
    path = tmp_path / name
    path.write_text(json.dumps(data))
    return path


def test_default_challenges_are_copies():
    challenges = default_challenges()
    challenges[0].score = 42.0
    assert DEFAULT_CHALLENGES[0].score is None
    assert [c.target_type for c in challenges] == [ChallengeType.ARM, ChallengeType.ARM, ChallengeType.LEG_BALANCE]


def test_load_challenges(tmp_path):
    path = write_json(tmp_path, "challenges.json", [
        {"name": "Left", "target_type": "ARM", "eval_joints": ["LEFT_ELBOW", "LEFT_SHOULDER"], "message": "Up!"},
        {"name": "Balance", "target_type": "LEG_BALANCE", "score": 55.0},
    ])
    challenges = load_challenges(path)
    assert [c.name for c in challenges] == ["Left", "Balance"]
    assert challenges[1].target_type == ChallengeType.LEG_BALANCE
    # scores are never preloaded
    assert challenges[1].score is None


def test_load_challenges_rejects_unknown_type(tmp_path):
    path = write_json(tmp_path, "challenges.json", [{"name": "Spin", "target_type": "SPIN"}])
    with pytest.raises(ConfigurationError):
        load_challenges(path)


def test_load_challenges_rejects_empty(tmp_path):
    with pytest.raises(ConfigurationError):
        load_challenges(write_json(tmp_path, "challenges.json", []))


def test_load_scoring_config(tmp_path):
    path = write_json(tmp_path, "scoring.json", {
        "targets": {"ELBOW": 170},
        "tolerances": {"START": 35},
        "surface_height": 720,
    })
    config = load_scoring_config(path)
    assert config.targets.ELBOW == 170.0
    assert config.targets.SHOULDER == 180.0
    assert config.tolerances.START == 35.0
    assert config.tolerances.KNEE == 20.0
    assert config.surface_height == 720


def test_load_scoring_config_rejects_bad_tolerance(tmp_path):
    path = write_json(tmp_path, "scoring.json", {"tolerances": {"ELBOW": 0}})
    with pytest.raises(ConfigurationError):
        load_scoring_config(path)


def test_load_challenges_rejects_truncated_file(tmp_path):
    path = tmp_path / "challenges.json"
    path.write_text('[{"name": "Left Arm Raise",')
    with pytest.raises(ConfigurationError, match="not valid JSON"):
        load_challenges(path)


def test_load_scoring_config_rejects_malformed_file(tmp_path):
    path = tmp_path / "scoring.json"
    path.write_text("{not json")
    with pytest.raises(ConfigurationError):
        load_scoring_config(path)
