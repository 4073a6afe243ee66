import pytest

from pose_challenge.models import Landmark, Point, Skeleton

L = Landmark

# Both arms straight up, standing straight on level hips.
# Dyadic coordinates keep the angle arithmetic exact.
RAISED_ARMS = {
    L.LEFT_WRIST: (0.625, 0.125),
    L.LEFT_ELBOW: (0.625, 0.25),
    L.LEFT_SHOULDER: (0.625, 0.375),
    L.LEFT_HIP: (0.625, 0.625),
    L.RIGHT_WRIST: (0.375, 0.125),
    L.RIGHT_ELBOW: (0.375, 0.25),
    L.RIGHT_SHOULDER: (0.375, 0.375),
    L.RIGHT_HIP: (0.375, 0.625),
    L.LEFT_KNEE: (0.625, 0.75),
    L.LEFT_ANKLE: (0.625, 0.875),
    L.RIGHT_KNEE: (0.375, 0.75),
    L.RIGHT_ANKLE: (0.375, 0.875),
}


def build_skeleton(overrides=None, visibility=1.0, base=None):
    coords = dict(RAISED_ARMS if base is None else base)
    points = {lm: Point(x=0.5, y=0.5, visibility=visibility) for lm in Landmark}
    for lm, (x, y) in coords.items():
        points[lm] = Point(x=x, y=y, visibility=visibility)
    for lm, value in (overrides or {}).items():
        points[lm] = value if isinstance(value, Point) else Point(x=value[0], y=value[1], visibility=visibility)
    return Skeleton(points=tuple(points[lm] for lm in Landmark))


@pytest.fixture
def make_skeleton():
    return build_skeleton


@pytest.fixture
def start_pose():
    return build_skeleton()


@pytest.fixture
def arms_down():
    return build_skeleton({
        L.LEFT_ELBOW: (0.625, 0.5),
        L.LEFT_WRIST: (0.625, 0.625),
        L.RIGHT_ELBOW: (0.375, 0.5),
        L.RIGHT_WRIST: (0.375, 0.625),
    })
