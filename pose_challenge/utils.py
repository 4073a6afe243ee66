import re
import cv2
import numpy as np
from typing import List, Optional, Tuple

from .models import Landmark, Phase, ScoreTier, SessionReport, SessionState, Skeleton

L = Landmark

BODY_CONNECTIONS = [
    (L.LEFT_SHOULDER, L.RIGHT_SHOULDER),
    (L.LEFT_SHOULDER, L.LEFT_ELBOW), (L.LEFT_ELBOW, L.LEFT_WRIST),
    (L.RIGHT_SHOULDER, L.RIGHT_ELBOW), (L.RIGHT_ELBOW, L.RIGHT_WRIST),
    (L.LEFT_SHOULDER, L.LEFT_HIP), (L.RIGHT_SHOULDER, L.RIGHT_HIP),
    (L.LEFT_HIP, L.RIGHT_HIP),
    (L.LEFT_HIP, L.LEFT_KNEE), (L.LEFT_KNEE, L.LEFT_ANKLE),
    (L.RIGHT_HIP, L.RIGHT_KNEE), (L.RIGHT_KNEE, L.RIGHT_ANKLE),
    (L.LEFT_ANKLE, L.LEFT_HEEL), (L.LEFT_HEEL, L.LEFT_FOOT_INDEX),
    (L.RIGHT_ANKLE, L.RIGHT_HEEL), (L.RIGHT_HEEL, L.RIGHT_FOOT_INDEX),
]

# (line, dot) colours, BGR
LIVE_COLORS = ((0, 255, 0), (0, 0, 255))
FROZEN_COLORS = ((0, 215, 255), (0, 165, 255))

TIER_COLORS = {
    ScoreTier.GOOD: (80, 175, 76),
    ScoreTier.FAIR: (7, 193, 255),
    ScoreTier.POOR: (54, 67, 244),
}

MIN_DRAW_VISIBILITY = 0.5


def parse_markup(message: str) -> List[Tuple[str, bool]]:
    """Split a guide message on <br> into (text, emphasized) lines; **...** marks emphasis."""
    lines = []
    for part in re.split(r"<br\s*/?>", message):
        emphasized = "**" in part
        text = part.replace("**", "").strip()
        if text:
            lines.append((text, emphasized))
    return lines


def format_score(state: SessionState) -> str:
    if state.display_score is None:
        return "--"
    if state.phase == Phase.FINISHED:
        return f"{state.display_score:.1f} % (average)"
    if state.frozen_skeleton is not None:
        return f"{state.display_score:.1f} % (FINAL)"
    return f"{state.display_score:.1f} %"


def draw_skeleton(frame: np.ndarray, skeleton: Optional[Skeleton], frozen: bool = False) -> np.ndarray:
    """Draw the body skeleton in place, using the frozen colour pair once a pose is locked."""
    if skeleton is None:
        return frame

    h, w = frame.shape[:2]
    line_color, dot_color = FROZEN_COLORS if frozen else LIVE_COLORS

    def px(lm):
        p = skeleton[lm]
        return int(p.x * w), int(p.y * h)

    for a, b in BODY_CONNECTIONS:
        if skeleton[a].visibility >= MIN_DRAW_VISIBILITY and skeleton[b].visibility >= MIN_DRAW_VISIBILITY:
            cv2.line(frame, px(a), px(b), line_color, 4, lineType=cv2.LINE_AA)

    for lm in Landmark:
        if skeleton[lm].visibility >= MIN_DRAW_VISIBILITY:
            cv2.circle(frame, px(lm), 4, dot_color, thickness=-1, lineType=cv2.LINE_AA)
    return frame


def draw_hud(frame: np.ndarray, state: SessionState) -> np.ndarray:
    h, w = frame.shape[:2]
    cv2.rectangle(frame, (0, 0), (w, 50), (0, 0, 0), -1)
    cv2.putText(frame, f"MATCH: {format_score(state)}", (15, 35),
                cv2.FONT_HERSHEY_SIMPLEX, 0.9, TIER_COLORS[state.score_tier], 2)

    if state.timer_display is not None:
        cv2.putText(frame, state.timer_display, (w - 150, 40),
                    cv2.FONT_HERSHEY_SIMPLEX, 1.3, (255, 255, 255), 3)

    lines = parse_markup(state.guide_message)
    y = h - 30 * len(lines) - 15
    cv2.rectangle(frame, (0, y - 5), (w, h), (0, 0, 0), -1)
    for text, emphasized in lines:
        y += 30
        cv2.putText(frame, text, (15, y), cv2.FONT_HERSHEY_SIMPLEX, 0.65,
                    (255, 255, 255), 2 if emphasized else 1, lineType=cv2.LINE_AA)
    return frame


def render_session_frame(frame: np.ndarray, state: SessionState, live_skeleton: Optional[Skeleton]) -> np.ndarray:
    """Overlay the session state on a copy of the camera frame."""
    img = frame.copy()
    if state.frozen_skeleton is not None:
        draw_skeleton(img, state.frozen_skeleton, frozen=True)
    else:
        draw_skeleton(img, live_skeleton)
    return draw_hud(img, state)


def blank_canvas(width: int = 640, height: int = 480) -> np.ndarray:
    return np.zeros((height, width, 3), dtype=np.uint8)


def create_report(report: SessionReport, output_path: str, width: int = 640) -> None:
    """Write the session summary as an image."""
    height = 140 + 40 * len(report.scores)
    img = np.ones((height, width, 3), dtype=np.uint8) * 255

    for i, (text, _) in enumerate(parse_markup(report.headline)):
        cv2.putText(img, text, (20, 40 + 35 * i), cv2.FONT_HERSHEY_SIMPLEX, 0.7,
                    TIER_COLORS[report.tier], 2)

    y_pos = 120
    for entry in report.scores:
        cv2.putText(img, f"- {entry.name}: {entry.score:.1f}%", (20, y_pos),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 0, 0), 2)
        y_pos += 40

    cv2.imwrite(output_path, img)
