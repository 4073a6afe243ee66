import io
import logging
import os
import tempfile

import cv2
import streamlit as st

from .config import ConfigurationError, DEFAULT_SCORING, default_challenges, load_challenges
from .models import SessionState
from .replay import parse_recording, replay_session
from .results import export_report_json, format_report
from .utils import blank_canvas, create_report, render_session_frame


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    st.set_page_config(page_title="Pose Challenge", layout="wide")

    st.title("Pose Challenge Replay")
    st.markdown("""
    Replays a recorded landmark stream through the challenge session:
    start pose, countdown, hold, and the final score for each challenge.
    """)

    # Sidebar
    st.sidebar.title("Settings")
    surface_height = st.sidebar.number_input(
        "Rendering surface height (px)",
        min_value=120, max_value=2160, value=DEFAULT_SCORING.surface_height, step=10,
        help="Used to convert the hip-levelness check into pixels"
    )
    challenge_file = st.sidebar.file_uploader(
        "Challenge list (JSON, optional)",
        type=["json"],
    )

    uploaded_file = st.file_uploader(
        "Upload a landmark recording (JSON lines)",
        type=["jsonl", "json"],
        help="One object per frame: {\"t\": seconds, \"landmarks\": [[x, y, z, visibility], ...]}"
    )

    if not uploaded_file:
        return

    try:
        if challenge_file:
            with tempfile.NamedTemporaryFile(delete=False, suffix='.json') as tmp_file:
                tmp_file.write(challenge_file.read())
                challenge_path = tmp_file.name
            try:
                challenges = load_challenges(challenge_path)
            finally:
                os.unlink(challenge_path)
        else:
            challenges = default_challenges()
    except ConfigurationError as e:
        st.error(str(e))
        return

    config = DEFAULT_SCORING.model_copy(update={"surface_height": int(surface_height)})
    frozen = {}

    def keep_frozen(state: SessionState):
        if state.frozen_skeleton is not None:
            frozen.setdefault(state.challenge_index, state)

    try:
        with st.spinner("Replaying session..."):
            frames = parse_recording(io.StringIO(uploaded_file.getvalue().decode("utf-8")))
            session = replay_session(frames, challenges, config=config, tail=5.0, on_state=keep_frozen)
    except Exception as e:
        st.error(f"Error processing recording: {str(e)}")
        return

    col1, col2 = st.columns([2, 1])

    with col1:
        st.subheader("Final Poses")
        for index, state in sorted(frozen.items()):
            canvas = blank_canvas(height=config.surface_height, width=config.surface_height * 4 // 3)
            img = render_session_frame(canvas, state, None)
            st.image(cv2.cvtColor(img, cv2.COLOR_BGR2RGB), caption=session.challenges[index].name)

    with col2:
        st.subheader("Results")
        if session.report is None:
            st.warning(f"Recording ended before the session finished ({session.state.phase.value}).")
            for c in session.challenges:
                st.text(f"{c.name}: {'--' if c.score is None else f'{c.score:.1f}%'}")
            return

        if session.report.mean_score > 90:
            st.success(session.report.headline.replace("<br>", "\n\n"))
        else:
            st.info(session.report.headline.replace("<br>", "\n\n"))
        st.text(format_report(session.report))

        report_path = os.path.join(tempfile.gettempdir(), "pose_challenge_report.json")
        export_report_json(session.report, report_path)
        with open(report_path, "rb") as report_file:
            st.download_button(
                label="Download Report (JSON)",
                data=report_file,
                file_name="pose_challenge_report.json",
                mime="application/json",
            )
        os.remove(report_path)

        image_path = os.path.join(tempfile.gettempdir(), "pose_challenge_report.png")
        create_report(session.report, image_path)
        st.image(image_path)
        os.remove(image_path)


if __name__ == "__main__":
    main()
