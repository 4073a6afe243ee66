import json
from typing import Sequence

from .models import Challenge, ChallengeScore, ScoreTier, SessionReport

SUCCESS_HEADLINE = "**All challenges complete!** Average score: {mean:.1f}%<br>A perfect run, great work!"
RETRY_HEADLINE = "**All challenges complete!** Average score: {mean:.1f}%<br>Check your results and try again!"


def aggregate_results(challenges: Sequence[Challenge]) -> SessionReport:
    """Summarize finalized challenge scores. Unscored challenges count as 0."""
    scores = [ChallengeScore(name=c.name, score=c.score or 0.0) for c in challenges]
    mean = sum(s.score for s in scores) / len(scores) if scores else 0.0

    if mean > 90:
        headline, tier = SUCCESS_HEADLINE.format(mean=mean), ScoreTier.GOOD
    else:
        headline, tier = RETRY_HEADLINE.format(mean=mean), ScoreTier.FAIR

    return SessionReport(scores=scores, mean_score=mean, headline=headline, tier=tier)


def format_report(report: SessionReport) -> str:
    lines = [f"{s.name}: {s.score:.1f}%" for s in report.scores]
    lines.append(f"Average Score: {report.mean_score:.1f}%")
    return "\n".join(lines)


def export_report_json(report: SessionReport, path: str) -> None:
    """Export SessionReport information to a JSON file."""
    with open(path, "w") as f:
        json.dump(report.model_dump(mode="json"), f, indent=2)
