import pytest

from dog_match.explain import GOOD_MATCH_MIN, STRONG_MATCH_MIN, explain, group_by_tier, match_tier
from dog_match.models import CandidateKind, Event, Reason, ScoredCandidate, ScoreResult


@pytest.mark.parametrize(
    ("score", "tier"),
    [
        (100, "strong match"),
        (STRONG_MATCH_MIN, "strong match"),
        (STRONG_MATCH_MIN - 1, "good match"),
        (GOOD_MATCH_MIN, "good match"),
        (GOOD_MATCH_MIN - 1, "weak match"),
        (0, "weak match"),
    ],
)
def test_match_tier(score: int, tier: str) -> None:
    assert match_tier(score) == tier


def test_explain_picks_leading_reasons() -> None:
    result = ScoreResult(
        score=65,
        reasons=(
            Reason("Energy level match (High)"),
            Reason("Too young", positive=False),
            Reason("Good size match"),
            Reason("Breed may struggle", positive=False),
            Reason("Off-leash ready"),
        ),
    )
    summary = explain(result)
    assert summary.tier == "good match"
    assert summary.highlights == ["Energy level match (High)", "Good size match"]
    assert summary.cautions == ["Too young"]
    assert len(summary.details) == 5

    wider = explain(result, max_positive=1, max_negative=2)
    assert wider.highlights == ["Energy level match (High)"]
    assert wider.cautions == ["Too young", "Breed may struggle"]


def test_explain_disqualified() -> None:
    summary = explain(ScoreResult.disqualified_result())
    assert summary.tier == "weak match"
    assert summary.highlights == [] and summary.cautions == [] and summary.details == []


def test_group_by_tier() -> None:
    def scored(event_id: str, value: int) -> ScoredCandidate:
        return ScoredCandidate(Event(id=event_id, title=event_id), CandidateKind.GENERAL, ScoreResult(value))

    groups = group_by_tier([scored("a", 95), scored("b", 80), scored("c", 61), scored("d", 10)])
    assert [s.candidate.id for s in groups.strong] == ["a", "b"]
    assert [s.candidate.id for s in groups.good] == ["c"]
    assert [s.candidate.id for s in groups.weak] == ["d"]


def test_score_result_rejects_out_of_range() -> None:
    with pytest.raises(ValueError):
        ScoreResult(101)


def test_disqualified_is_explicit() -> None:
    assert ScoreResult.disqualified_result().disqualified
    assert not ScoreResult(0).disqualified
    with pytest.raises(ValueError):
        ScoreResult(10, disqualified=True)
