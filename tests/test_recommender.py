import pytest

from dog_match.config import ScoringConfig
from dog_match.derive import DEFAULT_BREED_SIZES
from dog_match.filtering import CATEGORY_THRESHOLDS, TOP_PICKS_THRESHOLDS, ThresholdPolicy, filter_scored
from dog_match.models import (
    CandidateKind,
    DogParkMeetup,
    DogProfile,
    Event,
    OtherDog,
    Requirements,
    TrainingClass,
)
from dog_match.recommender import rank, rank_across_categories, score_candidates, top_picks


def _dog(**overrides) -> DogProfile:
    data = {"id": "d1", "name": "Scout", "breed": "Beagle", "age": 3.0, "energy": "Medium"}
    data.update(overrides)
    return DogProfile(**data)


def _general(event_id: str, **requirements) -> Event:
    return Event(id=event_id, title=event_id, requirements=Requirements(**requirements))


# Scores against _dog(): 100, 70, 50, 15
GENERAL_EVENTS = [
    _general("e50", energy_levels=frozenset({"High"}), dog_sizes=frozenset({"Large"})),
    _general("e100"),
    _general("e15", energy_levels=frozenset({"High"}), dog_sizes=frozenset({"Large"}), required_abilities=frozenset({"OffLeash"})),
    _general("e70", energy_levels=frozenset({"High"})),
]


def test_raw_scores_keep_input_order() -> None:
    scored = score_candidates(_dog(), GENERAL_EVENTS)
    assert [(s.candidate.id, s.score) for s in scored] == [("e50", 50), ("e100", 100), ("e15", 15), ("e70", 70)]


@pytest.mark.parametrize(
    ("threshold", "expected"),
    [
        (0, ["e100", "e70", "e50", "e15"]),
        (15, ["e100", "e70", "e50"]),
        (50, ["e100", "e70"]),
        (69, ["e100", "e70"]),
        (70, ["e100"]),
        (100, []),
    ],
)
def test_threshold_is_strictly_greater(threshold: int, expected: list[str]) -> None:
    policy = ThresholdPolicy.flat("test", threshold)
    ranked = rank(_dog(), GENERAL_EVENTS, policy=policy)
    assert [s.candidate.id for s in ranked] == expected


def test_ties_keep_input_order() -> None:
    events = [_general("b"), _general("a"), _general("c", energy_levels=frozenset({"High"})), _general("d")]
    ranked = rank(_dog(), events, policy=ThresholdPolicy.flat("test", 0))
    assert [s.candidate.id for s in ranked] == ["b", "a", "d", "c"]


def test_limit_truncates_after_sorting() -> None:
    ranked = rank(_dog(), GENERAL_EVENTS, policy=ThresholdPolicy.flat("test", 0), limit=2)
    assert [s.candidate.id for s in ranked] == ["e100", "e70"]


def test_duplicate_candidates_are_shown_once() -> None:
    ranked = rank(_dog(), [_general("same"), _general("same")], policy=ThresholdPolicy.flat("test", 0))
    assert len(ranked) == 1


def test_candidate_list_is_not_modified() -> None:
    candidates = list(GENERAL_EVENTS)
    rank_across_categories(_dog(), candidates)
    assert candidates == GENERAL_EVENTS


def _mixed_candidates() -> list:
    return [
        _general("walk"),
        Event(
            id="playdate",
            title="Beagle playdate",
            category="Playdate",
            requirements=Requirements(energy_levels=frozenset({"Medium"}), dog_sizes=frozenset({"Medium"})),
        ),
        Event(
            id="trial",
            title="Herding trial",
            category="Competition",
            requirements=Requirements(breed_allow_list=("Collie",)),
        ),
        DogParkMeetup(id="park", title="Quiet park", requirements=Requirements(tags=("Quiet hours",))),
        DogParkMeetup(id="lake", title="Lake park", requirements=Requirements(tags=("Medium dogs welcome", "Water"))),
        TrainingClass(id="class", title="Manners", requirements=Requirements(training_level="Beginner")),
    ]


def test_rank_across_categories_buckets_and_merges() -> None:
    recs = rank_across_categories(_dog(), _mixed_candidates())
    assert set(recs.buckets) == {
        CandidateKind.GENERAL,
        CandidateKind.PLAYDATE,
        CandidateKind.DOG_PARK,
        CandidateKind.TRAINING,
    }
    assert [s.candidate.id for s in recs.bucket(CandidateKind.DOG_PARK)] == ["lake", "park"]
    assert recs.bucket(CandidateKind.COMPETITION) == []
    scores = [s.score for s in recs.all]
    assert scores == sorted(scores, reverse=True)
    assert recs.all[0].candidate.id == "walk"


def test_ineligible_candidate_is_visible_only_in_raw_scores() -> None:
    raw = {s.candidate.id: s for s in score_candidates(_dog(), _mixed_candidates())}
    assert raw["trial"].score == 0
    assert raw["trial"].result.disqualified
    assert rank(_dog(), _mixed_candidates(), CandidateKind.COMPETITION) == []


def test_rank_single_kind() -> None:
    ranked = rank(_dog(), _mixed_candidates(), CandidateKind.DOG_PARK)
    assert [s.candidate.id for s in ranked] == ["lake", "park"]


def test_top_picks_use_flat_threshold() -> None:
    picks = top_picks(_dog(), _mixed_candidates())
    ids = [s.candidate.id for s in picks]
    # the plain park (40) clears its category bar of 20 but not the flat 50
    assert "park" not in ids
    assert len(picks) <= 3
    assert all(s.score > 50 for s in picks)


def test_category_and_top_picks_thresholds() -> None:
    assert CATEGORY_THRESHOLDS.threshold_for(CandidateKind.TRAINING) == 30
    assert CATEGORY_THRESHOLDS.threshold_for(CandidateKind.PLAYDATE) == 40
    assert CATEGORY_THRESHOLDS.threshold_for(CandidateKind.DOG_PARK) == 20
    assert CATEGORY_THRESHOLDS.threshold_for(CandidateKind.COMPETITION) == 50
    assert all(TOP_PICKS_THRESHOLDS.threshold_for(kind) == 50 for kind in CandidateKind)


def test_policy_overrides_do_not_touch_the_original() -> None:
    relaxed = CATEGORY_THRESHOLDS.with_overrides({CandidateKind.COMPETITION: 10})
    assert relaxed.threshold_for(CandidateKind.COMPETITION) == 10
    assert CATEGORY_THRESHOLDS.threshold_for(CandidateKind.COMPETITION) == 50


def test_filter_scored_drops_disqualified_even_at_zero_threshold() -> None:
    scored = score_candidates(_dog(), _mixed_candidates())
    kept = filter_scored(scored, ThresholdPolicy.flat("zero", 0))
    assert "trial" not in [s.candidate.id for s in kept]


def test_subject_dog_is_not_its_own_playmate() -> None:
    dog = _dog()
    friend = _dog(id="d2", name="Friend")
    scored = score_candidates(dog, [OtherDog(dog), OtherDog(friend)])
    assert [s.candidate.id for s in scored] == ["d2"]


def test_config_breed_table_is_used() -> None:
    table = DEFAULT_BREED_SIZES.extended(large=("beagle",))
    event = _general("big", dog_sizes=frozenset({"Large"}))
    default_score = score_candidates(_dog(), [event])[0].score
    custom_score = score_candidates(_dog(), [event], ScoringConfig(breed_sizes=table))[0].score
    assert (default_score, custom_score) == (80, 100)


def test_config_limit_applies_to_buckets_and_all() -> None:
    recs = rank_across_categories(_dog(), _mixed_candidates(), config=ScoringConfig(limit=1))
    assert all(len(items) == 1 for items in recs.buckets.values())
    assert len(recs.all) == 1


def test_empty_candidate_list() -> None:
    recs = rank_across_categories(_dog(), [])
    assert recs.empty
    assert recs.buckets == {}


def test_open_category_candidates_are_shown() -> None:
    candidates = [
        Event(id="open-playdate", title="Anyone welcome", category="Playdate"),
        TrainingClass(id="open-class", title="Drop-in class"),
    ]
    recs = rank_across_categories(_dog(), candidates)
    assert [s.candidate.id for s in recs.all] == ["open-playdate", "open-class"]
    assert all(s.score == 100 for s in recs.all)


def test_unmatched_candidate_is_eligible_but_disqualified_is_not() -> None:
    candidates = _mixed_candidates() + [
        Event(id="no-match", title="Small dogs", category="Playdate", requirements=Requirements(dog_sizes=frozenset({"Small"}))),
    ]
    raw = {s.candidate.id: s for s in score_candidates(_dog(), candidates)}
    assert raw["no-match"].score == 0
    assert not raw["no-match"].result.disqualified

    kept = [s.candidate.id for s in filter_scored(raw.values(), ThresholdPolicy.flat("below_zero", -1))]
    assert "no-match" in kept
    assert "trial" not in kept
