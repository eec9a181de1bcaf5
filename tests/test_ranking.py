import pytest

from conftest import make_photo
from prepro.core.exceptions import NoSelectionError, UpstreamGenerationError
from prepro.services import house_bias
from prepro.services.candidates import Candidate
from prepro.services.ranking import (
    FALLBACK_RATIONALE,
    Fallback,
    Pick,
    Ranked,
    RankingSelector,
    fallback_selection,
    filter_selection,
)


def _candidates(n, alts=None):
    alts = alts or [f"photo {i}" for i in range(n)]
    return [Candidate.from_pexels(make_photo(i, alt=alts[i])) for i in range(n)]


def test_ranked_keeps_first_three_selections(generation, shot):
    generation.queue({
        "selections": [
            {"index": 4, "why_this_works": "Motivated single source."},
            {"index": 1, "why_this_works": "Restrained, close."},
            {"index": 0, "why_this_works": "Patient, observational."},
            {"index": 2, "why_this_works": "Extra pick."},
        ]
    })
    outcome = RankingSelector(generation).rank(shot, _candidates(5))

    assert isinstance(outcome, Ranked)
    assert [p.index for p in outcome.picks] == [4, 1, 0]
    assert outcome.picks[0].why_this_works == "Motivated single source."


def test_ranking_prompt_uses_house_block_and_descriptors(generation, shot):
    generation.queue({"selections": [{"index": 0, "why_this_works": "ok"}]})
    RankingSelector(generation).rank(shot, _candidates(2, alts=["Lamp-lit face", ""]))

    call = generation.calls[0]
    assert call["system"].startswith(house_bias.injection_block())
    assert call["temperature"] == 0.3
    assert "[0] Lamp-lit face" in call["user"]
    assert "[1] No description available" in call["user"]
    assert "single practical overhead" in call["user"]
    assert "MCU eye-level" in call["user"]


@pytest.mark.parametrize("response", [
    UpstreamGenerationError("Model returned no content"),
    "not json at all",
    {"picks": []},
    {"selections": [{"why_this_works": "no index"}]},
])
def test_unusable_ranking_falls_back(generation, shot, response):
    generation.queue(response)
    outcome = RankingSelector(generation).rank(shot, _candidates(5))

    assert isinstance(outcome, Fallback)
    assert [p.index for p in outcome.picks] == [0, 1, 2]
    assert all(p.why_this_works == FALLBACK_RATIONALE for p in outcome.picks)


@pytest.mark.parametrize("n", [1, 2, 3, 7])
def test_fallback_count_is_min_of_three_and_candidates(n):
    assert len(fallback_selection(n, "reason").picks) == min(3, n)


def test_out_of_range_selections_are_dropped():
    candidates = _candidates(5)
    outcome = Ranked(picks=[Pick(0, "kept"), Pick(99, "dropped"), Pick(-1, "dropped")])

    selected = filter_selection(outcome, candidates)

    assert len(selected) == 1
    assert selected[0].candidate is candidates[0]
    assert selected[0].why_this_works == "kept"


def test_all_out_of_range_raises_no_selection():
    with pytest.raises(NoSelectionError):
        filter_selection(Ranked(picks=[Pick(5, "x"), Pick(6, "y")]), _candidates(5))


def test_empty_ranked_selection_raises_no_selection():
    with pytest.raises(NoSelectionError):
        filter_selection(Ranked(picks=[]), _candidates(5))
