# prepro/services/ranking.py

"""
Picks the reference images for a shot out of the acquired candidates.

The model ranks candidates against the house personality. When the model
call fails or its answer can't be decoded, the first candidates are taken
in acquisition order instead; that path is a normal outcome, not an error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from prepro import models
from prepro.core.config import settings
from prepro.core.exceptions import NoSelectionError, UpstreamGenerationError
from prepro.core.logging import get_logger
from prepro.services.candidates import Candidate
from prepro.services.contracts import RankingResult, decode_contract
from prepro.services.generation import GenerationClient
from prepro.services.prompt_builder import PromptBuilder

logger = get_logger("ranking")

RANKING_TEMPERATURE = 0.3
FALLBACK_RATIONALE = "Selected as a reference for framing and lighting intent."


@dataclass(frozen=True)
class Pick:
    index: int
    why_this_works: Optional[str]


@dataclass(frozen=True)
class Ranked:
    """Selections as the model returned them (possibly out of range)."""

    picks: List[Pick]


@dataclass(frozen=True)
class Fallback:
    """First-N candidates with the generic rationale."""

    picks: List[Pick]
    reason: str


RankingOutcome = Union[Ranked, Fallback]


@dataclass(frozen=True)
class Selected:
    candidate: Candidate
    why_this_works: Optional[str]


def fallback_selection(candidate_count: int, reason: str, limit: int = None) -> Fallback:
    limit = limit or settings.REFERENCES_PER_SHOT
    picks = [Pick(index=i, why_this_works=FALLBACK_RATIONALE) for i in range(min(limit, candidate_count))]
    return Fallback(picks=picks, reason=reason)


def filter_selection(outcome: RankingOutcome, candidates: Sequence[Candidate]) -> List[Selected]:
    """
    Drop picks whose index is outside the candidate list.
    Raises NoSelectionError when nothing is left.
    """
    selected = [
        Selected(candidate=candidates[p.index], why_this_works=p.why_this_works)
        for p in outcome.picks
        if 0 <= p.index < len(candidates)
    ]
    dropped = len(outcome.picks) - len(selected)
    if dropped:
        logger.warning(f"[Ranking] Dropped {dropped} out-of-range selection(s)")

    if not selected:
        raise NoSelectionError()
    return selected


class RankingSelector:

    def __init__(self, generation: GenerationClient, limit: int = None):
        self.generation = generation
        self.limit = limit or settings.REFERENCES_PER_SHOT

    def rank(self, shot: models.Shot, candidates: Sequence[Candidate]) -> RankingOutcome:
        system_prompt, user_prompt = PromptBuilder.ranking_prompts(
            shot, [c.alt for c in candidates]
        )

        try:
            text = self.generation.complete_json(
                system_prompt, user_prompt, temperature=RANKING_TEMPERATURE
            )
            result = decode_contract(RankingResult, text)
        except UpstreamGenerationError as e:
            logger.warning(f"[Ranking] Falling back to acquisition order for shot {shot.id}: {e.message}")
            return fallback_selection(len(candidates), e.message, self.limit)

        picks = [
            Pick(index=s.index, why_this_works=s.why_this_works)
            for s in result.selections[: self.limit]
        ]
        return Ranked(picks=picks)

    def select(self, shot: models.Shot, candidates: Sequence[Candidate]) -> List[Selected]:
        return filter_selection(self.rank(shot, candidates), candidates)
