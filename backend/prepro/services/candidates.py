# prepro/services/candidates.py

"""
Reference image candidates from the Pexels photo search API.
"""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import requests

from prepro.core.config import settings
from prepro.core.exceptions import CandidateSourceError, MissingInputError, NoCandidatesError
from prepro.core.logging import get_logger
from prepro.models import ReferenceProvider

logger = get_logger("candidates")

PEXELS_LICENSE = "Pexels License - Free to use"


@dataclass
class Candidate:
    """One photo returned by the provider, not yet selected."""

    id: Optional[int]
    alt: Optional[str]
    photographer: Optional[str]
    photographer_url: Optional[str]
    src: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_pexels(cls, photo: Dict[str, Any]) -> "Candidate":
        return cls(
            id=photo.get("id"),
            alt=photo.get("alt") or None,
            photographer=photo.get("photographer"),
            photographer_url=photo.get("photographer_url"),
            src=photo.get("src") or {},
        )

    @property
    def image_url(self) -> Optional[str]:
        return self.src.get("large") or self.src.get("original")

    @property
    def is_usable(self) -> bool:
        # a reference row needs an image url and someone to credit
        return bool(self.image_url and self.photographer)

    def attribution(self) -> Dict[str, Any]:
        """Fields stored on a recommended_image reference row."""
        return {
            "url": self.image_url,
            "preview_url": self.src.get("medium"),
            "attribution_text": f"Photo by {self.photographer}",
            "attribution_url": self.photographer_url,
            "license_info": PEXELS_LICENSE,
            "provider": ReferenceProvider.pexels,
        }


class CandidateSource:
    """Pexels photo search over plain HTTP."""

    def __init__(self, api_key: str = None, base_url: str = None, timeout: float = None):
        self.api_key = api_key or settings.PEXELS_API_KEY
        self.base_url = base_url or settings.PEXELS_BASE_URL
        self.timeout = timeout or settings.PEXELS_TIMEOUT_SECONDS

    def search(self, query: str, per_page: int) -> List[Candidate]:
        """Landscape photos for ``query``, in the provider's relevance order."""
        if not self.api_key:
            raise CandidateSourceError("PEXELS_API_KEY is not configured")

        headers = {"Authorization": self.api_key}
        params = {
            "query": query,
            "per_page": per_page,
            "orientation": "landscape",
        }

        try:
            resp = requests.get(
                f"{self.base_url}/search",
                headers=headers,
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise CandidateSourceError(f"Pexels request failed: {e}", {"query": query})

        if not resp.ok:
            raise CandidateSourceError(
                f"Pexels API error: {resp.status_code}", {"query": query}
            )

        try:
            body = resp.json()
        except ValueError:
            raise CandidateSourceError("Pexels returned an invalid response", {"query": query})
        if not isinstance(body, dict):
            raise CandidateSourceError("Pexels returned an invalid response", {"query": query})

        photos = body.get("photos") or []
        candidates = [Candidate.from_pexels(p) for p in photos]
        usable = [c for c in candidates if c.is_usable]
        if len(usable) < len(candidates):
            logger.warning(
                f"[Pexels] '{query}': skipped {len(candidates) - len(usable)} photo(s) without image url or photographer"
            )
        logger.debug(f"[Pexels] '{query}' -> {len(usable)} photos")
        return usable


def per_prompt_quota(prompt_count: int, total: int) -> int:
    return math.ceil(total / prompt_count)


def acquire_candidates(
    source: CandidateSource,
    search_prompts: Sequence[str],
    total: int = None,
) -> List[Candidate]:
    """
    Query every search prompt in parallel and merge the results.

    Each prompt asks for ceil(total / P) photos; results are concatenated in
    prompt order and cut to ``total``. Raises NoCandidatesError when nothing
    comes back.
    """
    if not search_prompts:
        raise MissingInputError("No search prompts available for this shot")

    total = total or settings.CANDIDATE_QUOTA
    per_prompt = per_prompt_quota(len(search_prompts), total)

    with ThreadPoolExecutor(max_workers=len(search_prompts)) as executor:
        # map() yields in submission order, so prompt order is kept
        results = list(executor.map(lambda q: source.search(q, per_prompt), search_prompts))

    candidates = [c for batch in results for c in batch][:total]
    logger.info(
        f"[Pexels] {len(search_prompts)} prompts x {per_prompt} -> {len(candidates)} candidates"
    )

    if not candidates:
        raise NoCandidatesError()
    return candidates
