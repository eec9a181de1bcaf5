# prepro/services/contracts.py

"""
Response contracts for the four generation stages.

Each stage asks the model for a single JSON object. A response is accepted
when it decodes to an object that carries the stage's top-level key and the
shape below. Values of nominally enumerated fields (shot_size, angle,
camera_energy, ...) are NOT checked against their enum sets; whatever the
model writes is stored as text.
"""

from __future__ import annotations

import json
from typing import ClassVar, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from prepro.core.exceptions import UpstreamGenerationError


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


# --- scenes ---------------------------------------------------------------

class SceneItem(_Lenient):
    scene_number: Optional[int] = None
    int_ext: Optional[str] = None
    location: Optional[str] = None
    time_of_day: Optional[str] = None
    characters: Optional[List[str]] = None
    beat_summary: Optional[str] = None


class ScenesResult(_Lenient):
    key: ClassVar[str] = "scenes"

    scenes: List[SceneItem]


# --- style profile --------------------------------------------------------

class LensBias(_Lenient):
    primary: str
    secondary: str


class LightingPhilosophy(_Lenient):
    key_style: str
    source_bias: str
    contrast_level: str


class ColorBias(_Lenient):
    temperature: str
    saturation: str


class StyleProfile(_Lenient):
    camera_energy: str
    movement_frequency: str
    lens_bias: LensBias
    framing_bias: List[str]
    lighting_philosophy: LightingPhilosophy
    color_bias: ColorBias
    texture: List[str]
    coverage_philosophy: str
    directing_priorities: List[str]


class StyleResult(_Lenient):
    key: ClassVar[str] = "style_profile"

    style_profile: StyleProfile


# --- shots ----------------------------------------------------------------

class ReferenceTargets(_Lenient):
    lighting: Optional[str] = None
    framing: Optional[str] = None
    movement: Optional[str] = None
    depth: Optional[str] = None
    texture: Optional[str] = None


class ShotItem(_Lenient):
    shot_code: Optional[str] = None
    shot_size: Optional[str] = None
    angle: Optional[str] = None
    movement: Optional[str] = None
    lens_suggestion: Optional[str] = None
    blocking_notes: Optional[str] = None
    intent_text: Optional[str] = None
    audio_notes: Optional[str] = None
    time_cost_estimate: Optional[str] = None
    reference_targets: Optional[ReferenceTargets] = None
    search_prompts: Optional[List[str]] = None


class ShotsResult(_Lenient):
    key: ClassVar[str] = "shots"

    shots: List[ShotItem]


# --- ranking --------------------------------------------------------------

class Selection(_Lenient):
    index: int
    why_this_works: Optional[str] = None


class RankingResult(_Lenient):
    key: ClassVar[str] = "selections"

    selections: List[Selection]


Contract = TypeVar("Contract", ScenesResult, StyleResult, ShotsResult, RankingResult)


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        parts = text.split("```")
        if len(parts) >= 3:
            inner = parts[1]
            if inner.startswith("json"):
                inner = inner[4:]
            text = inner.strip()
    return text


def decode_contract(contract: Type[Contract], text: Optional[str]) -> Contract:
    """
    Decode a raw model response into ``contract``.

    Raises UpstreamGenerationError when the text is empty, is not a JSON
    object, lacks the contract's top-level key, or does not fit its shape.
    """
    if not text or not text.strip():
        raise UpstreamGenerationError("Model returned no content", {"contract": contract.__name__})

    try:
        data = json.loads(_strip_code_fence(text))
    except json.JSONDecodeError as e:
        raise UpstreamGenerationError(
            f"Invalid JSON from model: {e}", {"contract": contract.__name__}
        )

    if not isinstance(data, dict):
        raise UpstreamGenerationError(
            "Model response is not a JSON object", {"contract": contract.__name__}
        )

    if contract.key not in data:
        raise UpstreamGenerationError(
            f"Missing '{contract.key}' in model output", {"contract": contract.__name__}
        )

    try:
        return contract.model_validate(data)
    except ValidationError as e:
        raise UpstreamGenerationError(
            f"Model output does not match {contract.__name__}",
            {"contract": contract.__name__, "errors": e.error_count()},
        )
