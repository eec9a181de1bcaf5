# prepro/services/house_bias.py

"""
The house visual personality.

One fixed profile shared by every request. Prompts take the injection block
verbatim; project look words may refine it but never replace it.
"""

import json
from types import MappingProxyType
from typing import Mapping


def _frozen(groups: dict) -> Mapping[str, Mapping[str, str]]:
    return MappingProxyType({k: MappingProxyType(dict(v)) for k, v in groups.items()})


HOUSE_PROFILE = _frozen({
    "lighting_bias": {
        "source_count": "single",
        "motivation": "practical",
        "contrast": "medium-high",
        "fill_preference": "minimal",
    },
    "framing_bias": {
        "preferred_distance": "medium-close_to_close",
        "composition": "off-center_tolerated",
        "headroom": "limited",
    },
    "camera_bias": {
        "default_state": "static",
        "movement_threshold": "emotionally_justified_only",
    },
    "color_bias": {
        "temperature": "cool-neutral",
        "saturation": "muted",
    },
    "texture_bias": {
        "grain": "tolerated",
        "polish": "low",
    },
    "emotional_bias": {
        "stance": "observational",
        "expression": "withholding",
    },
})

HOUSE_SUMMARY = (
    "The system favors restraint, motivated light, close proximity, and patient "
    "observation, allowing performance and behavior to carry emotional weight "
    "rather than expressive camera language."
)

# Words the model is asked to use / avoid in why_this_works rationales
ALLOWED_RATIONALE_WORDS = ("restrained", "motivated", "observational", "patient", "withholding")
DISALLOWED_RATIONALE_WORDS = ("epic", "cinematic", "dramatic", "stylish", "energetic")

# Concepts search_prompts must carry, and terms they must never contain
REQUIRED_SEARCH_CONCEPTS = (
    "motivated/practical lighting",
    "low-key/shadow-forward",
    "close framing/tight proximity",
    "static/still camera",
    "muted/neutral color",
)
FORBIDDEN_SEARCH_TERMS = ("cinematic", "epic", "dynamic", "stylized", "high-energy")

_PILLARS = (
    (
        "Lighting",
        "Prefer single, motivated sources. Practical light favored over stylization.\n"
        "Shadows are preserved; fill is minimal. Contrast is controlled, not flattened.\n"
        "Bias: Shadow-first, source-aware lighting.\n"
        "Avoid: Even fill, high-key gloss, decorative lighting.",
    ),
    (
        "Framing & Proximity",
        "Strong preference for medium-close to close framing. Wide shots are rare and functional.\n"
        "Subjects are often off-center or constrained. Environment supports subject but does not dominate.\n"
        "Bias: Proximity over spectacle.\n"
        "Avoid: Expansive wides used for visual emphasis alone.",
    ),
    (
        "Camera Energy",
        "Default camera state is static. Movement is rare and emotionally motivated.\n"
        "Camera observes rather than reacts.\n"
        "Bias: Stillness, patience.\n"
        "Avoid: Kinetic or expressive movement without narrative pressure.",
    ),
    (
        "Color & Texture",
        "Cool-neutral color temperature. Muted saturation. Light grain or softness tolerated. "
        "Imperfection accepted.\n"
        "Bias: Naturalistic, understated color.\n"
        "Avoid: Glossy, hyper-saturated, overly clean images.",
    ),
    (
        "Emotional Posture",
        "Observational and withholding. Emotion inferred from behavior, not emphasized by framing.\n"
        "Viewer is not instructed how to feel.\n"
        "Bias: Emotional restraint.\n"
        "Avoid: Visual sentimentality or emotional signaling.",
    ),
)


def profile_as_dict() -> dict:
    """Plain-dict copy of the profile, safe to serialize or hand to callers."""
    return {group: dict(values) for group, values in HOUSE_PROFILE.items()}


def _quoted(words) -> str:
    return ", ".join(f'"{w}"' for w in words)


def injection_block() -> str:
    """Full house personality block, prepended to every stage's system prompt."""
    lines = [
        "=== HOUSE VISUAL PERSONALITY (ALWAYS ACTIVE) ===",
        "",
        HOUSE_SUMMARY,
        "",
        "Personality Profile:",
        json.dumps(profile_as_dict(), indent=2),
    ]
    for name, body in _PILLARS:
        lines += ["", f"--- Pillar: {name} ---", body]

    lines += [
        "",
        "--- Search Prompt Rules ---",
        f"Always include concepts aligned with: {', '.join(REQUIRED_SEARCH_CONCEPTS)}.",
        f"Never include: {_quoted(FORBIDDEN_SEARCH_TERMS)}.",
        "",
        "--- Reference Explanation Language Rules ---",
        f"Allowed words: {', '.join(ALLOWED_RATIONALE_WORDS)}.",
        f"Disallowed words: {', '.join(DISALLOWED_RATIONALE_WORDS)}.",
        "",
        "=== END HOUSE VISUAL PERSONALITY ===",
    ]
    return "\n".join(lines)
