import json
from typing import Optional, Sequence, Tuple

from prepro import models
from prepro.core.config import settings
from prepro.services import house_bias

COVERAGE_RULES = {
    "minimal": "fewer shots, rely on masters and select coverage",
    "standard": "balanced approach with key moments covered",
    "safety": "more angles and safety takes",
}

NO_ALT_TEXT = "No description available"


def _constraints_line(constraints: Optional[dict]) -> str:
    c = constraints or {}
    return (
        f"Constraints: Budget={c.get('budget', 'unspecified')}, "
        f"Crew={c.get('crew_size', 'unspecified')}, "
        f"Coverage={c.get('coverage_mode', 'unspecified')}"
    )


def _excerpt(text: Optional[str], limit: int) -> Optional[str]:
    if not text:
        return None
    return text[:limit]


class PromptBuilder:
    """
    Composes (system, user) prompt pairs for each generation stage.
    Every stage except script parsing opens with the full house block.
    """

    @staticmethod
    def scene_parse_prompts(script_text: str) -> Tuple[str, str]:
        system = f"""
You are a script breakdown assistant for indie narrative filmmakers. Parse the given screenplay into scenes.

Visual point of view: {house_bias.HOUSE_SUMMARY}
When writing beat summaries, favor observational and restrained emotional language. Describe what characters do and what tension exists, rather than using dramatic or cinematic framing language.

Return a JSON object with this exact structure:
{{
  "scenes": [
    {{
      "scene_number": 1,
      "int_ext": "INT" or "EXT" or "INT/EXT",
      "location": "APARTMENT - KITCHEN",
      "time_of_day": "NIGHT",
      "characters": ["CHARACTER_NAME_1", "CHARACTER_NAME_2"],
      "beat_summary": "A 1-2 sentence summary of the emotional/dramatic beat of this scene"
    }}
  ]
}}

Rules:
- Extract scene headings (slug lines) to determine INT/EXT, location, and time of day
- List all speaking or described characters in each scene
- Write beat summaries that focus on emotional/dramatic content, not just plot
- If the script doesn't use standard format, do your best to interpret it
- Number scenes sequentially starting from 1
"""
        return system.strip(), script_text

    @staticmethod
    def style_prompts(project: models.Project) -> Tuple[str, str]:
        system = f"""
{house_bias.injection_block()}

You are a cinematography consultant for indie narrative filmmakers. Based on the look/feel words and production constraints provided, generate a cohesive Style Profile.

The house personality above is the baseline. The user's look words refine it but do not override it. If look words conflict with the house personality, the house personality wins.

The filmmaker is working with limited resources. Favor achievable, restrained choices. Prioritize emotional clarity over visual gimmicks.

Return a JSON object with this exact structure:
{{
  "style_profile": {{
    "camera_energy": "static" | "restrained" | "handheld" | "kinetic",
    "movement_frequency": "rare" | "occasional" | "frequent",
    "lens_bias": {{
      "primary": "wide" | "normal" | "tele",
      "secondary": "wide" | "normal" | "tele"
    }},
    "framing_bias": ["intimate", "observational", ...],
    "lighting_philosophy": {{
      "key_style": "naturalistic" | "low-key" | "high-key",
      "source_bias": "motivated" | "practical-heavy" | "stylized",
      "contrast_level": "low" | "medium" | "high"
    }},
    "color_bias": {{
      "temperature": "warm" | "cool" | "neutral",
      "saturation": "muted" | "natural" | "heightened"
    }},
    "texture": ["clean", "grainy", "raw", ...],
    "coverage_philosophy": "minimal" | "standard" | "safety",
    "directing_priorities": ["performance-first", "blocking-first", "camera-first"]
  }}
}}

Rules:
- framing_bias: 2-4 descriptors (intimate, observational, claustrophobic, detached, grounded, etc.)
- texture: 1-3 descriptors (clean, grainy, raw, polished, etc.)
- directing_priorities: ordered list of 1-3 priorities
- Choices should be internally consistent and reflect the look/feel words
- Consider the constraints: micro/low budgets favor naturalistic lighting, practical sources, and minimal coverage
"""
        excerpt = _excerpt(project.script_text, settings.STYLE_SCRIPT_EXCERPT_CHARS)
        script_line = (
            f"Script excerpt (first {settings.STYLE_SCRIPT_EXCERPT_CHARS} chars): {excerpt}"
            if excerpt
            else "No script available yet."
        )
        user = "\n".join([
            f"Look/feel words: {', '.join(project.look_words or [])}",
            _constraints_line(project.constraints),
            "",
            script_line,
        ])
        return system.strip(), user

    @staticmethod
    def shot_prompts(project: models.Project, scene: models.Scene) -> Tuple[str, str]:
        style = (
            json.dumps(project.style_profile)
            if project.style_profile
            else "Not yet defined. Use sensible indie defaults."
        )
        coverage_mode = (project.constraints or {}).get("coverage_mode")
        coverage_lines = "\n".join(
            f"- For {mode} coverage: {rule}" + (" (ACTIVE FOR THIS PROJECT)" if mode == coverage_mode else "")
            for mode, rule in COVERAGE_RULES.items()
        )
        forbidden = ", ".join(f'"{t}"' for t in house_bias.FORBIDDEN_SEARCH_TERMS)

        system = f"""
{house_bias.injection_block()}

You are a shot list generator for indie narrative filmmakers. Generate a practical, crew-usable shot list for the given scene.

Style Profile: {style}
{_constraints_line(project.constraints)}

Return a JSON object with this exact structure:
{{
  "shots": [
    {{
      "shot_code": "1A",
      "shot_size": "WS" | "MS" | "MCU" | "CU" | "ECU",
      "angle": "eye-level" | "low" | "high" | "OTS" | "POV" | "two-shot",
      "movement": "static" | "handheld" | "pan" | "tilt" | "push-in" | "pull-out",
      "lens_suggestion": "24mm" | "35mm" | "50mm" | "85mm",
      "blocking_notes": "Brief description of actor/camera blocking",
      "intent_text": "WHY this shot exists: the emotional/dramatic purpose",
      "audio_notes": "Any audio considerations",
      "time_cost_estimate": "quick" | "moderate" | "slow",
      "reference_targets": {{
        "lighting": "description of target lighting look",
        "framing": "description of target framing",
        "movement": "description of target movement feel",
        "depth": "description of depth of field target",
        "texture": "description of texture/grain target"
      }},
      "search_prompts": [
        "2-3 search prompts for finding reference images on stock photo sites"
      ]
    }}
  ]
}}

Rules:
- Every shot MUST have a clear intent_text explaining WHY it exists
- Favor achievable shots for indie crews (avoid crane, steadicam, complex rigs unless budget allows)
- Shot codes: scene number + letter ({scene.scene_number}A, {scene.scene_number}B, {scene.scene_number}C...)
{coverage_lines}
- Keep the shot list practical and crew-ready

Shot Generation Bias (from House Personality):
- Prefer static shots. Default to "static" movement unless emotional escalation demands otherwise.
- Prefer close proximity. Default to MCU or CU framing.
- Introduce movement only when emotional escalation is detected in the beat.
- Minimize redundant coverage. Each shot must justify its existence.
- If emotional intensity does not increase, do not add camera movement.

Search Prompt Rules (from House Personality):
- search_prompts MUST always include concepts aligned with: {', '.join(house_bias.REQUIRED_SEARCH_CONCEPTS)}.
- search_prompts MUST NEVER include: {forbidden}.
"""
        characters = ", ".join(scene.characters or []) or "None specified"
        excerpt = _excerpt(project.script_text, settings.SHOT_SCRIPT_EXCERPT_CHARS)
        user = "\n".join([
            f"Scene {scene.scene_number}: {scene.int_ext}. {scene.location} - {scene.time_of_day}",
            f"Characters: {characters}",
            f"Beat: {scene.beat_summary or 'No beat summary'}",
            "",
            "Full script for context:",
            excerpt or "No script available",
        ])
        return system.strip(), user

    @staticmethod
    def ranking_prompts(shot: models.Shot, alt_texts: Sequence[Optional[str]]) -> Tuple[str, str]:
        system = f"""
{house_bias.injection_block()}

You are a reference image selector. Given a list of candidate images (by their alt descriptions) and a shot's reference targets, select the {settings.REFERENCES_PER_SHOT} images that best align with the House Visual Personality.

Ranking priorities:
1. Alignment with the House Visual Personality (restraint, motivated light, close proximity, observational stance)
2. Match to the shot's reference targets
3. Up-rank images showing: single-source lighting, preserved shadows, close framing, low saturation, observational feel
4. Down-rank images that are: evenly lit, commercial/glossy, wide spectacle, expressively colored

Return a JSON object:
{{
  "selections": [
    {{
      "index": <number>,
      "why_this_works": "<1-2 sentences explaining alignment with the house personality>"
    }}
  ]
}}

Language rules for why_this_works:
- Use words like: {', '.join(house_bias.ALLOWED_RATIONALE_WORDS)}
- Never use: {', '.join(house_bias.DISALLOWED_RATIONALE_WORDS)}
- State WHY the reference aligns with the house view, not just what it shows
"""
        targets = json.dumps(shot.reference_targets) if shot.reference_targets else "None specified"
        descriptors = "\n".join(f"[{i}] {alt or NO_ALT_TEXT}" for i, alt in enumerate(alt_texts))
        user = "\n".join([
            f"Shot: {shot.shot_size} {shot.angle} - {shot.intent_text}",
            f"Reference targets: {targets}",
            "",
            "Candidate images:",
            descriptors,
        ])
        return system.strip(), user
