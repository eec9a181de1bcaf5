# prepro/services/pipeline.py

"""
The four generation stages: script -> scenes, look words -> style profile,
scene -> shots, shot -> reference images.

Every stage that replaces child rows deletes them and commits BEFORE the
model is called. A failed generation therefore leaves the parent with no
children until the next successful run; callers treat a failure as
"try again", not "nothing changed".
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from prepro import models
from prepro.core.exceptions import MissingInputError, NotFoundError
from prepro.core.logging import get_logger
from prepro.services.candidates import CandidateSource, acquire_candidates
from prepro.services.contracts import (
    ScenesResult,
    ShotsResult,
    StyleResult,
    decode_contract,
)
from prepro.services.generation import GenerationClient
from prepro.services.prompt_builder import PromptBuilder
from prepro.services.ranking import RankingSelector

logger = get_logger("pipeline")

PARSE_TEMPERATURE = 0.3
STYLE_TEMPERATURE = 0.3
SHOTS_TEMPERATURE = 0.4


class Pipeline:

    def __init__(
        self,
        db: Session,
        generation: GenerationClient,
        candidate_source: CandidateSource,
        ranking: Optional[RankingSelector] = None,
    ):
        self.db = db
        self.generation = generation
        self.candidate_source = candidate_source
        self.ranking = ranking or RankingSelector(generation)

    # ------------------------------------------------------------------
    # Stage 1: script -> scenes
    # ------------------------------------------------------------------

    def parse_script(self, project: models.Project) -> List[models.Scene]:
        script_text = project.script_text
        if not script_text or not script_text.strip():
            raise MissingInputError("No script text found", {"project_id": project.id})

        deleted = (
            self.db.query(models.Scene)
            .filter(models.Scene.project_id == project.id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        logger.info(f"[Pipeline] Project {project.id}: cleared {deleted} scene(s), parsing script")

        system_prompt, user_prompt = PromptBuilder.scene_parse_prompts(script_text)
        text = self.generation.complete_json(
            system_prompt, user_prompt, temperature=PARSE_TEMPERATURE
        )
        result = decode_contract(ScenesResult, text)

        # scene_number and order are kept exactly as the model gave them
        scenes = [
            models.Scene(
                project_id=project.id,
                scene_number=item.scene_number,
                int_ext=item.int_ext,
                location=item.location,
                time_of_day=item.time_of_day,
                characters=item.characters or [],
                beat_summary=item.beat_summary,
            )
            for item in result.scenes
        ]
        self.db.add_all(scenes)
        self.db.commit()
        for scene in scenes:
            self.db.refresh(scene)

        logger.info(f"[Pipeline] Project {project.id}: inserted {len(scenes)} scene(s)")
        return scenes

    # ------------------------------------------------------------------
    # Stage 2: look words + constraints -> style profile
    # ------------------------------------------------------------------

    def generate_style_profile(self, project: models.Project) -> dict:
        if not project.look_words:
            raise MissingInputError("No look words found", {"project_id": project.id})

        system_prompt, user_prompt = PromptBuilder.style_prompts(project)
        text = self.generation.complete_json(
            system_prompt, user_prompt, temperature=STYLE_TEMPERATURE
        )
        result = decode_contract(StyleResult, text)

        # Whole-field overwrite, never merged with the previous profile
        project.style_profile = result.style_profile.model_dump()
        self.db.add(project)
        self.db.commit()
        self.db.refresh(project)

        logger.info(f"[Pipeline] Project {project.id}: style profile written")
        return project.style_profile

    # ------------------------------------------------------------------
    # Stage 3: scene -> shots
    # ------------------------------------------------------------------

    def generate_shots(self, project: models.Project, scene_id: int) -> List[models.Shot]:
        scene = (
            self.db.query(models.Scene)
            .filter(models.Scene.id == scene_id, models.Scene.project_id == project.id)
            .first()
        )
        if not scene:
            raise NotFoundError("Scene", scene_id)

        deleted = (
            self.db.query(models.Shot)
            .filter(models.Shot.scene_id == scene.id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        logger.info(f"[Pipeline] Scene {scene.id}: cleared {deleted} shot(s), generating shots")

        system_prompt, user_prompt = PromptBuilder.shot_prompts(project, scene)
        text = self.generation.complete_json(
            system_prompt, user_prompt, temperature=SHOTS_TEMPERATURE
        )
        result = decode_contract(ShotsResult, text)

        # position_index comes from array order, not from shot_code
        shots = [
            models.Shot(
                scene_id=scene.id,
                shot_code=item.shot_code,
                position_index=index,
                shot_size=item.shot_size,
                angle=item.angle,
                movement=item.movement,
                lens_suggestion=item.lens_suggestion,
                blocking_notes=item.blocking_notes,
                intent_text=item.intent_text,
                audio_notes=item.audio_notes,
                time_cost_estimate=item.time_cost_estimate,
                reference_targets=(
                    item.reference_targets.model_dump() if item.reference_targets else None
                ),
                search_prompts=item.search_prompts,
            )
            for index, item in enumerate(result.shots)
        ]
        self.db.add_all(shots)
        self.db.commit()
        for shot in shots:
            self.db.refresh(shot)

        missing_intent = sum(1 for s in shots if not s.intent_text)
        if missing_intent:
            logger.warning(f"[Pipeline] Scene {scene.id}: {missing_intent} shot(s) came back without intent_text")

        logger.info(f"[Pipeline] Scene {scene.id}: inserted {len(shots)} shot(s)")
        return shots

    # ------------------------------------------------------------------
    # Stage 4: shot -> recommended reference images
    # ------------------------------------------------------------------

    def generate_references(self, shot: models.Shot) -> List[models.ShotReference]:
        search_prompts = list(shot.search_prompts or [])
        if not search_prompts:
            raise MissingInputError(
                "No search prompts available for this shot", {"shot_id": shot.id}
            )

        # external_link rows belong to the user and are never touched here
        deleted = (
            self.db.query(models.ShotReference)
            .filter(
                models.ShotReference.shot_id == shot.id,
                models.ShotReference.type == models.ReferenceType.recommended_image,
            )
            .delete(synchronize_session=False)
        )
        self.db.commit()
        logger.info(f"[Pipeline] Shot {shot.id}: cleared {deleted} recommended image(s)")

        candidates = acquire_candidates(self.candidate_source, search_prompts)
        selected = self.ranking.select(shot, candidates)

        references = [
            models.ShotReference(
                shot_id=shot.id,
                type=models.ReferenceType.recommended_image,
                why_this_works=s.why_this_works,
                **s.candidate.attribution(),
            )
            for s in selected
        ]
        self.db.add_all(references)
        self.db.commit()
        for ref in references:
            self.db.refresh(ref)

        logger.info(f"[Pipeline] Shot {shot.id}: inserted {len(references)} reference(s)")
        return references

    # ------------------------------------------------------------------
    # User-supplied links
    # ------------------------------------------------------------------

    def add_external_link(
        self, shot: models.Shot, url: str, description: Optional[str] = None
    ) -> models.ShotReference:
        if not url or not url.strip():
            raise MissingInputError("URL is required", {"shot_id": shot.id})

        ref = models.ShotReference(
            shot_id=shot.id,
            type=models.ReferenceType.external_link,
            provider=models.ReferenceProvider.frameset,
            url=url,
            why_this_works=description or None,
        )
        self.db.add(ref)
        self.db.commit()
        self.db.refresh(ref)
        return ref
