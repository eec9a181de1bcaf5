"""
Pytest Configuration and Fixtures

Shared fixtures for all tests: an in-memory database, scripted fakes for the
language model and the image provider, and an API client wired to both.
"""

import json
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from prepro import models
from prepro.api.dependencies import get_db, get_pipeline
from prepro.db.base import Base
from prepro.main import app
from prepro.services.candidates import Candidate
from prepro.services.pipeline import Pipeline


class FakeGeneration:
    """Returns queued responses in order; exceptions in the queue are raised."""

    def __init__(self):
        self.responses = []
        self.calls = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def complete_json(self, system_prompt, user_prompt, *, temperature):
        self.calls.append(
            {"system": system_prompt, "user": user_prompt, "temperature": temperature}
        )
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, str):
            return response
        return json.dumps(response)


def make_photo(photo_id, alt="", photographer="Ana Ruiz"):
    return {
        "id": photo_id,
        "alt": alt,
        "photographer": photographer,
        "photographer_url": f"https://www.pexels.com/@photographer{photo_id}",
        "src": {
            "original": f"https://images.pexels.com/{photo_id}/original.jpg",
            "large": f"https://images.pexels.com/{photo_id}/large.jpg",
            "medium": f"https://images.pexels.com/{photo_id}/medium.jpg",
        },
    }


class FakeCandidateSource:
    """
    Serves `per_page` photos per query unless `available` caps it.
    Records every (query, per_page) request.
    """

    def __init__(self, available=None):
        self.available = available
        self.requests = []

    def search(self, query, per_page):
        self.requests.append((query, per_page))
        count = per_page if self.available is None else min(per_page, self.available.get(query, 0))
        return [
            Candidate.from_pexels(make_photo(f"{query}-{i}", alt=f"{query} photo {i}"))
            for i in range(count)
        ]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _fk_on(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def generation():
    return FakeGeneration()


@pytest.fixture
def candidate_source():
    return FakeCandidateSource()


@pytest.fixture
def pipeline(db, generation, candidate_source):
    return Pipeline(db, generation, candidate_source)


@pytest.fixture
def project(db):
    project = models.Project(
        user_id="user-1",
        title="The Last Light",
        script_text=(
            "INT. APARTMENT - KITCHEN - NIGHT\n"
            "MARA sits alone at the table. The fridge hums.\n\n"
            "EXT. ROOFTOP - DAWN\n"
            "MARA and JONAH watch the city wake up."
        ),
        look_words=["quiet", "cold", "intimate"],
        constraints={"budget": "micro", "crew_size": "skeleton", "coverage_mode": "minimal"},
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    return project


@pytest.fixture
def scene(db, project):
    scene = models.Scene(
        project_id=project.id,
        scene_number=1,
        int_ext="INT",
        location="APARTMENT - KITCHEN",
        time_of_day="NIGHT",
        characters=["MARA"],
        beat_summary="Mara waits for a call that does not come.",
    )
    db.add(scene)
    db.commit()
    db.refresh(scene)
    return scene


@pytest.fixture
def shot(db, scene):
    shot = models.Shot(
        scene_id=scene.id,
        shot_code="1A",
        position_index=0,
        shot_size="MCU",
        angle="eye-level",
        movement="static",
        intent_text="Hold on Mara so her stillness reads as waiting.",
        reference_targets={
            "lighting": "single practical overhead",
            "framing": "tight, off-center",
            "movement": "locked off",
            "depth": "shallow",
            "texture": "light grain",
        },
        search_prompts=["woman kitchen night practical light", "close portrait muted shadows"],
    )
    db.add(shot)
    db.commit()
    db.refresh(shot)
    return shot


@pytest.fixture
def client(db, generation, candidate_source):
    def _get_db():
        yield db

    def _get_pipeline():
        return Pipeline(db, generation, candidate_source)

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_pipeline] = _get_pipeline
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"X-User-Id": "user-1"}


# --- canned model responses ---------------------------------------------

@pytest.fixture
def style_payload():
    return {
        "style_profile": {
            "camera_energy": "static",
            "movement_frequency": "rare",
            "lens_bias": {"primary": "normal", "secondary": "tele"},
            "framing_bias": ["intimate", "observational"],
            "lighting_philosophy": {
                "key_style": "low-key",
                "source_bias": "motivated",
                "contrast_level": "medium",
            },
            "color_bias": {"temperature": "cool", "saturation": "muted"},
            "texture": ["grainy"],
            "coverage_philosophy": "minimal",
            "directing_priorities": ["performance-first", "blocking-first"],
        }
    }


def shot_item(code, intent="Stay with her silence.", **overrides):
    item = {
        "shot_code": code,
        "shot_size": "CU",
        "angle": "eye-level",
        "movement": "static",
        "lens_suggestion": "50mm",
        "blocking_notes": "Mara seated, camera at table height.",
        "intent_text": intent,
        "audio_notes": "Fridge hum only.",
        "time_cost_estimate": "quick",
        "reference_targets": {
            "lighting": "single practical",
            "framing": "tight",
            "movement": "locked off",
            "depth": "shallow",
            "texture": "grain",
        },
        "search_prompts": ["woman alone kitchen practical light", "close portrait muted shadow"],
    }
    item.update(overrides)
    return item
