import pytest
import requests

from conftest import FakeCandidateSource, make_photo
from prepro.core.exceptions import CandidateSourceError, MissingInputError, NoCandidatesError
from prepro.models import ReferenceProvider
from prepro.services import candidates as candidates_module
from prepro.services.candidates import (
    PEXELS_LICENSE,
    Candidate,
    CandidateSource,
    acquire_candidates,
    per_prompt_quota,
)


@pytest.mark.parametrize("prompts,expected", [(1, 9), (2, 5), (3, 3), (4, 3), (9, 1)])
def test_per_prompt_quota(prompts, expected):
    assert per_prompt_quota(prompts, 9) == expected
    assert prompts * per_prompt_quota(prompts, 9) >= 9


def test_three_prompts_request_three_each():
    source = FakeCandidateSource()
    result = acquire_candidates(source, ["a", "b", "c"], total=9)

    assert sorted(source.requests) == [("a", 3), ("b", 3), ("c", 3)]
    assert len(result) == 9


def test_results_are_concatenated_in_prompt_order_and_truncated():
    source = FakeCandidateSource()
    result = acquire_candidates(source, ["first", "second"], total=9)

    # 2 x 5 fetched, cut to 9
    assert len(result) == 9
    assert [c.alt for c in result[:5]] == [f"first photo {i}" for i in range(5)]
    assert [c.alt for c in result[5:]] == [f"second photo {i}" for i in range(4)]


def test_short_results_are_not_padded():
    source = FakeCandidateSource(available={"a": 1, "b": 0, "c": 2})
    result = acquire_candidates(source, ["a", "b", "c"], total=9)

    assert [c.alt for c in result] == ["a photo 0", "c photo 0", "c photo 1"]


def test_no_candidates_raises():
    source = FakeCandidateSource(available={})
    with pytest.raises(NoCandidatesError):
        acquire_candidates(source, ["nothing here"], total=9)


def test_no_prompts_raises_missing_input():
    with pytest.raises(MissingInputError):
        acquire_candidates(FakeCandidateSource(), [], total=9)


def test_attribution_mapping():
    candidate = Candidate.from_pexels(make_photo(42, alt="Woman by a window", photographer="Jo Kim"))

    assert candidate.attribution() == {
        "url": "https://images.pexels.com/42/large.jpg",
        "preview_url": "https://images.pexels.com/42/medium.jpg",
        "attribution_text": "Photo by Jo Kim",
        "attribution_url": "https://www.pexels.com/@photographer42",
        "license_info": PEXELS_LICENSE,
        "provider": ReferenceProvider.pexels,
    }


def test_empty_alt_becomes_none():
    assert Candidate.from_pexels(make_photo(1, alt="")).alt is None


class _Response:
    def __init__(self, status_code, payload=None):
        self.status_code = status_code
        self.ok = status_code < 400
        self._payload = payload or {}

    def json(self):
        return self._payload


def test_search_sends_landscape_query(monkeypatch):
    captured = {}

    def fake_get(url, headers, params, timeout):
        captured.update(url=url, headers=headers, params=params, timeout=timeout)
        return _Response(200, {"photos": [make_photo(7, alt="Lamp light")]})

    monkeypatch.setattr(candidates_module.requests, "get", fake_get)
    source = CandidateSource(api_key="key-123", base_url="https://pexels.test/v1", timeout=5)

    result = source.search("lamp light close portrait", 3)

    assert captured["url"] == "https://pexels.test/v1/search"
    assert captured["headers"] == {"Authorization": "key-123"}
    assert captured["params"] == {
        "query": "lamp light close portrait",
        "per_page": 3,
        "orientation": "landscape",
    }
    assert captured["timeout"] == 5
    assert [c.alt for c in result] == ["Lamp light"]


def test_search_http_error_raises(monkeypatch):
    monkeypatch.setattr(candidates_module.requests, "get", lambda *a, **kw: _Response(429))
    source = CandidateSource(api_key="key-123")

    with pytest.raises(CandidateSourceError, match="429"):
        source.search("anything", 3)


class _HtmlResponse(_Response):
    def json(self):
        raise requests.JSONDecodeError("Expecting value", "<html>Bad gateway</html>", 0)


def test_search_non_json_body_raises(monkeypatch):
    monkeypatch.setattr(candidates_module.requests, "get", lambda *a, **kw: _HtmlResponse(200))
    source = CandidateSource(api_key="key-123")

    with pytest.raises(CandidateSourceError, match="invalid response") as excinfo:
        source.search("anything", 3)
    assert excinfo.value.details == {"query": "anything"}


def test_search_non_object_body_raises(monkeypatch):
    response = _Response(200)
    response._payload = ["not", "an", "object"]
    monkeypatch.setattr(candidates_module.requests, "get", lambda *a, **kw: response)

    with pytest.raises(CandidateSourceError, match="invalid response"):
        CandidateSource(api_key="key-123").search("anything", 3)


def test_search_skips_photos_missing_url_or_photographer(monkeypatch):
    no_src = make_photo(2, alt="No image")
    no_src["src"] = {"medium": "https://images.pexels.com/2/medium.jpg"}
    no_photographer = make_photo(3, alt="Nobody")
    no_photographer["photographer"] = None
    only_original = make_photo(4, alt="Original only")
    del only_original["src"]["large"]
    payload = {"photos": [make_photo(1, alt="Keep"), no_src, no_photographer, only_original]}
    monkeypatch.setattr(candidates_module.requests, "get", lambda *a, **kw: _Response(200, payload))

    result = CandidateSource(api_key="key-123").search("anything", 4)

    assert [c.alt for c in result] == ["Keep", "Original only"]
    assert result[1].attribution()["url"] == "https://images.pexels.com/4/original.jpg"
    assert all("None" not in c.attribution()["attribution_text"] for c in result)


def test_search_connection_error_raises(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.ConnectionError("unreachable")

    monkeypatch.setattr(candidates_module.requests, "get", boom)
    source = CandidateSource(api_key="key-123")

    with pytest.raises(CandidateSourceError, match="unreachable"):
        source.search("anything", 3)


def test_search_without_api_key_raises(monkeypatch):
    monkeypatch.setattr(candidates_module.settings, "PEXELS_API_KEY", None)
    with pytest.raises(CandidateSourceError, match="PEXELS_API_KEY"):
        CandidateSource(api_key=None).search("anything", 3)
