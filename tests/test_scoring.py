import pytest
import requests

from conftest import FakeResponse, RecordingProvider
from wellnest.config import settings
from wellnest.errors import NetworkError, SchemaError, ScoringTimeoutError
from wellnest.services import model_service
from wellnest.services.model_service import ModelServiceClient
from wellnest.services.scoring import (
    FallbackScoreProvider,
    LocalSumScoreProvider,
    RemoteScoreProvider,
    get_score_provider,
    parse_score_response,
)

RESPONSES = [0, 1, 2, 3, 0, 1, 2, 3, 0, 1]


@pytest.fixture
def fake_post(monkeypatch):
    """Replace requests.post; set .response or .error before calling"""

    class FakePost:
        response = FakeResponse(payload={"epds_score": 13, "risk_level": "High Risk"})
        error = None

        def __init__(self):
            self.calls = []

        def __call__(self, url, **kwargs):
            self.calls.append((url, kwargs))
            if self.error is not None:
                raise self.error
            return self.response

    fake = FakePost()
    monkeypatch.setattr(model_service.requests, "post", fake)
    return fake


def remote_provider():
    return RemoteScoreProvider(ModelServiceClient(base_url="http://model.test/", timeout=30))


def test_parse_simple_shape():
    result = parse_score_response({"epds_score": 9, "risk_level": "Moderate Risk"})
    assert result.epds_score == 9
    assert result.risk_level == "Moderate Risk"
    assert result.actions == []
    assert result.scoring_method == "remote"
    assert result.approximate is False


def test_parse_rich_shape():
    result = parse_score_response({
        "EPDS_Score": 14.0,
        "Questions": {"laughing": 1},
        "Assessment": "High Risk",
        "Action": ["Contact your healthcare provider", "Reach out to someone you trust"],
        "Anxiety_Flag": True,
        "Additional_Action": ["Practice breathing exercises"],
    })
    assert result.epds_score == 14
    assert result.risk_level == "High Risk"
    assert result.anxiety_flag is True
    assert result.actions == ["Contact your healthcare provider", "Reach out to someone you trust"]
    assert result.additional_actions == ["Practice breathing exercises"]


@pytest.mark.parametrize("body", [
    {},
    {"risk_level": "Low Risk"},
    {"epds_score": "high"},
    {"epds_score": True},
])
def test_parse_rejects_missing_score(body):
    with pytest.raises(SchemaError):
        parse_score_response(body)


def test_remote_sends_ordered_array(fake_post):
    result = remote_provider().score(RESPONSES)

    url, kwargs = fake_post.calls[0]
    assert url == "http://model.test/epds"
    assert kwargs["json"] == {"responses": RESPONSES}
    assert kwargs["timeout"] == 30
    assert result.epds_score == 13
    assert result.risk_level == "High Risk"


def test_remote_error_status(fake_post):
    fake_post.response = FakeResponse(status_code=500, payload=None, text="Internal Server Error")
    with pytest.raises(SchemaError):
        remote_provider().score(RESPONSES)


def test_remote_invalid_json(fake_post):
    fake_post.response = FakeResponse(payload=ValueError("Expecting value"), text="<html>")
    with pytest.raises(SchemaError):
        remote_provider().score(RESPONSES)


def test_remote_non_object_json(fake_post):
    fake_post.response = FakeResponse(payload=[13, "High"])
    with pytest.raises(SchemaError):
        remote_provider().score(RESPONSES)


def test_remote_timeout(fake_post):
    fake_post.error = requests.exceptions.ReadTimeout("read timed out")
    with pytest.raises(ScoringTimeoutError):
        remote_provider().score(RESPONSES)


def test_remote_unreachable(fake_post):
    fake_post.error = requests.exceptions.ConnectionError("connection refused")
    with pytest.raises(NetworkError):
        remote_provider().score(RESPONSES)
    assert len(fake_post.calls) == 1


def test_local_sum():
    result = LocalSumScoreProvider().score(RESPONSES)
    assert result.epds_score == 13
    assert result.risk_level is None
    assert result.approximate is True


def test_fallback_only_on_network_error():
    primary = RecordingProvider(error=NetworkError("unreachable"))
    result = FallbackScoreProvider(primary, LocalSumScoreProvider()).score(RESPONSES)
    assert result.scoring_method == "local_sum"
    assert result.approximate is True
    assert result.epds_score == 13


def test_fallback_does_not_hide_schema_errors():
    primary = RecordingProvider(error=SchemaError("bad body"))
    with pytest.raises(SchemaError):
        FallbackScoreProvider(primary, LocalSumScoreProvider()).score(RESPONSES)


def test_fallback_prefers_remote_result():
    primary = RecordingProvider()
    result = FallbackScoreProvider(primary, LocalSumScoreProvider()).score(RESPONSES)
    assert result.scoring_method == "remote"
    assert result.epds_score == 7


def test_provider_selection_follows_settings(monkeypatch):
    monkeypatch.setattr(settings, "EPDS_LOCAL_FALLBACK", False)
    assert isinstance(get_score_provider(), RemoteScoreProvider)

    monkeypatch.setattr(settings, "EPDS_LOCAL_FALLBACK", True)
    provider = get_score_provider()
    assert isinstance(provider, FallbackScoreProvider)
    assert isinstance(provider.fallback, LocalSumScoreProvider)
