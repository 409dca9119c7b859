"""
EPDS score providers.

The model service is the authority for scores and risk labels. The local sum
is a degraded mode: it is only used when explicitly enabled, only when the
service cannot be reached, and its results are always labelled approximate.
"""
import logging
from typing import Any, Dict, List, Optional

from wellnest.config import settings
from wellnest.errors import NetworkError, SchemaError
from wellnest.models.schemas import EpdsScore
from wellnest.services.model_service import ModelServiceClient

logger = logging.getLogger(__name__)

REMOTE = "remote"
LOCAL_SUM = "local_sum"


class ScoreProvider:
    """Turns ten ordered EPDS answers into a score"""

    def score(self, responses: List[int]) -> EpdsScore:
        raise NotImplementedError


def _first_present(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _as_list(value: Any, field: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    if isinstance(value, list):
        return [str(item) for item in value]
    raise SchemaError(f"Unexpected value for {field} in scoring response")


def parse_score_response(data: Dict[str, Any]) -> EpdsScore:
    """
    Normalise either response shape of the scoring service:
    ``{epds_score, risk_level}`` or
    ``{EPDS_Score, Assessment, Action, Anxiety_Flag, Additional_Action}``
    """
    raw_score = _first_present(data, "epds_score", "EPDS_Score")
    if raw_score is None or isinstance(raw_score, bool) or not isinstance(raw_score, (int, float)):
        raise SchemaError("Scoring response has no usable EPDS score")

    risk_level = _first_present(data, "risk_level", "Assessment")
    anxiety_flag = _first_present(data, "anxiety_flag", "Anxiety_Flag")

    return EpdsScore(
        epds_score=int(round(raw_score)),
        risk_level=str(risk_level) if risk_level is not None else None,
        anxiety_flag=bool(anxiety_flag) if anxiety_flag is not None else None,
        actions=_as_list(_first_present(data, "actions", "Action"), "Action"),
        additional_actions=_as_list(
            _first_present(data, "additional_actions", "Additional_Action"), "Additional_Action"
        ),
        scoring_method=REMOTE,
        approximate=False,
    )


class RemoteScoreProvider(ScoreProvider):
    """Scores with the external model service"""

    def __init__(self, client: Optional[ModelServiceClient] = None, endpoint: Optional[str] = None):
        self.client = client or ModelServiceClient()
        self.endpoint = endpoint or settings.EPDS_ENDPOINT

    def score(self, responses: List[int]) -> EpdsScore:
        data = self.client.post(self.endpoint, {"responses": list(responses)})
        result = parse_score_response(data)
        logger.info("EPDS scored remotely: score=%s risk_level=%s", result.epds_score, result.risk_level)
        return result


class LocalSumScoreProvider(ScoreProvider):
    """Sum of the ordinal answers, no risk label"""

    def score(self, responses: List[int]) -> EpdsScore:
        return EpdsScore(
            epds_score=sum(responses),
            risk_level=None,
            scoring_method=LOCAL_SUM,
            approximate=True,
        )


class FallbackScoreProvider(ScoreProvider):
    """Uses ``primary`` and falls back to ``fallback`` only when it is unreachable"""

    def __init__(self, primary: ScoreProvider, fallback: ScoreProvider):
        self.primary = primary
        self.fallback = fallback

    def score(self, responses: List[int]) -> EpdsScore:
        try:
            return self.primary.score(responses)
        except NetworkError as e:
            logger.warning("Scoring service unavailable (%s), using approximate local score", e)
            return self.fallback.score(responses)


def get_score_provider() -> ScoreProvider:
    """Score provider for the current configuration"""
    remote = RemoteScoreProvider()
    if settings.EPDS_LOCAL_FALLBACK:
        return FallbackScoreProvider(remote, LocalSumScoreProvider())
    return remote
