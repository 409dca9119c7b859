"""
EPDS (Edinburgh Postnatal Depression Scale) questionnaire and assessment session
"""
import logging
from enum import Enum
from typing import Dict, List, Mapping, Optional

from wellnest.errors import (
    IncompleteAssessmentError,
    NetworkError,
    SchemaError,
    SubmissionInProgressError,
    ValidationError,
)
from wellnest.models.schemas import EpdsQuestion, EpdsScore

logger = logging.getLogger(__name__)

# Canonical question order - the scoring service reads responses positionally
EPDS_FIELDS = (
    "laughing",
    "enjoyment",
    "blaming",
    "anxious",
    "scared",
    "overwhelmed",
    "sleeping",
    "sad",
    "crying",
    "selfharm",
)

MIN_ANSWER = 0
MAX_ANSWER = 3

EPDS_QUESTIONS = [
    EpdsQuestion(id="laughing", question="I have been able to laugh and see the funny side of things:", options=[
        "As much as I always could", "Not quite so much now", "Definitely not so much now", "Not at all",
    ]),
    EpdsQuestion(id="enjoyment", question="I have looked forward to things with enjoyment:", options=[
        "As much as I ever did", "Rather less than I used to", "Definitely less than I used to", "Hardly at all",
    ]),
    EpdsQuestion(id="blaming", question="I have blamed myself unnecessarily when things went wrong:", options=[
        "No, never", "Not very often", "Yes, some of the time", "Yes, most of the time",
    ]),
    EpdsQuestion(id="anxious", question="I have been anxious or worried for no good reason:", options=[
        "No, not at all", "Hardly ever", "Yes, sometimes", "Yes, very often",
    ]),
    EpdsQuestion(id="scared", question="I have felt scared or panicky for no good reason:", options=[
        "No, not at all", "No, not much", "Yes, sometimes", "Yes, quite a lot",
    ]),
    EpdsQuestion(id="overwhelmed", question="Things have been getting on top of me:", options=[
        "No, I am coping as well as ever",
        "No, most of the time I'm coping quite well",
        "Yes, sometimes, I'm not coping as well as usual",
        "Yes, most of the time, I'm not able to cope at all",
    ]),
    EpdsQuestion(id="sleeping", question="I have been so unhappy that I've had difficulty sleeping:", options=[
        "No, not at all", "Not very often", "Yes, sometimes", "Yes, most of the time",
    ]),
    EpdsQuestion(id="sad", question="I have felt sad or miserable:", options=[
        "No, not at all", "Not very often", "Yes, quite often", "Yes, most of the time",
    ]),
    EpdsQuestion(id="crying", question="I have been so unhappy that I have been crying:", options=[
        "No, never", "Only occasionally", "Yes, quite often", "Yes, most of the time",
    ]),
    EpdsQuestion(id="selfharm", question="The thought of harming myself has occurred to me:", options=[
        "Never", "Hardly ever", "Sometimes", "Yes, quite often",
    ]),
]


class SessionState(str, Enum):
    UNANSWERED = "unanswered"
    PARTIALLY_ANSWERED = "partially_answered"
    FULLY_ANSWERED = "fully_answered"
    SUBMITTING = "submitting"
    COMPLETED = "completed"


class AssessmentSession:
    """
    One EPDS form being filled in.

    Answers can be given in any order; ``ordered_responses`` always follows
    EPDS_FIELDS. A failed submission keeps every answer and returns the
    session to FULLY_ANSWERED so it can be submitted again.
    """

    def __init__(self, responses: Optional[Mapping[str, int]] = None):
        self._answers: Dict[str, int] = {}
        self._submitting = False
        self._result: Optional[EpdsScore] = None
        self._last_error: Optional[Exception] = None
        for question_id, value in (responses or {}).items():
            self.answer(question_id, value)

    def answer(self, question_id: str, value: int) -> None:
        if self._submitting:
            raise SubmissionInProgressError()
        if question_id not in EPDS_FIELDS:
            raise ValidationError(f"Unknown EPDS question id: {question_id!r}")
        if isinstance(value, bool) or not isinstance(value, int) or not MIN_ANSWER <= value <= MAX_ANSWER:
            raise ValidationError(
                f"Answer for {question_id!r} must be an integer between {MIN_ANSWER} and {MAX_ANSWER}"
            )
        self._answers[question_id] = value
        # A new answer after completion starts a new assessment
        self._result = None
        self._last_error = None

    @property
    def answers(self) -> Dict[str, int]:
        return dict(self._answers)

    @property
    def result(self) -> Optional[EpdsScore]:
        return self._result

    @property
    def last_error(self) -> Optional[Exception]:
        return self._last_error

    @property
    def state(self) -> SessionState:
        if self._submitting:
            return SessionState.SUBMITTING
        if self._result is not None:
            return SessionState.COMPLETED
        if not self._answers:
            return SessionState.UNANSWERED
        if self.unanswered():
            return SessionState.PARTIALLY_ANSWERED
        return SessionState.FULLY_ANSWERED

    def unanswered(self) -> List[str]:
        """Question ids still missing, in questionnaire order"""
        return [field for field in EPDS_FIELDS if field not in self._answers]

    def first_unanswered(self) -> Optional[str]:
        missing = self.unanswered()
        return missing[0] if missing else None

    def validate(self) -> None:
        missing = self.unanswered()
        if missing:
            raise IncompleteAssessmentError(missing)

    def ordered_responses(self) -> List[int]:
        self.validate()
        return [self._answers[field] for field in EPDS_FIELDS]

    def submit(self, provider) -> EpdsScore:
        """
        Score the completed questionnaire with ``provider``.

        Raises:
            IncompleteAssessmentError: If any question is unanswered
            SubmissionInProgressError: If this session is already submitting
            NetworkError, SchemaError: Propagated from the provider
        """
        if self._submitting:
            raise SubmissionInProgressError()
        responses = self.ordered_responses()

        self._submitting = True
        self._last_error = None
        try:
            result = provider.score(responses)
        except (NetworkError, SchemaError) as e:
            self._last_error = e
            logger.warning("EPDS scoring failed, answers kept for retry: %s: %s", type(e).__name__, e)
            raise
        finally:
            self._submitting = False

        self._result = result
        return result
