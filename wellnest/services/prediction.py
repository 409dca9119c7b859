"""
Maternal health risk prediction from physical check-in vitals
"""
import logging
from typing import Optional

from wellnest.config import settings
from wellnest.errors import SchemaError
from wellnest.models.schemas import Prediction, Vitals
from wellnest.services.model_service import ModelServiceClient

logger = logging.getLogger(__name__)


def build_prediction_payload(vitals: Vitals) -> dict:
    """Model input in the feature names the service was trained with (BS in mmol/L)"""
    return {
        "age": vitals.age,
        "SystolicBP": vitals.systolic,
        "DiastolicBP": vitals.diastolic,
        "BS": vitals.blood_sugar,
        "BodyTemp": vitals.body_temperature,
        "HeartRate": vitals.heartbeat,
    }


class PredictionClient:
    """Calls the ``/predict`` endpoint of the model service"""

    def __init__(self, client: Optional[ModelServiceClient] = None, endpoint: Optional[str] = None):
        self.client = client or ModelServiceClient()
        self.endpoint = endpoint or settings.PREDICT_ENDPOINT

    def predict(self, vitals: Vitals) -> Prediction:
        """
        Get the risk label for a set of vitals

        The service answers with ``prediction``, ``risk_level`` or both; either
        one is accepted as the label and copied into the other when missing.

        Raises:
            NetworkError: If the service cannot be reached in time
            SchemaError: If the response carries no label
        """
        data = self.client.post(self.endpoint, build_prediction_payload(vitals))

        prediction = data.get("prediction")
        risk_level = data.get("risk_level")
        if not prediction and not risk_level:
            logger.error("Invalid prediction response structure: %r", data)
            raise SchemaError("Invalid response structure from prediction service")

        prediction = str(prediction) if prediction else None
        risk_level = str(risk_level) if risk_level else None
        return Prediction(prediction=prediction or risk_level, risk_level=risk_level or prediction)
