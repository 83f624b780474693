"""
Face detection through AWS Rekognition.

Wraps a single long-lived boto3 Rekognition client. The client is created
once per process and shared by every request; boto3 clients are safe to use
from multiple threads as long as nobody mutates them.
"""

import logging
from typing import Any, Dict, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..utils.logging_config import log_execution_time
from .age_classifier import AgeDetectionError, AgeRange, DetectedFace

logger = logging.getLogger(__name__)


class FaceDetectionError(AgeDetectionError):
    """Exception raised when the face-detection provider call fails."""
    pass


def parse_face_details(face_detail: Dict[str, Any]) -> DetectedFace:
    """Map one Rekognition ``FaceDetail`` to a ``DetectedFace``.

    Missing ``Low``/``High`` bounds default to 0 and a missing ``Confidence``
    defaults to 0.0. A face without ``AgeRange`` keeps ``age_range=None``.
    Filling is not allowed to invent an inverted range: a lone ``Low`` of 20
    becomes 20..0, which breaks ``low <= high``, so it is reported as a
    malformed provider response rather than classified from a made-up
    midpoint.

    Raises:
        FaceDetectionError: If the age range is not a valid range
    """
    age_range = None
    raw_range = face_detail.get('AgeRange')
    if raw_range is not None:
        low = raw_range.get('Low') or 0
        high = raw_range.get('High') or 0
        try:
            age_range = AgeRange(low=int(low), high=int(high))
        except (TypeError, ValueError) as e:
            raise FaceDetectionError(f"Malformed age range in provider response: {raw_range}") from e

    confidence = face_detail.get('Confidence') or 0.0
    return DetectedFace(age_range=age_range, confidence=float(confidence))


class RekognitionFaceDetector:
    """Detects faces, with age range and confidence, using AWS Rekognition."""

    def __init__(self, client):
        """
        Args:
            client: boto3 ``rekognition`` client
        """
        self.client = client

    @classmethod
    def from_config(cls, aws_config: Dict[str, Any]) -> 'RekognitionFaceDetector':
        """
        Build the detector from the ``aws`` configuration section.

        Timeouts are bounded and retries are disabled: a slow or failing
        provider surfaces as a single failed request.

        Args:
            aws_config: Dict with region, credentials, optional session token,
                endpoint URL and connect/read timeouts

        Returns:
            Detector wrapping a new Rekognition client
        """
        session = boto3.session.Session(
            aws_access_key_id=aws_config.get('access_key_id'),
            aws_secret_access_key=aws_config.get('secret_access_key'),
            aws_session_token=aws_config.get('session_token'),
            region_name=aws_config.get('region', 'us-east-1'),
        )
        client_config = Config(
            connect_timeout=aws_config.get('connect_timeout', 5.0),
            read_timeout=aws_config.get('read_timeout', 10.0),
            retries={'total_max_attempts': 1, 'mode': 'standard'},
        )
        client = session.client(
            'rekognition',
            endpoint_url=aws_config.get('endpoint_url') or None,
            config=client_config,
        )
        logger.info(f"Rekognition client initialized for region {session.region_name}")
        return cls(client)

    @log_execution_time("Rekognition DetectFaces")
    def detect_faces(self, image_bytes: bytes) -> List[DetectedFace]:
        """
        Detect faces in an image.

        Args:
            image_bytes: JPEG or PNG image bytes

        Returns:
            Detected faces in the order the provider returned them

        Raises:
            FaceDetectionError: On network, timeout, auth or provider errors,
                or when the response is malformed
        """
        try:
            response = self.client.detect_faces(
                Image={'Bytes': image_bytes},
                Attributes=['ALL'],
            )
        except ClientError as e:
            error = e.response.get('Error', {})
            code: Optional[str] = error.get('Code')
            message = error.get('Message') or str(e)
            raise FaceDetectionError(f"{code}: {message}" if code else message) from e
        except BotoCoreError as e:
            raise FaceDetectionError(str(e)) from e

        face_details = response.get('FaceDetails') or []
        if not isinstance(face_details, list):
            raise FaceDetectionError("Unexpected FaceDetails payload from Rekognition")

        return [parse_face_details(detail) for detail in face_details]
