"""
Age classification for age-gating.

Turns the age range a face-detection provider reports for a face into a
binary adult/minor decision.

Policy:
- The estimated age is the midpoint of the provider's range, rounded half up.
- A face is an adult when the estimated age is at least ``ADULT_AGE_THRESHOLD``.

The midpoint is used instead of the low bound so that ranges such as 17-23
(midpoint 20) are not flagged as minors just because the provider's lower
bound is cautious. Both the threshold and the midpoint rule are fixed.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

logger = logging.getLogger(__name__)

ADULT_AGE_THRESHOLD = 16


class AgeDetectionError(Exception):
    """Base exception for age detection errors."""
    pass


class InvalidImageError(AgeDetectionError):
    """Exception raised when the image payload is missing or undecodable."""
    pass


class NoFaceDetectedError(AgeDetectionError):
    """Exception raised when the provider finds no face in the image."""
    pass


class AgeRangeUnavailableError(AgeDetectionError):
    """Exception raised when the selected face carries no age range."""
    pass


@dataclass(frozen=True)
class AgeRange:
    """Inclusive provider-estimated bounds on a face's age."""

    low: int
    high: int

    def __post_init__(self):
        if self.low < 0 or self.high < self.low:
            raise ValueError(f"Invalid age range: {self.low}-{self.high}")

    def to_dict(self) -> Dict[str, int]:
        return {'low': self.low, 'high': self.high}


@dataclass(frozen=True)
class DetectedFace:
    """A face returned by the detection provider."""

    age_range: Optional[AgeRange] = None
    confidence: float = 0.0


@dataclass(frozen=True)
class AgeDecision:
    """Outcome of classifying a single face."""

    age_range: AgeRange
    estimated_age: int
    is_adult: bool
    confidence: float

    @property
    def label(self) -> str:
        return 'ADULT' if self.is_adult else 'MINOR'

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON shape returned by the HTTP API."""
        return {
            'ageRange': self.age_range.to_dict(),
            'estimatedAge': self.estimated_age,
            'isAdult': self.is_adult,
            'confidence': self.confidence,
        }


def estimate_age(age_range: AgeRange) -> int:
    """Midpoint of the range, rounded half up (15.5 -> 16).

    Integer arithmetic keeps .5 midpoints rounding up; the built-in
    ``round`` would send 16.5 to 16.
    """
    return (age_range.low + age_range.high + 1) // 2


def is_adult_age(estimated_age: int) -> bool:
    return estimated_age >= ADULT_AGE_THRESHOLD


def decide(face: DetectedFace) -> AgeDecision:
    """Apply the classification policy to one detected face.

    Raises:
        AgeRangeUnavailableError: If the face has no age range
    """
    if face.age_range is None:
        raise AgeRangeUnavailableError("Age range not available")

    estimated_age = estimate_age(face.age_range)
    return AgeDecision(
        age_range=face.age_range,
        estimated_age=estimated_age,
        is_adult=is_adult_age(estimated_age),
        confidence=float(face.confidence or 0.0),
    )


class AgeClassifier:
    """Classifies the primary face of an image as adult or minor.

    Args:
        face_detector: Object exposing ``detect_faces(image_bytes)`` that
            returns a sequence of ``DetectedFace`` in provider order. It is
            shared across requests and must be safe for concurrent use.
    """

    def __init__(self, face_detector):
        self.face_detector = face_detector

    def classify(self, image_bytes: bytes) -> AgeDecision:
        """Detect faces in ``image_bytes`` and classify the first one.

        Raises:
            InvalidImageError: If ``image_bytes`` is empty
            NoFaceDetectedError: If no face was detected
            AgeRangeUnavailableError: If the first face has no age range
        """
        if not image_bytes:
            raise InvalidImageError("Image is required")

        faces: Sequence[DetectedFace] = self.face_detector.detect_faces(image_bytes)
        if not faces:
            raise NoFaceDetectedError("No face detected in image")

        # Provider order is kept as-is, no largest/most-confident selection
        if len(faces) > 1:
            logger.debug(f"{len(faces)} faces detected, using the first one")

        decision = decide(faces[0])
        self._log_decision(decision)
        return decision

    @staticmethod
    def _log_decision(decision: AgeDecision) -> None:
        logger.info(
            "Age detection decision",
            extra={
                "age_range": decision.age_range.to_dict(),
                "estimated_age": decision.estimated_age,
                "is_adult": decision.is_adult,
                "classification": decision.label,
                "confidence": decision.confidence,
                "reasoning": f"Estimated age {decision.estimated_age} -> {decision.label}",
            }
        )
