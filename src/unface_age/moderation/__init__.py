"""
Age moderation for Unface

Provides the adult/minor classification used for age-gating:
- AgeClassifier, the decision policy applied to the primary face
- RekognitionFaceDetector, the AWS Rekognition face-detection adapter
"""

from .age_classifier import (
    ADULT_AGE_THRESHOLD,
    AgeClassifier,
    AgeDecision,
    AgeDetectionError,
    AgeRange,
    AgeRangeUnavailableError,
    DetectedFace,
    InvalidImageError,
    NoFaceDetectedError,
)
from .face_detector import FaceDetectionError, RekognitionFaceDetector

__all__ = [
    'ADULT_AGE_THRESHOLD',
    'AgeClassifier',
    'AgeDecision',
    'AgeDetectionError',
    'AgeRange',
    'AgeRangeUnavailableError',
    'DetectedFace',
    'FaceDetectionError',
    'InvalidImageError',
    'NoFaceDetectedError',
    'RekognitionFaceDetector',
]
