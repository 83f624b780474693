"""Unface: age-gating through cloud face detection"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .web.app import create_app
    from .utils.config_loader import load_config
    from .moderation.age_classifier import AgeClassifier
    from .moderation.face_detector import RekognitionFaceDetector

__version__ = "1.0.0"

__all__ = [
    'create_app',
    'load_config',
    'AgeClassifier',
    'RekognitionFaceDetector',
]

# Module-level cache for lazy-loaded components
_module_cache = {}


def __getattr__(name):
    """Lazy import mechanism for Unface components.

    Keeps ``import unface_age`` cheap; Flask and boto3 are only imported
    when the corresponding attribute is first accessed.
    """
    if name not in __all__:
        raise AttributeError(f"module '{__name__}' has no attribute '{name}'")

    if name in _module_cache:
        return _module_cache[name]

    if name == 'create_app':
        from .web.app import create_app as value
    elif name == 'load_config':
        from .utils.config_loader import load_config as value
    elif name == 'AgeClassifier':
        from .moderation.age_classifier import AgeClassifier as value
    else:
        from .moderation.face_detector import RekognitionFaceDetector as value

    _module_cache[name] = value
    return value
