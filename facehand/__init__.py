"""
Real-time, model-free face and hand region detection.

Faces are found with a Haar-like brightness heuristic scanned over several
window sizes; hands are found where frame-to-frame motion meets skin colour.
"""

from .types import (
    ActivityStatus,
    DetectionResult,
    DetectionStats,
    DetectorState,
    Frame,
    Region,
    WorkingFrame,
)
from .config import load_config
from .detector import DetectionContext, DetectionPipeline, FaceHandDetector, prepare_working_frame
from .face_detectors import (
    CallableFaceDetector,
    FaceDetectionChain,
    FaceDetectorBase,
    HaarCascadeFaceDetector,
    HeuristicFaceDetector,
    load_native_detector,
)

__version__ = "0.1.0"

__all__ = [
    "ActivityStatus",
    "DetectionResult",
    "DetectionStats",
    "DetectorState",
    "Frame",
    "Region",
    "WorkingFrame",
    "load_config",
    "DetectionContext",
    "DetectionPipeline",
    "FaceHandDetector",
    "prepare_working_frame",
    "CallableFaceDetector",
    "FaceDetectionChain",
    "FaceDetectorBase",
    "HaarCascadeFaceDetector",
    "HeuristicFaceDetector",
    "load_native_detector",
]
