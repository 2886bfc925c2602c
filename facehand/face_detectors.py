"""
Face detection strategies.

A native backend (a detector provided by the platform, here OpenCV's
bundled Haar cascade or any injected callable) is tried first when one
was found at initialization; the model-free heuristic scanner is always
last in line, so a frame never goes without an answer.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import cv2

from .classical import MultiScaleScanner, suppress_overlaps
from .types import Frame, Region, WorkingFrame
from .utils import CapabilityUnavailableError, get_logger

logger = get_logger(__name__)

HAAR_CASCADE_FILE = "haarcascade_frontalface_default.xml"


class FaceDetectorBase(ABC):
    """Base class for face detection strategies."""

    name = "base"

    @abstractmethod
    def detect(self, working: WorkingFrame) -> List[Region]:
        """
        Detect faces in one frame.

        Args:
            working: Prepared frame (full frame plus working copies)

        Returns:
            Face rectangles in frame coordinates
        """


class HeuristicFaceDetector(FaceDetectorBase):
    """Multi-scale Haar-like scan followed by non-max suppression."""

    name = "heuristic"

    def __init__(self, scanner: Optional[MultiScaleScanner] = None,
                 nms_threshold: float = 0.4, max_faces: int = 3):
        self.scanner = scanner or MultiScaleScanner()
        self.nms_threshold = nms_threshold
        self.max_faces = max_faces

    @classmethod
    def from_config(cls, face_config: Dict[str, Any]) -> "HeuristicFaceDetector":
        return cls(scanner=MultiScaleScanner.from_config(face_config),
                   nms_threshold=face_config["nms_threshold"],
                   max_faces=face_config["max_faces"])

    def detect(self, working: WorkingFrame) -> List[Region]:
        candidates = self.scanner.scan(working.gray, scale=working.scale)
        return suppress_overlaps(candidates, self.nms_threshold, self.max_faces)


class HaarCascadeFaceDetector(FaceDetectorBase):
    """OpenCV's pre-trained frontal face cascade, used as a native backend."""

    name = "opencv_haar"

    def __init__(self, max_detected_faces: int = 5, scale_factor: float = 1.1,
                 min_neighbors: int = 5, cascade_path: Optional[str] = None):
        """
        Args:
            max_detected_faces: Keep at most this many detections
            scale_factor: Pyramid step passed to detectMultiScale
            min_neighbors: Neighbour count passed to detectMultiScale
            cascade_path: Cascade XML (defaults to the one bundled with OpenCV)

        Raises:
            CapabilityUnavailableError: The cascade cannot be loaded
        """
        self.max_detected_faces = max_detected_faces
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors

        try:
            path = cascade_path or cv2.data.haarcascades + HAAR_CASCADE_FILE
            self.cascade = cv2.CascadeClassifier(path)
        except (AttributeError, cv2.error) as e:
            raise CapabilityUnavailableError(self.name, cause=e)
        if self.cascade.empty():
            raise CapabilityUnavailableError(self.name)

    def detect(self, working: WorkingFrame) -> List[Region]:
        gray = cv2.cvtColor(working.frame.rgb(), cv2.COLOR_RGB2GRAY)
        rects = self.cascade.detectMultiScale(
            gray,
            scaleFactor=self.scale_factor,
            minNeighbors=self.min_neighbors,
            minSize=(30, 30)
        )
        return [Region(int(x), int(y), int(w), int(h))
                for (x, y, w, h) in rects[:self.max_detected_faces]]


def _to_region(rect: Any) -> Region:
    if isinstance(rect, Region):
        return rect
    if isinstance(rect, dict):
        return Region(int(rect["x"]), int(rect["y"]),
                      int(rect["width"]), int(rect["height"]))
    x, y, width, height = rect
    return Region(int(x), int(y), int(width), int(height))


class CallableFaceDetector(FaceDetectorBase):
    """
    Adapts a host-provided function as a native backend.

    The function receives the ``Frame`` and returns rectangles as
    ``Region`` objects, ``(x, y, width, height)`` tuples or dicts with
    those keys.
    """

    def __init__(self, detect_fn: Callable[[Frame], Iterable[Any]],
                 name: str = "callable"):
        self.detect_fn = detect_fn
        self.name = name

    def detect(self, working: WorkingFrame) -> List[Region]:
        return [_to_region(rect) for rect in self.detect_fn(working.frame)]


def load_native_detector(native_config: Dict[str, Any]) -> Optional[FaceDetectorBase]:
    """
    Build the configured native backend, if it is available.

    Returns:
        The backend, or None when it is disabled or cannot be created
    """
    backend = native_config.get("backend")
    if backend is None:
        return None

    if backend == HaarCascadeFaceDetector.name:
        try:
            return HaarCascadeFaceDetector(
                max_detected_faces=native_config["max_detected_faces"],
                scale_factor=native_config["scale_factor"],
                min_neighbors=native_config["min_neighbors"],
            )
        except CapabilityUnavailableError as e:
            logger.info(f"{e}; using computer vision algorithms")
            return None

    logger.warning(f"Unknown native backend {backend!r}; using computer vision algorithms")
    return None


class FaceDetectionChain:
    """
    Tries face detectors in priority order.

    The first detector that returns is used as-is, even with zero faces;
    a detector that raises is skipped for that frame only.
    """

    def __init__(self, detectors: Sequence[FaceDetectorBase], max_faces: int = 3):
        self.detectors = list(detectors)
        self.max_faces = max_faces

    @property
    def names(self) -> List[str]:
        return [detector.name for detector in self.detectors]

    def detect(self, working: WorkingFrame) -> Tuple[List[Region], Optional[str]]:
        """
        Returns:
            Tuple of (faces clipped to the frame, name of the detector used)
        """
        for detector in self.detectors:
            try:
                faces = detector.detect(working)
            except Exception as e:
                # Native backends are opaque; any failure means "use the next one"
                logger.debug(f"Face detector '{detector.name}' failed, falling back: {e}")
                continue

            clipped = [face.clipped(working.frame_width, working.frame_height)
                       for face in faces]
            clipped = [face for face in clipped if face.area > 0]
            return clipped[:self.max_faces], detector.name

        return [], None
