"""
Per-frame detection pipeline and detector lifecycle.

The pipeline is driven from outside: the host calls ``tick`` once per
display refresh (or whenever a frame is available). Each tick runs the
whole pipeline synchronously; the only state carried between ticks is
the previous working frame held by a ``DetectionContext``.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import numpy as np

from .classical import HandCandidateFilter, MotionDetector, SkinSegmenter, to_grayscale
from .config import REALTIME_CONFIG, load_config
from .face_detectors import (
    FaceDetectionChain,
    FaceDetectorBase,
    HeuristicFaceDetector,
    load_native_detector,
)
from .types import (
    ActivityStatus,
    DetectionResult,
    DetectionStats,
    DetectorState,
    Frame,
    WorkingFrame,
)
from .utils import (
    FPSCounter,
    FrameError,
    LifecycleError,
    downsample,
    get_logger,
    log_execution_time,
)

logger = get_logger(__name__)

StatusListener = Callable[[ActivityStatus], None]


@dataclass
class DetectionContext:
    """State carried from one tick to the next."""

    previous_frame: Optional[np.ndarray] = None
    frame_index: int = 0

    def swap(self, current: np.ndarray) -> Optional[np.ndarray]:
        """Install ``current`` as the previous frame and return the old one."""
        previous = self.previous_frame
        self.previous_frame = current.copy()
        self.frame_index += 1
        return previous

    def reset(self):
        self.previous_frame = None
        self.frame_index = 0


def prepare_working_frame(frame: Frame, scale: int = 2) -> WorkingFrame:
    """
    Downsample a frame once for both detection paths.

    Raises:
        FrameNotReadyError: The frame has no usable data yet
        MalformedFrameError: The buffer cannot be interpreted
    """
    rgb = downsample(frame.rgb(), scale)
    return WorkingFrame(frame=frame, rgb=rgb, gray=to_grayscale(rgb), scale=scale)


class DetectionPipeline:
    """
    One full pass of face and hand detection over a frame.
    """

    def __init__(self, face_chain: FaceDetectionChain,
                 config: Optional[Dict[str, Any]] = None):
        """
        Args:
            face_chain: Face detectors in priority order
            config: Detection configuration (defaults from ``load_config``)
        """
        self.config = config or load_config()
        self.face_chain = face_chain
        self.scale = self.config["working_scale"]
        self.motion_detector = MotionDetector.from_config(self.config["motion"])
        self.skin_segmenter = SkinSegmenter.from_config(self.config["skin"])
        self.hand_filter = HandCandidateFilter.from_config(self.config["fusion"])

    @log_execution_time()
    def process_frame(self, frame: Frame, context: DetectionContext) -> DetectionResult:
        """
        Detect faces and hands in one frame.

        Frames that are not ready or cannot be read produce an empty result
        and leave ``context`` untouched.

        Args:
            frame: Current frame, only read during this call
            context: Previous-frame state, updated in place

        Returns:
            Fresh DetectionResult in frame coordinates
        """
        try:
            working = prepare_working_frame(frame, self.scale)
        except FrameError as e:
            logger.debug(f"Skipping frame: {e}")
            return DetectionResult.empty()

        faces, detector_name = self.face_chain.detect(working)

        # Read the old buffer before installing the new one
        previous = context.swap(working.rgb)
        motion_regions = self.motion_detector.detect(working.rgb, previous)
        skin_regions = self.skin_segmenter.detect(working.rgb)
        hands = self.hand_filter.find_hands(motion_regions, skin_regions, working.scale)
        hands = [hand.clipped(frame.width, frame.height) for hand in hands]

        logger.debug(
            f"Frame {context.frame_index}: {len(faces)} faces via {detector_name}, "
            f"{len(motion_regions)} motion / {len(skin_regions)} skin blocks, "
            f"{len(hands)} hands"
        )
        return DetectionResult(faces=tuple(faces), hands=tuple(hands))


class FaceHandDetector:
    """
    Real-time face and hand region detector with an explicit lifecycle.

    States: IDLE -> LOADING -> READY -> DETECTING <-> PAUSED -> STOPPED.
    A stopped detector can be started again.

    Example:
        detector = FaceHandDetector(on_status=dashboard.update)
        detector.initialize()
        detector.start()
        result = detector.tick(frame)
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 native_detector: Optional[FaceDetectorBase] = None,
                 on_status: Optional[StatusListener] = None,
                 clock: Optional[Callable[[], float]] = None):
        """
        Args:
            config: Overrides merged over the default configuration
            native_detector: Native backend to use instead of the configured one
            on_status: Called synchronously with the activity status after
                every start, stop, pause and resume
            clock: Time source for the frame rate counter
        """
        self.config = load_config(config)
        self.native_detector = native_detector
        self.on_status = on_status
        self.clock = clock

        self.state = DetectorState.IDLE
        self.status_message = 'Call initialize() to begin'
        self.pipeline: Optional[DetectionPipeline] = None
        self.context: Optional[DetectionContext] = None
        self.stats = DetectionStats()
        self.fps_counter = FPSCounter(REALTIME_CONFIG["fps_window"], clock=clock)

    @property
    def native_available(self) -> bool:
        return self.native_detector is not None

    @property
    def activity(self) -> ActivityStatus:
        detecting = self.state == DetectorState.DETECTING
        return ActivityStatus(
            face_detection=detecting,
            hand_detection=detecting,
            camera_active=self.state.is_active,
        )

    def _require(self, operation: str, *states: DetectorState):
        if self.state not in states:
            raise LifecycleError(operation, self.state.value)

    def _emit_status(self):
        if self.on_status is None:
            return
        try:
            self.on_status(self.activity)
        except Exception as e:
            logger.warning(f"Status listener failed: {e}")

    def initialize(self) -> DetectorState:
        """
        Select the face detection strategies.

        Never fails: without a native backend the heuristic path is used.
        """
        self._require("initialize", DetectorState.IDLE, DetectorState.STOPPED)
        self.state = DetectorState.LOADING
        self.status_message = "Loading detection models..."

        if self.native_detector is None:
            self.native_detector = load_native_detector(self.config["native"])

        detectors = [HeuristicFaceDetector.from_config(self.config["face"])]
        if self.native_detector is not None:
            detectors.insert(0, self.native_detector)
            self.status_message = "Native face detection loaded"
        else:
            self.status_message = "Using computer vision algorithms"

        face_chain = FaceDetectionChain(detectors, max_faces=self.config["face"]["max_faces"])
        self.pipeline = DetectionPipeline(face_chain, self.config)

        self.state = DetectorState.READY
        logger.info(f"{self.status_message} (face detectors: {face_chain.names})")
        return self.state

    def start(self) -> DetectorState:
        """Begin detecting with an empty previous-frame buffer."""
        self._require("start", DetectorState.READY, DetectorState.STOPPED)
        if self.pipeline is None:
            raise LifecycleError("start uninitialized", self.state.value)

        self.context = DetectionContext()
        self.fps_counter.reset()
        self.state = DetectorState.DETECTING
        self.status_message = "Detection running"
        logger.info("Detection started")
        self._emit_status()
        return self.state

    def pause(self) -> DetectorState:
        self._require("pause", DetectorState.DETECTING)
        self.state = DetectorState.PAUSED
        self.status_message = "Detection paused"
        self.stats = DetectionStats(fps=self.stats.fps)
        logger.info("Detection paused")
        self._emit_status()
        return self.state

    def resume(self) -> DetectorState:
        self._require("resume", DetectorState.PAUSED)
        self.state = DetectorState.DETECTING
        self.status_message = "Detection running"
        self.fps_counter.reset()
        logger.info("Detection resumed")
        self._emit_status()
        return self.state

    def toggle_pause(self) -> DetectorState:
        if self.state == DetectorState.PAUSED:
            return self.resume()
        return self.pause()

    def stop(self) -> DetectorState:
        """Stop detecting and release the previous-frame buffer."""
        self._require("stop", DetectorState.DETECTING, DetectorState.PAUSED)
        if self.context is not None:
            self.context.reset()
        self.context = None
        self.stats = DetectionStats()
        self.fps_counter.reset()
        self.state = DetectorState.STOPPED
        self.status_message = "Detection stopped"
        logger.info("Detection stopped")
        self._emit_status()
        return self.state

    def tick(self, frame: Optional[Frame], ready: bool = True) -> DetectionResult:
        """
        Run one pipeline pass.

        Outside the DETECTING state, or when the frame source is not ready,
        nothing is processed and an empty result is returned.

        Args:
            frame: Current frame
            ready: Whether the frame source has valid data for this tick

        Returns:
            DetectionResult for this frame
        """
        if self.state != DetectorState.DETECTING or not ready or frame is None:
            return DetectionResult.empty()

        result = self.pipeline.process_frame(frame, self.context)
        fps = self.fps_counter.update()
        self.stats = DetectionStats(faces=result.face_count,
                                    hands=result.hand_count,
                                    fps=int(round(fps)))
        return result
