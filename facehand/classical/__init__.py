"""
Classical computer vision module initialization.

This module provides the model-free heuristics for face and hand region
detection: colorspace conversion, Haar-like face scoring, multi-scale
scanning, non-max suppression, motion differencing, skin segmentation
and motion/skin fusion.
"""

from .color_space import to_grayscale, rgb_to_yuv, rgb_to_hsv
from .face_scoring import FaceRegionScorer, FaceFeatures, integral_image, band_mean
from .face_scanning import MultiScaleScanner
from .suppression import calculate_overlap, suppress_overlaps
from .motion_detection import MotionDetector
from .skin_detection import SkinSegmenter, is_skin_color
from .hand_fusion import HandCandidateFilter, fuse_motion_and_skin, is_hand_like_shape

__all__ = [
    'to_grayscale',
    'rgb_to_yuv',
    'rgb_to_hsv',
    'FaceRegionScorer',
    'FaceFeatures',
    'integral_image',
    'band_mean',
    'MultiScaleScanner',
    'calculate_overlap',
    'suppress_overlaps',
    'MotionDetector',
    'SkinSegmenter',
    'is_skin_color',
    'HandCandidateFilter',
    'fuse_motion_and_skin',
    'is_hand_like_shape'
]
