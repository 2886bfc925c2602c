"""
Configuration for real-time face & hand region detection
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .utils.exceptions import ConfigurationError

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
LOGS_DIR = PROJECT_ROOT / "logs"

# Detection pipeline configuration.
# All pixel sizes are at working resolution (the frame divided by working_scale).
DETECTION_CONFIG = {
    "working_scale": 2,
    "face": {
        "min_size": 60,
        "size_step": 25,
        "position_step": 12,
        "max_size_divisor": 1.5,
        "eye_max_mean": 110,
        "forehead_margin": 15,
        "symmetry_tolerance": 25,
        "min_contrast": 20,
        "nms_threshold": 0.4,
        "max_faces": 3
    },
    "native": {
        # None unless a host opts in; "opencv_haar" loads OpenCV's bundled cascade
        "backend": os.getenv("FACEHAND_NATIVE_BACKEND"),
        "max_detected_faces": 5,
        "scale_factor": 1.1,
        "min_neighbors": 5
    },
    "motion": {
        "block_size": 16,
        "threshold": 25
    },
    "skin": {
        "block_size": 12,
        "min_skin_ratio": 0.65,
        "yuv_u_range": (-20, 30),
        "yuv_v_range": (-15, 25),
        "hsv_hue_range": (0, 60),
        "hsv_saturation_range": (0.2, 0.8),
        "rgb_min": (85, 35, 15),
        "rgb_min_spread": 12,
        "rgb_min_red_green_gap": 12
    },
    "fusion": {
        "min_overlap": 0.25,
        "aspect_ratio_range": (0.4, 2.5),
        "area_range": (300, 8000)
    }
}

# Real-time processing configuration
REALTIME_CONFIG = {
    "fps_window": 30
}

# Logging configuration
LOGGING_CONFIG = {
    "level": os.getenv("FACEHAND_LOG_LEVEL", "INFO"),
    "format": "%(asctime)s | %(levelname)-8s | %(name)-25s | %(message)s",
    "log_dir": LOGS_DIR,
    "file_logging": False
}

_BLOCK_KEYS = (
    ("face", "min_size"),
    ("face", "size_step"),
    ("face", "position_step"),
    ("face", "max_faces"),
    ("motion", "block_size"),
    ("skin", "block_size"),
)


def _merge(base: Dict[str, Any], overrides: Dict[str, Any], path: str = "") -> None:
    for key, value in overrides.items():
        dotted = f"{path}{key}"
        if key not in base:
            raise ConfigurationError(f"Unknown configuration key '{dotted}'", config_key=dotted)
        if isinstance(base[key], dict):
            if not isinstance(value, dict):
                raise ConfigurationError(
                    f"Configuration section '{dotted}' must be a mapping", config_key=dotted
                )
            _merge(base[key], value, f"{dotted}.")
        else:
            base[key] = value


def load_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Build a detection configuration from the defaults.
    
    Args:
        overrides: Nested mapping with the same shape as DETECTION_CONFIG
    
    Returns:
        A fresh configuration dictionary
    
    Raises:
        ConfigurationError: On unknown keys or invalid sizes
    """
    config = copy.deepcopy(DETECTION_CONFIG)
    if overrides:
        _merge(config, overrides)
    
    scale = config["working_scale"]
    if not isinstance(scale, int) or scale < 1:
        raise ConfigurationError("working_scale must be a positive integer",
                                 config_key="working_scale")
    
    for section, key in _BLOCK_KEYS:
        value = config[section][key]
        if not isinstance(value, int) or value <= 0:
            raise ConfigurationError(f"{section}.{key} must be a positive integer",
                                     config_key=f"{section}.{key}")
    
    backend = config["native"]["backend"]
    if isinstance(backend, str) and backend.strip().lower() in ("", "none"):
        config["native"]["backend"] = None
    
    return config


__all__ = [
    "PROJECT_ROOT", "LOGS_DIR",
    "DETECTION_CONFIG", "REALTIME_CONFIG", "LOGGING_CONFIG",
    "load_config"
]
