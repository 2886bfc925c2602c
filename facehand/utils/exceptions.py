"""
Custom exception hierarchy for the face/hand detection pipeline.

Most of these never reach the caller of a detection tick: the pipeline
degrades to "detected nothing" instead. They exist so that each failure
mode can be raised close to where it happens and handled in one place.
"""

from __future__ import annotations

from typing import Any, Optional


class DetectionBaseError(Exception):
    """
    Base exception for all detection pipeline errors.
    
    Provides consistent error message formatting and optional
    context information for debugging.
    """
    
    def __init__(
        self,
        message: str,
        *,
        context: Optional[dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        """
        Initialize the exception with message and optional context.
        
        Args:
            message: Human-readable error description
            context: Additional context information
            cause: Original exception that caused this error
        """
        self.context = context or {}
        self.cause = cause
        
        full_message = message
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            full_message = f"{message} [{context_str}]"
        
        if cause:
            full_message = f"{full_message} (caused by: {cause})"
        
        super().__init__(full_message)


class FrameError(DetectionBaseError):
    """Errors related to incoming frames."""
    pass


class FrameNotReadyError(FrameError):
    """The frame source has not produced usable dimensions or data yet."""
    
    def __init__(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        reason: str = "frame not ready"
    ):
        super().__init__(
            f"Frame skipped: {reason}",
            context={"width": width, "height": height}
        )


class MalformedFrameError(FrameError):
    """Pixel buffer cannot be interpreted with the declared layout."""
    
    def __init__(
        self,
        message: str,
        expected: Optional[Any] = None,
        actual: Optional[Any] = None
    ):
        super().__init__(
            message,
            context={"expected": expected, "actual": actual}
        )


class CapabilityUnavailableError(DetectionBaseError):
    """A native face detection backend is absent or failed."""
    
    def __init__(
        self,
        backend: str,
        cause: Optional[Exception] = None
    ):
        super().__init__(
            f"Native face detection '{backend}' is unavailable",
            context={"backend": backend},
            cause=cause
        )


class ConfigurationError(DetectionBaseError):
    """Configuration-related errors."""
    
    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(
            message,
            context={"config_key": config_key},
            cause=cause
        )


class LifecycleError(DetectionBaseError):
    """A detector lifecycle request was made from the wrong state."""
    
    def __init__(self, operation: str, state: str):
        super().__init__(
            f"Cannot {operation} detector",
            context={"state": state}
        )
