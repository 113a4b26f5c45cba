"""memscape-setup: connect AI coding assistants to Memscape collective memory."""

__version__ = "0.1.0"
__author__ = "Memscape Contributors"
__description__ = "Connect AI coding assistants to Memscape collective memory"

from .detect import detect_environment
from .models import DetectionResult, Platform, Scope

__all__ = [
    "DetectionResult",
    "Platform",
    "Scope",
    "detect_environment",
]
