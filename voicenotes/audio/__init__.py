"""Audio capture and processing module."""

from .capture import AudioCapture, InputDeviceCheck, compute_level, has_input_device
from .utterance import UtteranceDetector, EndpointDecision
from .permission import MicrophonePermission

__all__ = [
    'AudioCapture',
    'InputDeviceCheck',
    'compute_level',
    'has_input_device',
    'UtteranceDetector',
    'EndpointDecision',
    'MicrophonePermission',
]
