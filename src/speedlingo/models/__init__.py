"""
Data models for speedlingo.
"""

from .fork import ForkHandle, ForkState
from .pipeline import PipelineMode, PipelineResult

__all__ = [
    "ForkHandle",
    "ForkState",
    "PipelineMode",
    "PipelineResult"
]
