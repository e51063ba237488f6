"""Utility modules for service ranking."""

from .text_processing import TextProcessor
from .logging_config import setup_logging, StructuredLogger

__all__ = ["TextProcessor", "setup_logging", "StructuredLogger"]
