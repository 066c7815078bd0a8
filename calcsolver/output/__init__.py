"""Output layer: step generation."""

from .step_generator import StepGenerator

__all__ = ["StepGenerator"]
