"""CalcSolver: scientific calculator engine and equation solver core."""

__version__ = "0.5.0"
