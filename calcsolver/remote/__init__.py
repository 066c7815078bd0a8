"""Remote photo-analysis client."""

from .gemini import AnalysisResult, ClientConfig, RemoteAnalysisClient

__all__ = ["AnalysisResult", "ClientConfig", "RemoteAnalysisClient"]
