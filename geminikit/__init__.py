"""Models, tools, grounding, thinking and streaming helpers for the Gemini API."""

__version__ = "0.1.0"

__all__ = ["errors", "thinking", "grounding", "functions", "models", "streaming"]