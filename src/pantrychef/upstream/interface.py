"""Upstream collaborator abstraction layer."""

from __future__ import annotations

from typing import Protocol


class OcrEngine(Protocol):
    """Protocol for text detection backends."""

    def detect_text(self, image_base64: str) -> str:
        """Return detected text; an empty string means no text was found."""


class TextGenerator(Protocol):
    """Protocol for generative text backends."""

    def generate(self, prompt: str) -> str:
        """Return the raw completion for the supplied prompt."""


class StaticOcrEngine:
    """Deterministic OCR stub for development and tests."""

    def __init__(self, text: str = "") -> None:
        self.text = text
        self.calls: list[str] = []

    def detect_text(self, image_base64: str) -> str:
        self.calls.append(image_base64)
        return self.text


class StaticTextGenerator:
    """Deterministic generator stub that records every prompt it receives."""

    def __init__(self, reply: str = "{}") -> None:
        self.reply = reply
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


__all__ = ["OcrEngine", "StaticOcrEngine", "StaticTextGenerator", "TextGenerator"]
