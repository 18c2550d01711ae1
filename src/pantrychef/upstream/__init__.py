"""Clients for the OCR and generative text collaborators."""

from .interface import OcrEngine, StaticOcrEngine, StaticTextGenerator, TextGenerator
from .llm_client import GenerativeTextClient, build_text_generator
from .vision import VisionOcrClient, build_ocr_engine, strip_data_url

__all__ = [
    "GenerativeTextClient",
    "OcrEngine",
    "StaticOcrEngine",
    "StaticTextGenerator",
    "TextGenerator",
    "VisionOcrClient",
    "build_ocr_engine",
    "build_text_generator",
    "strip_data_url",
]
