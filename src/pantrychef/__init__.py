"""
Pantrychef structured-extraction package.

Turns OCR receipt text and free-form generative model output into validated grocery items,
recipes, and meal plans, with deterministic fallbacks when extraction fails.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
