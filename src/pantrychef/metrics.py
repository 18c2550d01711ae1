"""Prometheus metrics definitions for pantrychef."""

from __future__ import annotations

from prometheus_client import Counter

EXTRACTIONS = Counter(
    "pantrychef_extractions_total",
    "Structured results produced by use case and provenance",
    ["use_case", "provenance"],
)

UPSTREAM_FAILURES = Counter(
    "pantrychef_upstream_failures_total",
    "Failed calls to the OCR or generative text collaborators",
    ["upstream"],
)

PANTRY_UPSERTS = Counter(
    "pantrychef_pantry_upserts_total",
    "Pantry upserts by outcome",
    ["result"],
)

__all__ = [
    "EXTRACTIONS",
    "UPSTREAM_FAILURES",
    "PANTRY_UPSERTS",
]
