"""Google Vision text detection client."""

from __future__ import annotations

import logging
import re
from typing import NoReturn, Optional

import httpx

from pantrychef import metrics
from pantrychef.config import Settings, get_settings
from pantrychef.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
_DATA_URL_PREFIX = re.compile(r"^data:image/[a-z0-9.+-]+;base64,", re.IGNORECASE)


def strip_data_url(image: str) -> str:
    """Drop a ``data:image/...;base64,`` prefix so only the base64 payload remains."""

    return _DATA_URL_PREFIX.sub("", image.strip())


class VisionOcrClient:
    """Call the Vision ``images:annotate`` endpoint with a TEXT_DETECTION request."""

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = "https://vision.googleapis.com/v1",
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    def detect_text(self, image_base64: str) -> str:
        payload = {
            "requests": [
                {
                    "image": {"content": strip_data_url(image_base64)},
                    "features": [{"type": "TEXT_DETECTION", "maxResults": 1}],
                }
            ]
        }
        body = self._post(payload)

        responses = body.get("responses") if isinstance(body, dict) else None
        if not isinstance(responses, list) or not responses or not isinstance(responses[0], dict):
            self._fail("No response from Vision API")
        first = responses[0]
        if error := first.get("error"):
            message = error.get("message") if isinstance(error, dict) else error
            self._fail(f"Vision API reported an error: {message}")

        annotation = first.get("fullTextAnnotation") or {}
        if not isinstance(annotation, dict):
            self._fail("Vision API returned a malformed text annotation")
        text = annotation.get("text") or ""
        if not isinstance(text, str):
            self._fail("Vision API returned non-text annotation content")
        logger.debug("Vision detected %s characters of text", len(text))
        return text

    def _post(self, payload: dict[str, object]) -> object:
        endpoint = f"{self._base_url}/images:annotate"
        params = {"key": self._api_key}
        try:
            if self._client is not None:
                response = self._client.post(endpoint, params=params, json=payload)
            else:
                with httpx.Client(timeout=self._timeout) as client:
                    response = client.post(endpoint, params=params, json=payload)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            self._fail(
                f"Failed to process image with Google Vision API: status {exc.response.status_code}"
            )
        except httpx.HTTPError as exc:
            self._fail(f"Failed to process image with Google Vision API: {exc}")
        except ValueError as exc:
            self._fail(f"Vision API returned a non-JSON body: {exc}")

    @staticmethod
    def _fail(message: str) -> NoReturn:
        metrics.UPSTREAM_FAILURES.labels(upstream="ocr").inc()
        logger.warning("OCR upstream failure: %s", message, extra={"upstream": "ocr"})
        raise UpstreamUnavailable("ocr", message)


def build_ocr_engine(settings: Optional[Settings] = None) -> VisionOcrClient:
    """Create a Vision client from settings."""

    settings = settings or get_settings()
    if not settings.vision_api_key:
        raise UpstreamUnavailable("ocr", "Google Vision API key is not configured.")
    return VisionOcrClient(
        api_key=settings.vision_api_key,
        base_url=settings.vision_base_url,
        timeout=settings.http_timeout,
    )


__all__ = ["VisionOcrClient", "build_ocr_engine", "strip_data_url"]
