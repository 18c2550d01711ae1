from __future__ import annotations

import json

import httpx
import pytest

from pantrychef.config import Settings
from pantrychef.errors import UpstreamUnavailable
from pantrychef.upstream.vision import VisionOcrClient, build_ocr_engine, strip_data_url


def _client(handler) -> VisionOcrClient:
    transport = httpx.MockTransport(handler)
    return VisionOcrClient(
        api_key="vision-secret",
        base_url="https://vision.test/v1/",
        client=httpx.Client(transport=transport),
    )


def test_detect_text_sends_text_detection_request():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200, json={"responses": [{"fullTextAnnotation": {"text": "Milk 3.99\n"}}]}
        )

    text = _client(handler).detect_text("data:image/png;base64,QUJD")

    assert text == "Milk 3.99\n"
    assert seen["url"].path == "/v1/images:annotate"
    assert seen["url"].params["key"] == "vision-secret"
    request = seen["body"]["requests"][0]
    assert request["image"]["content"] == "QUJD"
    assert request["features"][0]["type"] == "TEXT_DETECTION"


def test_missing_annotation_means_no_text():
    client = _client(lambda request: httpx.Response(200, json={"responses": [{}]}))

    assert client.detect_text("QUJD") == ""


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={}),
        httpx.Response(200, json={"responses": []}),
        httpx.Response(200, json={"responses": [{"error": {"message": "bad image"}}]}),
        httpx.Response(403, json={"error": "denied"}),
        httpx.Response(200, text="<html>oops</html>"),
    ],
)
def test_failures_raise_upstream_unavailable(response):
    client = _client(lambda request: response)

    with pytest.raises(UpstreamUnavailable) as excinfo:
        client.detect_text("QUJD")
    assert excinfo.value.upstream == "ocr"


def test_transport_errors_raise_upstream_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamUnavailable):
        _client(handler).detect_text("QUJD")


def test_strip_data_url_leaves_plain_base64_alone():
    assert strip_data_url("data:image/jpeg;base64,AAAA") == "AAAA"
    assert strip_data_url("  AAAA ") == "AAAA"


def test_build_ocr_engine_requires_key():
    with pytest.raises(UpstreamUnavailable):
        build_ocr_engine(Settings(vision_api_key=None))

    assert isinstance(build_ocr_engine(Settings(vision_api_key="k")), VisionOcrClient)


@pytest.mark.parametrize(
    "body",
    [
        {"responses": [{"fullTextAnnotation": "txt"}]},
        {"responses": [{"fullTextAnnotation": {"text": ["Milk"]}}]},
        {"responses": {"0": {"fullTextAnnotation": {"text": "Milk"}}}},
        {"responses": ["Milk 3.99"]},
    ],
)
def test_malformed_bodies_raise_upstream_unavailable(body):
    client = _client(lambda request: httpx.Response(200, json=body))

    with pytest.raises(UpstreamUnavailable) as excinfo:
        client.detect_text("QUJD")
    assert excinfo.value.upstream == "ocr"
