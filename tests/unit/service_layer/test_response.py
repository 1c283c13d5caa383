"""
Unit Tests for response materialization.
"""

import pytest

from pixelcache.models.transform import TransformResult
from pixelcache.optimizer.response import ResponseMaterializer, cache_control_for

ETAG = 'W/"a-99"'


@pytest.fixture
def result() -> TransformResult:
    return TransformResult(data=b"0123456789", content_type="image/webp", etag=ETAG)


@pytest.mark.unit
class TestCacheControl:
    def test_with_ttl(self):
        assert cache_control_for(3600) == "public, max-age=3600, s-maxage=3600"

    def test_without_ttl(self):
        assert cache_control_for(None) == "public, max-age=0"


@pytest.mark.unit
class TestMaterialize:
    def test_get_returns_body_and_headers(self, result):
        response = ResponseMaterializer(ttl=60).materialize(result, "GET")

        assert response.status == 200
        assert response.body == b"0123456789"
        assert response.headers == {
            "Content-Type": "image/webp",
            "ETag": ETAG,
            "Cache-Control": "public, max-age=60, s-maxage=60",
        }

    def test_head_has_headers_but_no_body(self, result):
        response = ResponseMaterializer().materialize(result, "HEAD")

        assert response.status == 200
        assert response.body == b""
        assert response.headers["Content-Type"] == "image/webp"
        assert response.headers["ETag"] == ETAG

    def test_matching_validator_is_not_modified(self, result):
        response = ResponseMaterializer(ttl=60).materialize(result, "GET", if_none_match=ETAG)

        assert response.status == 304
        assert response.body == b""
        assert response.headers == {"ETag": ETAG, "Cache-Control": "public, max-age=60, s-maxage=60"}

    def test_stale_validator_returns_body(self, result):
        response = ResponseMaterializer().materialize(result, "GET", if_none_match='W/"0-0"')
        assert response.status == 200
        assert response.body == result.data

    def test_head_ignores_validator(self, result):
        response = ResponseMaterializer().materialize(result, "head", if_none_match=ETAG)
        assert response.status == 200

    def test_validator_lists_are_not_interpreted(self, result):
        assert not ResponseMaterializer.is_not_modified(result, f'"other", {ETAG}')
