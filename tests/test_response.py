#!/usr/bin/env python3
"""
Tests for Response and result normalization.

Run with: pytest tests/test_response.py -v
"""
import json
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.runtime.response import Response, normalize_http, normalize_listener


# =============================================================================
# TEST: Response builder
# =============================================================================

class TestResponse:
    """Tests for the Response builder."""

    def test_defaults(self):
        """Test a fresh Response."""
        response = Response()
        assert response.status_code == 200
        assert response.headers == {}
        assert response.body is None
        assert response.is_base64_encoded is False
        assert response.has_overrides is False
        print("✓ Response defaults")

    def test_fluent_chain(self):
        """Test chaining status/header/set_headers."""
        response = Response({"a": 1}).status(201).header("X-One", "1").set_headers({"X-Two": "2"})
        assert response.status_code == 201
        assert response.headers == {"X-One": "1", "X-Two": "2"}
        print("✓ Fluent chaining")

    def test_headers_returns_copy(self):
        """Test the headers property cannot mutate the response."""
        response = Response()
        response.headers["X"] = "y"
        assert response.headers == {}

    def test_content_type_helpers(self):
        """Test json/text/html set the body and Content-Type."""
        assert Response().json({"a": 1}).headers["Content-Type"] == "application/json"
        assert Response().text("hi").headers["Content-Type"] == "text/plain"
        assert Response().html("<p/>").headers["Content-Type"] == "text/html"
        assert Response().text("hi").body == "hi"
        print("✓ Content-type helpers")

    def test_to_response_serializes_objects(self):
        """Test JSON encoding and default Content-Type."""
        result = Response({"message": "ok"}).to_response()
        assert result == {
            "statusCode": 200,
            "headers": {"Content-Type": "application/json"},
            "body": '{"message": "ok"}',
        }
        print("✓ Object bodies serialized as JSON")

    def test_to_response_keeps_strings_and_empty(self):
        """Test string bodies verbatim and None as ''."""
        assert Response("plain").to_response()["body"] == "plain"
        assert Response("plain").to_response()["headers"] == {}
        assert Response().to_response()["body"] == ""
        print("✓ Strings verbatim, None empty")

    def test_to_response_does_not_override_content_type(self):
        """Test an explicit Content-Type survives serialization."""
        result = Response({"a": 1}).header("Content-Type", "application/vnd.api+json").to_response()
        assert result["headers"]["Content-Type"] == "application/vnd.api+json"

    def test_shortcuts(self):
        """Test classmethod shortcuts."""
        assert Response.ok({"x": 1}).status_code == 200
        assert Response.created({"x": 1}).status_code == 201
        assert Response.accepted().status_code == 202
        assert Response.no_content().status_code == 204
        assert Response.bad_request().body == {"message": "Bad Request"}
        assert Response.unauthorized("nope").body == {"message": "nope"}
        assert Response.forbidden().status_code == 403
        assert Response.not_found().body == {"message": "Not Found"}
        assert Response.conflict().status_code == 409
        assert Response.internal_server_error().status_code == 500
        print("✓ Shortcut constructors")

    def test_binary_helpers(self):
        """Test pdf/image/file helpers."""
        pdf = Response.pdf("JVBERi0=").to_response()
        assert pdf["isBase64Encoded"] is True
        assert pdf["headers"]["Content-Type"] == "application/pdf"
        assert pdf["body"] == "JVBERi0="

        assert Response.image("aGk=", "jpg").headers["Content-Type"] == "image/jpeg"
        assert Response.image("aGk=").headers["Content-Type"] == "image/png"

        attachment = Response.file("aGk=", "text/csv", "report.csv")
        assert attachment.headers["Content-Disposition"] == 'attachment; filename="report.csv"'
        assert "isBase64Encoded" not in Response("x").to_response()
        print("✓ Binary helpers")

    def test_cors_and_cache(self):
        """Test header helpers."""
        response = Response().cors()
        assert response.headers == {
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, PATCH",
            "Access-Control-Allow-Headers": "Content-Type, Authorization",
        }
        custom = Response().cors(["https://example.com", "https://app.com"], ["GET", "POST"])
        assert custom.headers["Access-Control-Allow-Origin"] == "https://example.com, https://app.com"
        assert custom.headers["Access-Control-Allow-Methods"] == "GET, POST"

        assert Response().cache(60).headers["Cache-Control"] == "max-age=60"
        assert Response().no_cache().headers["Cache-Control"] == "no-cache, no-store, must-revalidate"
        print("✓ CORS and cache helpers")


# =============================================================================
# TEST: Normalization
# =============================================================================

class TestNormalizeHttp:
    """Tests for normalize_http()."""

    def test_plain_value(self):
        result = normalize_http({"id": 1})
        assert result["statusCode"] == 200
        assert result["headers"] == {"Content-Type": "application/json"}
        assert json.loads(result["body"]) == {"id": 1}

    def test_none_is_204(self):
        assert normalize_http(None) == {"statusCode": 204, "headers": {}, "body": ""}

    def test_falsy_values_are_not_204(self):
        """Test empty list / zero / empty string still produce 200."""
        assert normalize_http([])["body"] == "[]"
        assert normalize_http(0)["statusCode"] == 200
        assert normalize_http("")["body"] == '""'

    def test_response_used_verbatim(self):
        result = normalize_http(Response({"a": 1}).status(201).header("X-Id", "9"))
        assert result["statusCode"] == 201
        assert result["headers"] == {"X-Id": "9", "Content-Type": "application/json"}
        assert json.loads(result["body"]) == {"a": 1}


class TestNormalizeListener:
    """Tests for normalize_listener()."""

    def test_plain_value_wrapped(self):
        assert normalize_listener({"handled": True}, "eventName") == {
            "success": True,
            "matchType": "eventName",
            "body": {"handled": True},
        }

    def test_none_wrapped(self):
        assert normalize_listener(None, "pattern") == {
            "success": True,
            "matchType": "pattern",
            "body": None,
        }

    def test_body_only_response_unwrapped(self):
        """Test a body-only Response returns the raw body."""
        body = {"messageVersion": "1.0", "response": {"httpStatusCode": 200}}
        assert normalize_listener(Response(body), "pattern") is body
        assert normalize_listener(Response.ok(body), "pattern") is body
        print("✓ Body-only Response passed through raw")

    def test_any_header_makes_http_shape(self):
        """Test a single header switches to the HTTP envelope."""
        result = normalize_listener(Response({"a": 1}).header("X-Trace", "t"), "pattern")
        assert result["statusCode"] == 200
        assert result["headers"]["X-Trace"] == "t"

        # json() sets Content-Type, which counts as a header
        assert "statusCode" in normalize_listener(Response().json({"a": 1}), "pattern")
        print("✓ Any header makes the result HTTP-shaped")

    def test_custom_status_makes_http_shape(self):
        result = normalize_listener(Response({"customField": 1}).status(201).header("X-Custom", "v"), "pattern")
        assert result["statusCode"] == 201
        assert result["headers"]["X-Custom"] == "v"
        assert "customField" in result["body"]

        assert normalize_listener(Response.accepted({"a": 1}), "eventName")["statusCode"] == 202
