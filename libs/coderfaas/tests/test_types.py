"""Tests for coderfaas types."""

from coderfaas.types import (
    CoderFaasError,
    ConfigError,
    Context,
    DuplicateFunctionError,
    FunctionNotFoundError,
    HttpTriggerSpec,
    Request,
    Response,
)


class TestRequest:
    def test_method_is_upper_cased(self):
        assert Request(method="post").method == "POST"

    def test_defaults(self):
        req = Request(method="GET")
        assert req.url == "/"
        assert req.headers == {}
        assert req.query == {}
        assert req.body is None

    def test_header_lookup_ignores_case(self):
        req = Request(method="GET", headers={"Content-Type": "text/plain"})
        assert req.header("content-type") == "text/plain"
        assert req.header("x-missing") is None
        assert req.header("x-missing", "fallback") == "fallback"

    def test_absolute_url_uses_host_header(self):
        req = Request(method="GET", url="/math?a=1", headers={"host": "fn.example.com"})
        assert req.absolute_url == "http://fn.example.com/math?a=1"

    def test_absolute_url_without_host(self):
        req = Request(method="GET", url="/math")
        assert req.absolute_url == "http://localhost/math"

    def test_absolute_url_keeps_absolute_urls(self):
        req = Request(method="GET", url="https://other.example.com/x", headers={"host": "ignored"})
        assert req.absolute_url == "https://other.example.com/x"

    def test_search_params_first_value_wins(self):
        req = Request(method="GET", url="/calc?a=1&a=2&b=")
        assert req.search_params == {"a": "1", "b": ""}

    def test_search_params_decodes_values(self):
        req = Request(method="GET", url="/hello?name=Ada%20Lovelace")
        assert req.search_params["name"] == "Ada Lovelace"


class TestResponse:
    def test_default_values(self):
        resp = Response()
        assert resp.status == 200
        assert resp.body is None
        assert resp.headers == {}

    def test_json(self):
        resp = Response.json({"ok": True}, status=201)
        assert resp.status == 201
        assert resp.body == {"ok": True}
        assert resp.headers == {"Content-Type": "application/json"}

    def test_text(self):
        resp = Response.text("hi")
        assert resp.body == "hi"
        assert resp.content_type == "text/plain"

    def test_error_with_extra_fields(self):
        resp = Response.error("nope", status=405, allowed_methods=["GET"])
        assert resp.status == 405
        assert resp.body == {"error": "nope", "allowed_methods": ["GET"]}

    def test_content_type_lookup_ignores_case(self):
        resp = Response(body="x", headers={"content-type": "text/html"})
        assert resp.content_type == "text/html"
        assert Response().content_type is None


class TestHttpTriggerSpec:
    def test_default_methods(self):
        assert HttpTriggerSpec(path="/x").methods == ["GET", "POST"]

    def test_methods_are_upper_cased(self):
        assert HttpTriggerSpec(path="/x", methods=["get", "Delete"]).methods == ["GET", "DELETE"]


class TestContext:
    def test_defaults(self):
        ctx = Context(request=Request(method="GET"))
        assert ctx.namespace == "default"
        assert ctx.environment == {}


class TestErrors:
    def test_hierarchy(self):
        for exc in (ConfigError, DuplicateFunctionError, FunctionNotFoundError):
            assert issubclass(exc, CoderFaasError)
