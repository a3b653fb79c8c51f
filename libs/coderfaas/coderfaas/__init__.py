"""
coder-faas SDK - handler contract and local tooling for serverless functions

Usage:
    from coderfaas import serverless, http_trigger, Context, Response

    @serverless(name="hello")
    @http_trigger(path="/hello", methods=["GET"])
    async def handler(context: Context) -> Response:
        name = context.request.query.get("name") or "World"
        return Response.text(f"Hello, {name}!")
"""

from .decorators import FunctionRegistry, http_trigger, serverless
from .runtime import build_context, create_app, invoke, load_functions, now_iso
from .types import (
    CoderFaasError,
    ConfigError,
    Context,
    DuplicateFunctionError,
    FunctionMetadata,
    FunctionNotFoundError,
    Request,
    Response,
)

__version__ = "0.1.0"
__all__ = [
    "serverless",
    "http_trigger",
    "FunctionRegistry",
    "create_app",
    "build_context",
    "invoke",
    "load_functions",
    "now_iso",
    "Request",
    "Response",
    "Context",
    "FunctionMetadata",
    "CoderFaasError",
    "ConfigError",
    "DuplicateFunctionError",
    "FunctionNotFoundError",
]
