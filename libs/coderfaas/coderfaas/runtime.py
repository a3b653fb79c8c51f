"""
Runtime for coder-faas functions

Invokes handlers in-process and provides a local FastAPI host that routes
HTTP requests to them. The host is a development aid; production hosts
only need the handler contract in types.py.
"""

import asyncio
import importlib
import inspect
import json
import logging
import os
import pkgutil
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from .config import Settings, apply_config, load_functions_yaml
from .decorators import FunctionRegistry
from .types import Context, FunctionMetadata, FunctionNotFoundError, Request, Response

logger = logging.getLogger(__name__)

BODY_METHODS = ("POST", "PUT", "PATCH")


def now_iso() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a Z suffix"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def load_functions(module_path: str) -> List[FunctionMetadata]:
    """
    Import a module (and every submodule when it is a package) and return
    the functions it defines.

    Functions are read from the imported modules themselves, so a cleared
    registry is repopulated even when the modules were imported before.
    """
    module = importlib.import_module(module_path)
    modules = [module]
    if hasattr(module, "__path__"):
        for info in pkgutil.walk_packages(module.__path__, prefix=f"{module.__name__}."):
            if info.name.rsplit(".", 1)[-1].startswith("_"):
                continue
            modules.append(importlib.import_module(info.name))

    found: Dict[str, FunctionMetadata] = {}
    for mod in modules:
        for _, obj in inspect.getmembers(mod):
            meta = getattr(obj, "_coderfaas_function", None)
            if isinstance(meta, FunctionMetadata) and meta.name not in found:
                found[meta.name] = meta
                FunctionRegistry.register(meta)

    logger.info(f"Loaded {len(found)} functions from {module_path}")
    return list(found.values())


def get_function(name: str) -> FunctionMetadata:
    meta = FunctionRegistry.get(name)
    if meta is None:
        raise FunctionNotFoundError(f"Function '{name}' is not registered")
    return meta


def build_context(
    meta: FunctionMetadata,
    method: str,
    url: str = "/",
    headers: Optional[Dict[str, str]] = None,
    query: Optional[Dict[str, str]] = None,
    body: Any = None,
) -> Context:
    """Build the Context for a single invocation"""
    return Context(
        request=Request(
            method=method,
            url=url,
            headers=dict(headers or {}),
            query=dict(query or {}),
            body=body,
        ),
        function_name=meta.name,
        invocation_id=uuid.uuid4().hex[:8],
        timestamp=now_iso(),
        namespace=meta.namespace,
        environment=dict(meta.environment),
    )


def normalize_result(result: Any) -> Response:
    """Turn whatever a handler returned into a Response"""
    if isinstance(result, Response):
        return result
    if result is None:
        return Response.json({"status": "ok"})
    if isinstance(result, (dict, list)):
        return Response.json(result)
    if isinstance(result, bytes):
        return Response(body=result, headers={"Content-Type": "application/octet-stream"})
    if isinstance(result, str):
        return Response.text(result)
    return Response.json({"result": str(result)})


async def invoke(meta: FunctionMetadata, context: Context) -> Response:
    """
    Invoke a function and normalise its result.

    Exceptions raised by the handler propagate to the caller.
    """
    logger.debug(f"Invoking {meta.name} ({context.invocation_id})")
    result = meta.handler(context)

    # Always await if result is a coroutine (handles sync wrappers around async handlers)
    if asyncio.iscoroutine(result):
        result = await asyncio.wait_for(result, timeout=meta.timeout)
    return normalize_result(result)


def encode_body(response: Response) -> bytes:
    """Serialise a response body for the wire"""
    body = response.body
    if body is None:
        return b""
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode()
    return json.dumps(body, ensure_ascii=False).encode()


def _decode_body(raw: bytes) -> Any:
    """Decode JSON objects and arrays; any other body is handed over as text"""
    if not raw:
        return None
    text = raw.decode(errors="replace")
    try:
        decoded = json.loads(text)
    except ValueError:
        return text
    return decoded if isinstance(decoded, (dict, list)) else text


def build_url(meta: FunctionMetadata, query: Optional[Dict[str, str]] = None) -> str:
    """Path of a function's HTTP trigger with `query` appended"""
    path = meta.http_trigger.path if meta.http_trigger else "/"
    return f"{path}?{urlencode(query)}" if query else path


def create_app(
    module_path: Optional[str] = None,
    title: str = "coder-faas",
    version: str = "1.0.0",
    function_filter: Optional[str] = None,
    config: Optional[Dict[str, Any]] = None,
):
    """
    Create a FastAPI application that serves functions locally.

    Args:
        module_path: Module to load functions from (optional if the
            functions are already registered)
        title: API title
        version: API version
        function_filter: If set, only serve this specific function
        config: Parsed functions.yaml; loaded from disk when omitted

    Returns:
        FastAPI application instance
    """
    from fastapi import FastAPI
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.responses import JSONResponse
    from pydantic import BaseModel, Field

    class InvokeRequest(BaseModel):
        method: str = "GET"
        url: Optional[str] = None
        query: Dict[str, str] = Field(default_factory=dict)
        headers: Dict[str, str] = Field(default_factory=dict)
        body: Any = None

    if module_path:
        load_functions(module_path)

    settings = Settings.from_env()
    if config is None:
        config = load_functions_yaml(settings.config_path)

    target_function = function_filter or settings.function
    functions = apply_config(
        [
            f for f in FunctionRegistry.get_all().values()
            if target_function is None or f.name == target_function
        ],
        config,
    )
    functions = [f for f in functions if f.enabled]
    served = {f.name: f for f in functions}

    app = FastAPI(title=title, version=version)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health():
        return {"status": "healthy", "timestamp": now_iso()}

    @app.get("/ready")
    async def ready():
        return {"ready": True}

    @app.get("/live")
    async def live():
        return {"alive": True}

    @app.get("/_functions")
    async def list_functions():
        return {
            "functions": [
                {
                    "name": f.name,
                    "namespace": f.namespace,
                    "path": f.http_trigger.path if f.http_trigger else None,
                    "methods": f.http_trigger.methods if f.http_trigger else None,
                }
                for f in functions
            ]
        }

    @app.post("/_invoke/{name}")
    async def invoke_named(name: str, payload: InvokeRequest):
        meta = served.get(name)
        if meta is None:
            return JSONResponse(content={"error": f"Function '{name}' not found"}, status_code=404)

        url = payload.url or build_url(meta, payload.query)
        ctx = build_context(meta, payload.method, url, payload.headers, payload.query, payload.body)
        try:
            response = await invoke(meta, ctx)
        except Exception as e:
            logger.exception(f"Function {meta.name} failed: {e}")
            return JSONResponse(content={"error": str(e), "function": meta.name}, status_code=500)

        body = response.body
        if isinstance(body, bytes):
            body = body.decode(errors="replace")
        return {"status": response.status, "headers": response.headers, "body": body}

    for meta in functions:
        if meta.http_trigger:
            _register_http_function(app, meta)

    return app


def _register_http_function(app: Any, meta: FunctionMetadata) -> None:
    """Register an HTTP-triggered function with FastAPI"""
    from fastapi.responses import JSONResponse
    from fastapi import Request as FastAPIRequest
    from fastapi.responses import Response as FastAPIResponse

    http_spec = meta.http_trigger

    async def handler(request: FastAPIRequest) -> Any:
        body = None
        if request.method in BODY_METHODS:
            body = _decode_body(await request.body())

        url = request.url.path
        if request.url.query:
            url = f"{url}?{request.url.query}"

        ctx = build_context(
            meta,
            method=request.method,
            url=url,
            headers=dict(request.headers),
            query=dict(request.query_params),
            body=body,
        )

        try:
            response = await invoke(meta, ctx)
        except Exception as e:
            logger.exception(f"Function {meta.name} failed: {e}")
            return JSONResponse(
                content={"error": str(e), "function": meta.name},
                status_code=500,
            )

        if response.body is None or isinstance(response.body, (str, bytes)):
            return FastAPIResponse(
                content=response.body,
                status_code=response.status,
                headers=response.headers,
                media_type=response.content_type or "text/plain",
            )
        return JSONResponse(
            content=response.body,
            status_code=response.status,
            headers=response.headers,
        )

    handler.__name__ = f"handle_{meta.name.replace('-', '_')}"

    app.add_api_route(
        http_spec.path,
        handler,
        methods=http_spec.methods,
        name=meta.name,
        tags=[meta.namespace],
    )


def run_function(module_path: str, function_name: Optional[str] = None, host: Optional[str] = None, port: Optional[int] = None):
    """
    Serve a function module with uvicorn.

    Args:
        module_path: Python module path to import (e.g., "functions")
        function_name: Specific function to serve (optional)
    """
    import sys

    import uvicorn

    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level)

    # Handler packages are usually run from their app directory
    sys.path.insert(0, os.getcwd())

    target = function_name or settings.function
    app = create_app(
        module_path,
        title=f"coder-faas: {target or 'all'}",
        function_filter=target,
    )

    host = host or settings.host
    port = port or settings.port
    logger.info(f"Starting function server on {host}:{port}")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    import sys

    if len(sys.argv) < 2:
        print("Usage: python -m coderfaas.runtime <module_path> [function_name]")
        sys.exit(1)

    run_function(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else None)
