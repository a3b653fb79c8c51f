"""
Decorators for the coder-faas SDK

These decorators attach metadata to handler coroutines and record them in
a process-wide registry that the local host and the CLI read from.
"""

from typing import Any, Callable, Dict, List, Optional, TypeVar

from .types import DuplicateFunctionError, FunctionMetadata, HttpTriggerSpec

F = TypeVar("F", bound=Callable[..., Any])

# Global function registry
_registry: Dict[str, FunctionMetadata] = {}


class FunctionRegistry:
    """Registry of all decorated functions"""

    @staticmethod
    def get_all() -> Dict[str, FunctionMetadata]:
        """Get all registered functions"""
        return _registry.copy()

    @staticmethod
    def get(name: str) -> Optional[FunctionMetadata]:
        """Get function by name"""
        return _registry.get(name)

    @staticmethod
    def register(metadata: FunctionMetadata) -> None:
        """Register a function"""
        existing = _registry.get(metadata.name)
        if existing and existing.module != metadata.module:
            raise DuplicateFunctionError(
                f"Function '{metadata.name}' is already registered by {existing.module}"
            )
        _registry[metadata.name] = metadata

    @staticmethod
    def clear() -> None:
        """Clear registry (for testing)"""
        _registry.clear()

    @staticmethod
    def list_names() -> List[str]:
        """List all function names"""
        return list(_registry.keys())


def serverless(
    _func: Optional[F] = None,
    *,
    name: Optional[str] = None,
    namespace: str = "default",
    timeout: int = 30,
    environment: Optional[Dict[str, str]] = None,
    labels: Optional[Dict[str, str]] = None,
) -> Callable[[F], F]:
    """
    Register a handler as a serverless function.

    Apply it outermost, above @http_trigger, so the trigger is already
    attached when the function is registered.

    Args:
        name: Function name (defaults to the Python function name)
        namespace: Namespace reported in the handler's Context
        timeout: Function timeout in seconds
        environment: Environment variables exposed through the Context
        labels: Free-form labels shown by `coderfaas list`

    Example:
        @serverless(name="hello", namespace="faas")
        @http_trigger(path="/hello", methods=["GET"])
        async def handler(context):
            return Response.text("hi")
    """

    def decorator(func: F) -> F:
        meta = getattr(func, "_coderfaas_metadata", {})

        metadata = FunctionMetadata(
            name=name or func.__name__,
            handler=func,
            module=func.__module__,
            namespace=namespace,
            http_trigger=meta.get("http_trigger"),
            timeout=timeout,
            environment=environment or {},
            labels=labels or {},
        )
        func._coderfaas_function = metadata  # type: ignore
        FunctionRegistry.register(metadata)
        return func

    if _func is not None:
        return decorator(_func)
    return decorator


def http_trigger(
    _func: Optional[F] = None,
    *,
    path: str = "/",
    methods: Optional[List[str]] = None,
) -> Callable[[F], F]:
    """
    Configure HTTP trigger for a function.

    Args:
        path: URL path the local host routes to the function
        methods: Allowed HTTP methods (default: ["GET", "POST"])
    """

    def decorator(func: F) -> F:
        if not hasattr(func, "_coderfaas_metadata"):
            func._coderfaas_metadata = {}  # type: ignore

        func._coderfaas_metadata["http_trigger"] = HttpTriggerSpec(  # type: ignore
            path=path,
            methods=list(methods or ["GET", "POST"]),
        )
        return func

    if _func is not None:
        return decorator(_func)
    return decorator
