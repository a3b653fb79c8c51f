"""
Type definitions for the coder-faas handler contract
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import parse_qsl, urljoin, urlsplit


class CoderFaasError(Exception):
    """Base class for SDK errors"""


class DuplicateFunctionError(CoderFaasError):
    """Two different handlers were registered under the same name"""


class FunctionNotFoundError(CoderFaasError):
    """No handler is registered under the requested name"""


class ConfigError(CoderFaasError):
    """functions.yaml could not be read or has the wrong shape"""


@dataclass
class HttpTriggerSpec:
    """HTTP trigger configuration"""
    path: str
    methods: List[str] = field(default_factory=lambda: ["GET", "POST"])

    def __post_init__(self):
        self.methods = [m.upper() for m in self.methods]


@dataclass
class FunctionMetadata:
    """Function metadata collected by the decorators"""
    name: str
    handler: Callable
    module: str
    namespace: str = "default"
    http_trigger: Optional[HttpTriggerSpec] = None
    timeout: int = 30
    environment: Dict[str, str] = field(default_factory=dict)
    labels: Dict[str, str] = field(default_factory=dict)
    enabled: bool = True


@dataclass
class Request:
    """Incoming request handed to a function inside its Context"""
    method: str
    url: str = "/"
    headers: Dict[str, str] = field(default_factory=dict)
    query: Dict[str, str] = field(default_factory=dict)
    body: Any = None

    def __post_init__(self):
        self.method = self.method.upper()

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Case-insensitive header lookup"""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return default

    @property
    def absolute_url(self) -> str:
        """The request URL resolved against the Host header"""
        host = self.header("host", "localhost")
        return urljoin(f"http://{host}", self.url)

    @property
    def search_params(self) -> Dict[str, str]:
        """Query parameters parsed from the URL (first value wins)"""
        params: Dict[str, str] = {}
        for key, value in parse_qsl(urlsplit(self.absolute_url).query, keep_blank_values=True):
            params.setdefault(key, value)
        return params


@dataclass
class Response:
    """Response returned from functions"""
    body: Any = None
    status: int = 200
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def json(cls, data: Any, status: int = 200) -> "Response":
        """Create JSON response"""
        return cls(body=data, status=status, headers={"Content-Type": "application/json"})

    @classmethod
    def text(cls, text: str, status: int = 200) -> "Response":
        """Create plain text response"""
        return cls(body=text, status=status, headers={"Content-Type": "text/plain"})

    @classmethod
    def error(cls, message: str, status: int = 500, **extra: Any) -> "Response":
        """Create error response"""
        return cls.json({"error": message, **extra}, status=status)

    @property
    def content_type(self) -> Optional[str]:
        for key, value in self.headers.items():
            if key.lower() == "content-type":
                return value
        return None


@dataclass
class Context:
    """Execution context passed to functions"""
    request: Request
    function_name: str = ""
    invocation_id: str = ""
    timestamp: str = ""
    namespace: str = "default"
    environment: Dict[str, str] = field(default_factory=dict)
