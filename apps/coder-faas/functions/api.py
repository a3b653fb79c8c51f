"""
JSON API function

GET reports that the API is up, POST echoes the submitted JSON back and
anything else is rejected with 405.
"""

import json
import logging

from coderfaas import Context, Response, http_trigger, now_iso, serverless

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ["GET", "POST"]


def _json(data, status: int = 200) -> Response:
    # Body is pre-serialised so the wire format does not depend on the host
    return Response(
        body=json.dumps(data, ensure_ascii=False, separators=(",", ":")),
        status=status,
        headers={"Content-Type": "application/json"},
    )


@serverless(name="api")
@http_trigger(path="/api", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def handler(context: Context) -> Response:
    request = context.request
    method, body, query = request.method, request.body, request.query

    logger.info(f"{method} request received: query={query} body={body!r}")

    if method == "GET":
        return _json({
            "message": "🚀 Coder FaaS API is running!",
            "timestamp": now_iso(),
            "query": query,
            "method": method,
        })

    if method == "POST":
        result = {"message": "✅ Data processed successfully"}
        if body is not None:
            # Malformed JSON raises here and is left to the host
            result["received"] = json.loads(body) if isinstance(body, str) else body
        result["processed_at"] = now_iso()
        return _json(result)

    return _json({"error": "Method not allowed", "allowed_methods": ALLOWED_METHODS}, status=405)
