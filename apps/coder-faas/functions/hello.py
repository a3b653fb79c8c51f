"""
Plain-text greeting.

Access at: /hello?name=Ada
"""

from coderfaas import Context, Response, http_trigger, serverless


@serverless(name="hello")
@http_trigger(path="/hello", methods=["GET"])
async def handler(context: Context) -> Response:
    name = context.request.query.get("name", "World")
    return Response.text(f"Hello, {name}! 🚀 Function created with coder-faas repo.")
