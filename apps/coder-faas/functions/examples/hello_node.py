"""
Header echo used by the Fission smoke test.

The message text is matched by existing clients; keep it as is.
"""

from coderfaas import Context, Response, http_trigger, now_iso, serverless


@serverless(name="hello-node")
@http_trigger(path="/examples/hello-node", methods=["GET"])
async def handler(context: Context) -> Response:
    return Response(body={
        "message": "Hello from Node.js in Fission!",
        "timestamp": now_iso(),
        "headers": context.request.headers,
    })
