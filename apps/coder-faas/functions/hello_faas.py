from coderfaas import Context, Response, http_trigger, now_iso, serverless


@serverless(name="hello-faas", namespace="faas")
@http_trigger(path="/hello-faas", methods=["GET"])
async def handler(context: Context) -> Response:
    return Response(body={
        "message": "Hello from faas namespace!",
        "timestamp": now_iso(),
        "namespace": "faas",
        "function": "hello-faas",
    })
