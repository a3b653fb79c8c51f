"""
Arithmetic on two query parameters.

Access at: /math-faas?a=6&b=3

Operands are read with integer-prefix parsing ("12abc" -> 12, "0x1f" -> 31).
A value with no leading digits is not a number and comes back as null, as
does any result computed from it.
"""

import re
from typing import Optional, Union

from coderfaas import Context, Response, http_trigger, now_iso, serverless

Number = Union[int, float]

_INT_PREFIX = re.compile(r"\s*([+-]?)(?:0[xX]([0-9a-fA-F]*)|(\d+))")


def parse_int(value: str) -> Optional[int]:
    """Parse the leading integer of `value`, or None if there is none"""
    match = _INT_PREFIX.match(value)
    if not match:
        return None
    sign, hex_digits, dec_digits = match.groups()
    if hex_digits == "":
        # "0x" with no hex digits after it
        return None
    number = int(hex_digits, 16) if hex_digits is not None else int(dec_digits)
    return -number if sign == "-" else number


def _divide(a: Optional[int], b: Optional[int]) -> Union[Number, str, None]:
    if b == 0:
        return "Division by zero"
    if a is None or b is None:
        return None
    quotient = a / b
    return int(quotient) if quotient.is_integer() else quotient


def _apply(op, a: Optional[int], b: Optional[int]) -> Optional[Number]:
    if a is None or b is None:
        return None
    return op(a, b)


@serverless(name="math-faas", namespace="faas")
@http_trigger(path="/math-faas", methods=["GET"])
async def handler(context: Context) -> Response:
    params = context.request.search_params
    a = parse_int(params.get("a") or "0")
    b = parse_int(params.get("b") or "0")

    return Response(body={
        "message": "Math operations from faas namespace",
        "inputs": {"a": a, "b": b},
        "results": {
            "sum": _apply(lambda x, y: x + y, a, b),
            "difference": _apply(lambda x, y: x - y, a, b),
            "product": _apply(lambda x, y: x * y, a, b),
            "division": _divide(a, b),
        },
        "timestamp": now_iso(),
        "namespace": "faas",
        "function": "math-faas",
    })
