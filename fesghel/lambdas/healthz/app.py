from typing import Any

from fesghel.lambdas.responses import response_204


def lambda_handler(event: dict, context: Any) -> dict:
    """Liveness check: always 204 No Content, no data store round trip."""
    return response_204()
