from typing import Any

from fesghel.utils import metrics


def lambda_handler(event: dict, context: Any) -> dict:
    """Expose the metrics of this execution environment in the Prometheus text format

    Every warm Lambda instance keeps its own registry, so a scrape only sees
    the requests served by the instance that answered it.
    """
    return {
        'statusCode': 200,
        'headers': {'Content-Type': metrics.CONTENT_TYPE},
        'body': metrics.render(),
    }
