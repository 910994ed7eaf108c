"""
Per-response HTTP caching directives for availability endpoints.

Serving instances share no memory, so an in-process or long-lived cache
could let two instances serve contradictory availability. Responses are
therefore cached only for a few seconds (plus a short
stale-while-revalidate window); the admission check enforces correctness.
"""

from datetime import datetime, timezone

from fastapi import Response

CACHE_STRATEGY = {
    # Month calendar: changes with every booking
    "AVAILABILITY": {
        "ttl": 5,
        "stale_while_revalidate": 2,
        "cdn_max_age": 0,
    },
    # Per-day slot list: changes with every booking
    "DAY_SLOTS": {
        "ttl": 5,
        "stale_while_revalidate": 2,
        "cdn_max_age": 0,
    },
    # Curated anchor times: change only with settings
    "ANCHOR_TIMES": {
        "ttl": 3600,
        "stale_while_revalidate": 300,
        "cdn_max_age": 300,
    },
}


def set_cache_headers(response: Response, strategy: str) -> Response:
    """Apply the named strategy to this response only."""
    config = CACHE_STRATEGY[strategy]
    ttl = config["ttl"]
    swr = config["stale_while_revalidate"]
    cdn = config["cdn_max_age"]

    response.headers["Cache-Control"] = (
        f"public, max-age={ttl}, s-maxage={cdn}, stale-while-revalidate={swr}"
    )
    response.headers["Surrogate-Control"] = f"max-age={cdn}, stale-while-revalidate={swr}"
    response.headers["X-Data-Timestamp"] = datetime.now(timezone.utc).isoformat()
    response.headers["X-Cache-Strategy"] = "short-ttl-with-swr"
    return response


def set_no_store(response: Response) -> Response:
    response.headers["Cache-Control"] = "no-store"
    return response
