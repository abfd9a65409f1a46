"""Look up a sale on a running Lotto Hub server.

Usage:
  python scripts/verify_ticket.py S1760000000000-1a2b3c4d
  python scripts/verify_ticket.py T1760000000000-9f8e7d6c --token <bearer> --detail

Options:
  --base-url http://127.0.0.1:8000
  --timeout 10
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)


def _build_http_session(retries: int, backoff_factor: float) -> requests.Session:
    retry = Retry(
        total=retries,
        connect=retries,
        read=retries,
        status=retries,
        backoff_factor=backoff_factor,
        status_forcelist=(502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)

    session = requests.Session()
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def verify(
    http: requests.Session,
    base_url: str,
    identifier: str,
    token: str | None,
    detail: bool,
    timeout_seconds: float,
) -> dict[str, Any]:
    """Call the verification endpoint; raises RuntimeError with the server's message."""

    if detail:
        url = f"{base_url.rstrip('/')}/api/verify/detail"
        params = {"ticketId": identifier}
    else:
        url = f"{base_url.rstrip('/')}/api/verify"
        params = {"saleId": identifier}

    headers = {"Authorization": f"Bearer {token}"} if token else {}
    try:
        resp = http.get(url, params=params, headers=headers, timeout=timeout_seconds)
    except requests.RequestException as exc:
        raise RuntimeError(f"Could not reach {url}: {exc}") from exc

    try:
        payload: dict[str, Any] = resp.json()
    except ValueError as exc:
        raise RuntimeError(f"Unexpected response ({resp.status_code}) from {url}") from exc

    if not payload.get("success"):
        error = payload.get("error") or {}
        raise RuntimeError(f"{resp.status_code}: {error.get('message') or 'Verification failed'}")
    return payload["data"]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("identifier", help="sale id (or ticket id with --detail)")
    parser.add_argument("--base-url", default="http://127.0.0.1:8000")
    parser.add_argument("--token", default=None, help="bearer token for --detail")
    parser.add_argument("--detail", action="store_true", help="staff view (requires --token)")
    parser.add_argument("--timeout", type=float, default=10.0)
    parser.add_argument("--retries", type=int, default=2)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    print("Verifying...", file=sys.stderr)
    http = _build_http_session(args.retries, backoff_factor=0.5)
    try:
        data = verify(http, args.base_url, args.identifier, args.token, args.detail, args.timeout)
    except RuntimeError as exc:
        logger.error("%s", exc)
        return 1

    print(json.dumps(data, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
