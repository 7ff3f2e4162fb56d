# src/tally_governance/mcp/tally_client.py
"""Thin GraphQL transport for the Tally API.

One ``requests.Session`` per client, configured once from a TallyConfig.
Failures are surfaced immediately as UpstreamError; nothing is retried.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional

import requests

from tally_governance.mcp.config import TallyConfig
from tally_governance.mcp.errors import UpstreamError

log = logging.getLogger("tally_client")

_OPERATION_RE = re.compile(r"\b(?:query|mutation)\s+([A-Za-z_][A-Za-z0-9_]*)")


def operation_name(query: str) -> str:
    m = _OPERATION_RE.search(query or "")
    return m.group(1) if m else "anonymous"


def _graphql_error_message(errors: Any) -> str:
    parts = []
    for err in errors if isinstance(errors, list) else [errors]:
        if isinstance(err, dict):
            msg = err.get("message") or "unknown GraphQL error"
            status = ((err.get("extensions") or {}).get("status") or {}).get("code")
            parts.append(f"{msg} ({status})" if status else msg)
        else:
            parts.append(str(err))
    return "; ".join(parts)


class TallyClient:
    """request(query, variables) -> data against the Tally GraphQL endpoint."""

    def __init__(self, config: TallyConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update({
            "Api-Key": config.api_key,
            "Content-Type": "application/json",
            "User-Agent": config.user_agent,
        })

    def request(self, query: str, variables: Optional[dict] = None) -> Dict[str, Any]:
        op = operation_name(query)
        log.debug("POST %s op=%s variables=%s", self.config.base_url, op, variables)
        try:
            r = self.session.post(
                self.config.base_url,
                json={"query": query, "variables": variables or {}},
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            log.warning("POST %s op=%s failed: %s", self.config.base_url, op, e)
            raise UpstreamError(f"request failed: {e}")

        if r.status_code == 429:
            log.warning("POST %s op=%s -> 429", self.config.base_url, op)
            raise UpstreamError("rate limited by Tally API (HTTP 429)", status_code=429)
        if r.status_code != 200:
            log.warning("POST %s op=%s -> %s", self.config.base_url, op, r.status_code)
            body = (r.text or "").strip()[:200]
            detail = f"HTTP {r.status_code}" + (f": {body}" if body else "")
            raise UpstreamError(detail, status_code=r.status_code)

        try:
            payload = r.json()
        except ValueError:
            raise UpstreamError("invalid JSON in response", status_code=r.status_code)

        if not isinstance(payload, dict):
            raise UpstreamError("unexpected response shape", status_code=r.status_code)
        if payload.get("errors"):
            message = _graphql_error_message(payload["errors"])
            log.warning("GraphQL errors op=%s: %s", op, message)
            raise UpstreamError(message, status_code=r.status_code)
        return payload.get("data") or {}
