"""Shared fixtures: a scripted stand-in for the Tally GraphQL transport."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import pytest

from tally_governance.mcp.service import TallyService
from tally_governance.mcp.tally_client import operation_name

UNISWAP_ID = "2206072050458560434"
UNISWAP_GOVERNOR = "eip155:1:0x408ED6354d4973f66138C91495F2f2FCbd8724C3"


class FakeClient:
    """Replays queued responses per GraphQL operation name and records calls."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Optional[dict]]] = []
        self._queue: Dict[str, List[Any]] = {}

    def add(self, op: str, response: Any) -> "FakeClient":
        self._queue.setdefault(op, []).append(response)
        return self

    def request(self, query: str, variables: Optional[dict] = None) -> Dict[str, Any]:
        op = operation_name(query)
        self.calls.append((op, variables))
        queued = self._queue.get(op) or []
        if not queued:
            raise AssertionError(f"unexpected request: {op}")
        response = queued.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def ops(self) -> List[str]:
        return [op for op, _ in self.calls]

    def input_of(self, op: str, index: int = 0) -> dict:
        matching = [v for o, v in self.calls if o == op]
        return matching[index]["input"]


def organization(slug: str = "uniswap", id: str = UNISWAP_ID, **extra: Any) -> Dict[str, Any]:
    org = {
        "id": id,
        "name": slug.capitalize(),
        "slug": slug,
        "chainIds": ["eip155:1"],
        "governorIds": [UNISWAP_GOVERNOR],
        "tokenIds": ["eip155:1/erc20:0x1f9840a85d5af5bf1d1762f925bdaddc4201f984"],
        "hasActiveProposals": False,
        "proposalsCount": 80,
        "delegatesCount": 15000,
        "tokenOwnersCount": 380000,
        "metadata": {
            "description": f"{slug} governance",
            "socials": {"website": f"https://{slug}.org", "twitter": slug, "discord": None},
        },
    }
    org.update(extra)
    return org


def org_response(slug: str = "uniswap", id: str = UNISWAP_ID) -> Dict[str, Any]:
    return {"organization": organization(slug, id)}


def connection(key: str, nodes: List[dict], last_cursor: Optional[str] = None) -> Dict[str, Any]:
    return {
        key: {
            "nodes": nodes,
            "pageInfo": {"firstCursor": nodes[0].get("id") if nodes else None, "lastCursor": last_cursor},
        }
    }


@pytest.fixture
def client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def service(client: FakeClient) -> TallyService:
    return TallyService(client)
