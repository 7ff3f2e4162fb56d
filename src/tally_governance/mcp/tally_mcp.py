# src/tally_governance/mcp/tally_mcp.py
from __future__ import annotations

"""
Tally governance GraphQL -> FastMCP tools (stdio server)

Tools:
- list-daos
- get-dao
- list-delegates
- get-delegators
- list-proposals
- get-proposal
- get-address-votes
- get-address-created-proposals
- get-address-daos-proposals
- health

Run as a stdio MCP server:
    export TALLY_API_KEY=...
    python -m tally_governance.mcp.tally_mcp
"""

import logging
import os
from typing import Annotated, Any, Dict, Literal, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from tally_governance.mcp.config import TallyConfig
from tally_governance.mcp.service import TallyService
from tally_governance.mcp.tally_client import TallyClient
from tally_governance.mcp.tools import TOOLS, run_tool

log = logging.getLogger("tally_mcp")

_READ_ONLY = {
    "readOnlyHint": True,
    "openWorldHint": True,
    "idempotentHint": True,
}

Limit = Annotated[Optional[int], Field(description="Maximum number of items to return (default: 20, max: 50)")]
Cursor = Annotated[Optional[str], Field(description="Cursor for pagination (lastCursor of the previous page)")]
BeforeCursor = Annotated[Optional[str], Field(description="Cursor for previous page pagination (firstCursor)")]
Flag = Optional[bool]


def _bag(**kwargs: Any) -> Dict[str, Any]:
    return {k: v for k, v in kwargs.items() if v is not None}


def create_server(service: TallyService, config: Optional[TallyConfig] = None) -> FastMCP:
    """Register every tool against ``service``.

    Tool argument names follow the Tally API (camelCase).
    """
    mcp = FastMCP("TallyAPI")

    @mcp.tool(
        name="list-daos",
        title="List DAOs",
        description=TOOLS["list-daos"].description,
        annotations=_READ_ONLY,
    )
    def list_daos(
        limit: Limit = None,
        afterCursor: Cursor = None,
        sortBy: Annotated[
            Optional[Literal["id", "name", "explore", "popular"]],
            Field(description="How to sort the DAOs (default: popular). 'explore' prioritizes DAOs with live proposals"),
        ] = None,
    ) -> str:
        return run_tool(service, "list-daos", _bag(limit=limit, afterCursor=afterCursor, sortBy=sortBy))

    @mcp.tool(
        name="get-dao",
        title="Get DAO",
        description=TOOLS["get-dao"].description,
        annotations=_READ_ONLY,
    )
    def get_dao(
        slug: Annotated[str, Field(description="The DAO's slug (e.g., 'uniswap' or 'aave')")],
    ) -> str:
        return run_tool(service, "get-dao", {"slug": slug})

    @mcp.tool(
        name="list-delegates",
        title="List Delegates",
        description=TOOLS["list-delegates"].description,
        annotations=_READ_ONLY,
    )
    def list_delegates(
        organizationIdOrSlug: Annotated[str, Field(
            description="The organization's ID, governor ID (eip155 format), or slug "
                        "(e.g., 'arbitrum', 'eip155:1:123', or numeric ID)",
        )],
        limit: Limit = None,
        afterCursor: Cursor = None,
        hasVotes: Annotated[Flag, Field(description="Filter for delegates with votes")] = None,
        hasDelegators: Annotated[Flag, Field(description="Filter for delegates with delegators")] = None,
        isSeekingDelegation: Annotated[Flag, Field(description="Filter for delegates seeking delegation")] = None,
    ) -> str:
        return run_tool(service, "list-delegates", _bag(
            organizationIdOrSlug=organizationIdOrSlug,
            limit=limit,
            afterCursor=afterCursor,
            hasVotes=hasVotes,
            hasDelegators=hasDelegators,
            isSeekingDelegation=isSeekingDelegation,
        ))

    @mcp.tool(
        name="get-delegators",
        title="Get Delegators",
        description=TOOLS["get-delegators"].description,
        annotations=_READ_ONLY,
    )
    def get_delegators(
        address: Annotated[str, Field(description="The Ethereum address to get delegators for (0x format)")],
        organizationId: Annotated[Optional[str], Field(description="Filter by specific organization ID")] = None,
        organizationSlug: Annotated[Optional[str], Field(description="Filter by organization slug")] = None,
        governorId: Annotated[Optional[str], Field(description="Filter by specific governor ID")] = None,
        limit: Limit = None,
        afterCursor: Cursor = None,
        beforeCursor: BeforeCursor = None,
        sortBy: Annotated[
            Optional[Literal["id", "votes"]],
            Field(description="How to sort the delegators (default: id)"),
        ] = None,
        isDescending: Annotated[Flag, Field(description="Sort in descending order (default: true)")] = None,
    ) -> str:
        return run_tool(service, "get-delegators", _bag(
            address=address,
            organizationId=organizationId,
            organizationSlug=organizationSlug,
            governorId=governorId,
            limit=limit,
            afterCursor=afterCursor,
            beforeCursor=beforeCursor,
            sortBy=sortBy,
            isDescending=isDescending,
        ))

    @mcp.tool(
        name="list-proposals",
        title="List Proposals",
        description=TOOLS["list-proposals"].description,
        annotations=_READ_ONLY,
    )
    def list_proposals(
        organizationId: Annotated[Optional[str], Field(description="Filter by organization ID (large integer as string)")] = None,
        organizationSlug: Annotated[Optional[str], Field(description="Filter by organization slug (e.g., 'uniswap')")] = None,
        governorId: Annotated[Optional[str], Field(description="Filter by governor ID")] = None,
        includeArchived: Annotated[Flag, Field(description="Include archived proposals")] = None,
        isDraft: Annotated[Flag, Field(description="Filter for draft proposals")] = None,
        limit: Limit = None,
        afterCursor: Cursor = None,
        beforeCursor: BeforeCursor = None,
        isDescending: Annotated[Flag, Field(description="Sort in descending order (default: true)")] = None,
    ) -> str:
        return run_tool(service, "list-proposals", _bag(
            organizationId=organizationId,
            organizationSlug=organizationSlug,
            governorId=governorId,
            includeArchived=includeArchived,
            isDraft=isDraft,
            limit=limit,
            afterCursor=afterCursor,
            beforeCursor=beforeCursor,
            isDescending=isDescending,
        ))

    @mcp.tool(
        name="get-proposal",
        title="Get Proposal",
        description=TOOLS["get-proposal"].description,
        annotations=_READ_ONLY,
    )
    def get_proposal(
        id: Annotated[Optional[str], Field(description="The proposal's Tally ID")] = None,
        onchainId: Annotated[Optional[str], Field(description="The proposal's onchain ID (only unique within a governor)")] = None,
        governorId: Annotated[Optional[str], Field(description="The governor's ID (required when using onchainId)")] = None,
        includeArchived: Annotated[Flag, Field(description="Include archived proposals")] = None,
        isLatest: Annotated[Flag, Field(description="Get the latest version of the proposal")] = None,
    ) -> str:
        return run_tool(service, "get-proposal", _bag(
            id=id,
            onchainId=onchainId,
            governorId=governorId,
            includeArchived=includeArchived,
            isLatest=isLatest,
        ))

    @mcp.tool(
        name="get-address-votes",
        title="Get Address Votes",
        description=TOOLS["get-address-votes"].description,
        annotations=_READ_ONLY,
    )
    def get_address_votes(
        address: Annotated[str, Field(description="The voter's Ethereum address (0x format)")],
        organizationSlug: Annotated[str, Field(description="Organization slug (e.g., 'uniswap')")],
        limit: Limit = None,
        afterCursor: Cursor = None,
    ) -> str:
        return run_tool(service, "get-address-votes", _bag(
            address=address, organizationSlug=organizationSlug, limit=limit, afterCursor=afterCursor,
        ))

    @mcp.tool(
        name="get-address-created-proposals",
        title="Get Address Created Proposals",
        description=TOOLS["get-address-created-proposals"].description,
        annotations=_READ_ONLY,
    )
    def get_address_created_proposals(
        address: Annotated[str, Field(description="The proposer's Ethereum address (0x format)")],
        organizationId: Annotated[Optional[str], Field(description="Restrict to one organization ID")] = None,
        organizationSlug: Annotated[Optional[str], Field(description="Restrict to one organization slug")] = None,
        limit: Limit = None,
        afterCursor: Cursor = None,
    ) -> str:
        return run_tool(service, "get-address-created-proposals", _bag(
            address=address, organizationId=organizationId, organizationSlug=organizationSlug,
            limit=limit, afterCursor=afterCursor,
        ))

    @mcp.tool(
        name="get-address-daos-proposals",
        title="Get Address DAO Proposals",
        description=TOOLS["get-address-daos-proposals"].description,
        annotations=_READ_ONLY,
    )
    def get_address_daos_proposals(
        address: Annotated[str, Field(description="The Ethereum address (0x format)")],
        organizationId: Annotated[Optional[str], Field(description="Organization ID")] = None,
        organizationSlug: Annotated[Optional[str], Field(description="Organization slug")] = None,
        limit: Limit = None,
        afterCursor: Cursor = None,
    ) -> str:
        return run_tool(service, "get-address-daos-proposals", _bag(
            address=address, organizationId=organizationId, organizationSlug=organizationSlug,
            limit=limit, afterCursor=afterCursor,
        ))

    @mcp.tool(
        name="health",
        title="Health Check",
        description="Check the configuration of the Tally API service.",
        annotations={
            "readOnlyHint": True,
            "openWorldHint": False,
            "idempotentHint": True
        }
    )
    def health() -> Dict[str, Any]:
        return {
            "ok": True,
            "service": "TallyAPI",
            "api": config.base_url if config else None,
            "timeout": config.timeout if config else None,
        }

    return mcp


def main() -> None:
    level = os.getenv("TALLY_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO))
    config = TallyConfig.from_env()
    service = TallyService(TallyClient(config))
    log.info("Tally MCP server running on stdio (%s)", config.base_url)
    create_server(service, config).run(transport="stdio")


# -----------------------------
# MCP stdio launcher
# -----------------------------
if __name__ == "__main__":
    main()
