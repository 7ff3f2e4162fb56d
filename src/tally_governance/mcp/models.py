# src/tally_governance/mcp/models.py
"""Typed arguments for each Tally tool.

Tool calls arrive as loose JSON objects with camelCase keys; each model
validates one tool's bag once, at the boundary. Python code uses the
snake_case field names.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tally_governance.mcp.identifiers import split_id_or_slug

OrganizationsSortBy = Literal["id", "name", "explore", "popular"]
DelegatorsSortBy = Literal["id", "votes"]


class ToolArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PagedArgs(ToolArgs):
    limit: Optional[int] = Field(
        None,
        description="Maximum number of items to return (default: 20, max: 50)",
    )
    after_cursor: Optional[str] = Field(
        None, alias="afterCursor", description="Cursor for the next page (lastCursor of the previous response)"
    )
    before_cursor: Optional[str] = Field(
        None, alias="beforeCursor", description="Cursor for the previous page (firstCursor of the previous response)"
    )


class OrganizationRefArgs(PagedArgs):
    organization_id: Optional[str] = Field(
        None, alias="organizationId", description="Organization ID (large integer as string)"
    )
    organization_slug: Optional[str] = Field(
        None, alias="organizationSlug", description="Organization slug (e.g., 'uniswap'). Alternative to organizationId"
    )
    governor_id: Optional[str] = Field(
        None, alias="governorId", description="Governor ID in eip155:<chain>:<address> format"
    )


class ListDAOsIn(PagedArgs):
    sort_by: OrganizationsSortBy = Field(
        "popular",
        alias="sortBy",
        description="How to sort the DAOs (default: popular). 'explore' prioritizes DAOs with live proposals",
    )


class GetDAOIn(ToolArgs):
    slug: str = Field(..., description="The DAO's slug (e.g., 'uniswap' or 'aave')")


class ListDelegatesIn(OrganizationRefArgs):
    organization_id_or_slug: Optional[str] = Field(
        None,
        alias="organizationIdOrSlug",
        description="The organization's ID, governor ID (eip155 format), or slug "
                    "(e.g., 'arbitrum', 'eip155:1:123', or numeric ID)",
    )
    has_votes: Optional[bool] = Field(None, alias="hasVotes", description="Filter for delegates with votes")
    has_delegators: Optional[bool] = Field(
        None, alias="hasDelegators", description="Filter for delegates with delegators"
    )
    is_seeking_delegation: Optional[bool] = Field(
        None, alias="isSeekingDelegation", description="Filter for delegates seeking delegation"
    )

    @model_validator(mode="after")
    def _split_combined_reference(self) -> "ListDelegatesIn":
        # the combined value only fills fields the caller left empty
        if self.organization_id_or_slug:
            parts = split_id_or_slug(self.organization_id_or_slug)
            for name, value in parts.items():
                if not getattr(self, name):
                    setattr(self, name, value)
        return self


class GetDelegatorsIn(OrganizationRefArgs):
    address: str = Field(..., description="The Ethereum address to get delegators for (0x format)")
    sort_by: Optional[DelegatorsSortBy] = Field(
        None, alias="sortBy", description="How to sort the delegators (default: id)"
    )
    is_descending: Optional[bool] = Field(
        None, alias="isDescending", description="Sort in descending order (default: true)"
    )


class ListProposalsIn(OrganizationRefArgs):
    include_archived: Optional[bool] = Field(
        None, alias="includeArchived", description="Include archived proposals"
    )
    is_draft: Optional[bool] = Field(None, alias="isDraft", description="Filter for draft proposals")
    is_descending: Optional[bool] = Field(
        None, alias="isDescending", description="Sort in descending order (default: true)"
    )


class GetProposalIn(ToolArgs):
    id: Optional[str] = Field(None, description="The proposal's Tally ID (globally unique across all governors)")
    onchain_id: Optional[str] = Field(
        None, alias="onchainId", description="The proposal's onchain ID (only unique within a governor)"
    )
    governor_id: Optional[str] = Field(
        None, alias="governorId", description="The governor's ID (required when using onchainId)"
    )
    include_archived: Optional[bool] = Field(
        None, alias="includeArchived", description="Include archived proposals"
    )
    is_latest: Optional[bool] = Field(None, alias="isLatest", description="Get the latest version of the proposal")


class AddressVotesIn(ToolArgs):
    address: str = Field(..., description="The voter's Ethereum address (0x format)")
    organization_slug: str = Field(
        ..., alias="organizationSlug", description="Organization slug whose proposals are searched (e.g., 'uniswap')"
    )
    limit: Optional[int] = Field(None, description="Maximum number of votes to return (default: 20, max: 50)")
    after_cursor: Optional[str] = Field(None, alias="afterCursor", description="Cursor for pagination")


class AddressProposalsIn(PagedArgs):
    address: str = Field(..., description="The Ethereum address (0x format)")
    organization_id: Optional[str] = Field(
        None, alias="organizationId", description="Restrict to one organization ID"
    )
    organization_slug: Optional[str] = Field(
        None, alias="organizationSlug", description="Restrict to one organization slug"
    )
