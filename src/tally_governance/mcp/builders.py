# src/tally_governance/mcp/builders.py
"""Compose the ``input`` object for each Tally query.

Every builder is a pure function of the typed arguments and, where the
endpoint filters by organization, the already-resolved organization id.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from tally_governance.mcp.errors import ValidationError
from tally_governance.mcp.models import (
    AddressProposalsIn,
    GetDelegatorsIn,
    GetProposalIn,
    ListDAOsIn,
    ListDelegatesIn,
    ListProposalsIn,
)
from tally_governance.mcp.pagination import page_input

PROPOSAL_SHAPE_ERROR = "Must provide either id or both onchainId and governorId"
DELEGATES_REF_ERROR = (
    "Either organizationId, organizationSlug, or governorId with organizationSlug must be provided"
)
DELEGATORS_REF_ERROR = "Either organizationId/organizationSlug or governorId must be provided"
PROPOSALS_REF_ERROR = "Either organizationId/organizationSlug or governorId must be provided to list proposals"


def _sort(sort_by: str, is_descending: Optional[bool] = None) -> Dict[str, Any]:
    return {"sortBy": sort_by, "isDescending": True if is_descending is None else bool(is_descending)}


def _set_flags(target: Dict[str, Any], **flags: Optional[bool]) -> None:
    for key, value in flags.items():
        if value is not None:
            target[key] = value


def require_address(address: Optional[str]) -> str:
    a = (address or "").strip()
    if not a:
        raise ValidationError("Address is required")
    return a


def organizations_input(args: ListDAOsIn) -> Dict[str, Any]:
    return {
        "sort": _sort(args.sort_by or "popular"),
        "page": page_input(args.limit, args.after_cursor, args.before_cursor),
    }


def organization_input(slug: str) -> Dict[str, Any]:
    s = (slug or "").strip()
    if not s:
        raise ValidationError("slug is required")
    return {"slug": s}


def delegates_input(args: ListDelegatesIn, organization_id: str) -> Dict[str, Any]:
    filters: Dict[str, Any] = {"organizationId": organization_id}
    _set_flags(
        filters,
        hasVotes=args.has_votes,
        hasDelegators=args.has_delegators,
        isSeekingDelegation=args.is_seeking_delegation,
    )
    return {
        "filters": filters,
        "sort": _sort("votes"),
        "page": page_input(args.limit, args.after_cursor, args.before_cursor),
    }


def delegators_input(
    args: GetDelegatorsIn,
    organization_id: Optional[str],
    governor_id: Optional[str],
) -> Dict[str, Any]:
    if not organization_id and not governor_id:
        raise ValidationError(DELEGATORS_REF_ERROR)
    filters: Dict[str, Any] = {"address": require_address(args.address)}
    if organization_id:
        filters["organizationId"] = organization_id
    if governor_id:
        filters["governorId"] = governor_id
    return {
        "filters": filters,
        "sort": _sort(args.sort_by or "id", args.is_descending),
        "page": page_input(args.limit, args.after_cursor, args.before_cursor),
    }


def proposals_input(
    args: ListProposalsIn,
    organization_id: Optional[str],
    governor_id: Optional[str],
) -> Dict[str, Any]:
    if not organization_id and not governor_id:
        raise ValidationError(PROPOSALS_REF_ERROR)
    filters: Dict[str, Any] = {}
    if organization_id:
        filters["organizationId"] = organization_id
    if governor_id:
        filters["governorId"] = governor_id
    _set_flags(filters, includeArchived=args.include_archived, isDraft=args.is_draft)
    return {
        "filters": filters,
        "sort": _sort("id", args.is_descending),
        "page": page_input(args.limit, args.after_cursor, args.before_cursor),
    }


def proposal_ids_input(organization_id: str, page: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "filters": {"organizationId": organization_id},
        "sort": _sort("id"),
        "page": page,
    }


def proposal_input(args: GetProposalIn) -> Dict[str, Any]:
    """Exactly one of ``{id}`` or ``{onchainId, governorId}``."""
    has_id = bool((args.id or "").strip())
    has_pair = bool((args.onchain_id or "").strip()) and bool((args.governor_id or "").strip())
    if has_id == has_pair:
        raise ValidationError(PROPOSAL_SHAPE_ERROR)
    if has_id:
        out: Dict[str, Any] = {"id": args.id.strip()}
    else:
        out = {"onchainId": args.onchain_id.strip(), "governorId": args.governor_id.strip()}
    _set_flags(out, includeArchived=args.include_archived, isLatest=args.is_latest)
    return out


def votes_input(address: str, proposal_ids: List[str], page: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "filters": {"proposalIds": list(proposal_ids), "voter": require_address(address)},
        "page": page,
    }


def address_created_proposals_input(args: AddressProposalsIn, organization_id: Optional[str]) -> Dict[str, Any]:
    filters: Dict[str, Any] = {"proposer": require_address(args.address)}
    if organization_id:
        filters["organizationId"] = organization_id
    return {
        "filters": filters,
        "sort": _sort("id"),
        "page": page_input(args.limit, args.after_cursor, args.before_cursor),
    }


def address_dao_proposals_input(args: AddressProposalsIn, organization_id: str) -> Dict[str, Any]:
    require_address(args.address)
    return {
        "filters": {"organizationId": organization_id},
        "sort": _sort("id"),
        "page": page_input(args.limit, args.after_cursor, args.before_cursor),
    }
