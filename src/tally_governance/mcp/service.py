# src/tally_governance/mcp/service.py
"""Tally governance operations: resolve identifiers, build input, request.

The service holds only its transport. Validation errors escape as-is;
resolution and upstream failures are re-raised as
``Failed to fetch <resource>: <detail>``.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

from tally_governance.mcp import builders
from tally_governance.mcp.errors import NotFound, ValidationError, rewrap
from tally_governance.mcp.identifiers import (
    GraphQLRequester,
    fetch_organization,
    flatten_socials,
    normalize_reference,
    resolve_organization_id,
)
from tally_governance.mcp.models import (
    AddressProposalsIn,
    AddressVotesIn,
    GetDelegatorsIn,
    GetProposalIn,
    ListDAOsIn,
    ListDelegatesIn,
    ListProposalsIn,
)
from tally_governance.mcp.pagination import MAX_LIMIT, Page, connection_page, page_input, walk_pages
from tally_governance.mcp.queries import (
    ADDRESS_CREATED_PROPOSALS_Q,
    ADDRESS_DAO_PROPOSALS_Q,
    ADDRESS_VOTES_Q,
    GET_DELEGATORS_Q,
    GET_PROPOSAL_Q,
    LIST_DAOS_Q,
    LIST_DELEGATES_Q,
    LIST_PROPOSALS_Q,
    PROPOSAL_IDS_Q,
)

log = logging.getLogger("tally_service")

F = TypeVar("F", bound=Callable[..., Any])

# Upper bound on proposal pages scanned when collecting ids for address votes.
PROPOSAL_SCAN_PAGES = 10


def _fetching(resource: str) -> Callable[[F], F]:
    def deco(fn: F) -> F:
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except ValidationError:
                raise
            except Exception as e:
                raise rewrap(e, f"Failed to fetch {resource}") from e
        return wrapper  # type: ignore[return-value]
    return deco


class TallyService:
    def __init__(self, client: GraphQLRequester):
        self.client = client

    def _query(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.request(query, variables) or {}

    # -----------------------------
    # Organizations
    # -----------------------------
    @_fetching("DAOs")
    def list_daos(self, args: Optional[ListDAOsIn] = None) -> Page:
        args = args or ListDAOsIn()
        data = self._query(LIST_DAOS_Q, {"input": builders.organizations_input(args)})
        page = connection_page(data, "organizations")
        page.nodes = [flatten_socials(n) for n in page.nodes]
        return page

    @_fetching("DAO")
    def get_dao(self, slug: str) -> Dict[str, Any]:
        builders.organization_input(slug)
        return fetch_organization(self.client, slug.strip())

    # -----------------------------
    # Delegates / delegators
    # -----------------------------
    @_fetching("delegates")
    def list_delegates(self, args: ListDelegatesIn) -> Page:
        org_id, slug, gov = normalize_reference(args.organization_id, args.organization_slug, args.governor_id)
        if not (org_id or slug or gov):
            raise ValidationError(builders.DELEGATES_REF_ERROR)
        # validate paging before the slug lookup goes out
        page_input(args.limit, args.after_cursor, args.before_cursor)
        organization_id = resolve_organization_id(self.client, id=org_id, slug=slug, governor_id=gov)
        data = self._query(LIST_DELEGATES_Q, {"input": builders.delegates_input(args, organization_id)})
        return connection_page(data, "delegates")

    @_fetching("delegators")
    def get_delegators(self, args: GetDelegatorsIn) -> Page:
        builders.require_address(args.address)
        org_id, slug, gov = normalize_reference(args.organization_id, args.organization_slug, args.governor_id)
        if not (org_id or slug or gov):
            raise ValidationError(builders.DELEGATORS_REF_ERROR)
        page_input(args.limit, args.after_cursor, args.before_cursor)
        organization_id = None
        if org_id or slug:
            organization_id = resolve_organization_id(self.client, id=org_id, slug=slug)
        data = self._query(GET_DELEGATORS_Q, {"input": builders.delegators_input(args, organization_id, gov)})
        return connection_page(data, "delegators")

    # -----------------------------
    # Proposals
    # -----------------------------
    @_fetching("proposals")
    def list_proposals(self, args: ListProposalsIn) -> Page:
        org_id, slug, gov = normalize_reference(args.organization_id, args.organization_slug, args.governor_id)
        if not (org_id or slug or gov):
            raise ValidationError(builders.PROPOSALS_REF_ERROR)
        page_input(args.limit, args.after_cursor, args.before_cursor)
        organization_id = None
        if org_id or slug:
            organization_id = resolve_organization_id(self.client, id=org_id, slug=slug)
        data = self._query(LIST_PROPOSALS_Q, {"input": builders.proposals_input(args, organization_id, gov)})
        return connection_page(data, "proposals")

    @_fetching("proposal")
    def get_proposal(self, args: GetProposalIn) -> Dict[str, Any]:
        input_ = builders.proposal_input(args)
        data = self._query(GET_PROPOSAL_Q, {"input": input_})
        proposal = data.get("proposal")
        if not proposal:
            ref = input_.get("id") or f"{input_.get('onchainId')} on {input_.get('governorId')}"
            raise NotFound(f"Proposal not found: {ref}")
        return proposal

    def _organization_proposal_ids(self, organization_id: str) -> List[str]:
        def fetch(page: Dict[str, Any]) -> Page:
            data = self._query(PROPOSAL_IDS_Q, {"input": builders.proposal_ids_input(organization_id, page)})
            return connection_page(data, "proposals")

        ids = [str(n["id"]) for n in walk_pages(fetch, limit=MAX_LIMIT, max_pages=PROPOSAL_SCAN_PAGES) if n.get("id")]
        log.debug("collected %d proposal ids for organization %s", len(ids), organization_id)
        return ids

    # -----------------------------
    # Address-scoped
    # -----------------------------
    @_fetching("address votes")
    def get_address_votes(self, args: AddressVotesIn) -> Page:
        address = builders.require_address(args.address)
        if not (args.organization_slug or "").strip():
            raise ValidationError("organizationSlug is required to fetch address votes")
        page = page_input(args.limit, args.after_cursor)

        organization_id = resolve_organization_id(self.client, slug=args.organization_slug.strip())
        proposal_ids = self._organization_proposal_ids(organization_id)
        if not proposal_ids:
            return Page()
        data = self._query(ADDRESS_VOTES_Q, {"input": builders.votes_input(address, proposal_ids, page)})
        return connection_page(data, "votes")

    def _optional_organization(self, args: AddressProposalsIn) -> Optional[str]:
        org_id, slug, gov = normalize_reference(args.organization_id, args.organization_slug)
        if not (org_id or slug or gov):
            return None
        return resolve_organization_id(self.client, id=org_id, slug=slug, governor_id=gov)

    @_fetching("created proposals")
    def get_address_created_proposals(self, args: AddressProposalsIn) -> Page:
        builders.require_address(args.address)
        page_input(args.limit, args.after_cursor, args.before_cursor)
        organization_id = self._optional_organization(args)
        data = self._query(
            ADDRESS_CREATED_PROPOSALS_Q,
            {"input": builders.address_created_proposals_input(args, organization_id)},
        )
        return connection_page(data, "proposals")

    @_fetching("address DAO proposals")
    def get_address_dao_proposals(self, args: AddressProposalsIn) -> Page:
        address = builders.require_address(args.address)
        page_input(args.limit, args.after_cursor, args.before_cursor)
        if not ((args.organization_id or "").strip() or (args.organization_slug or "").strip()):
            raise ValidationError("organizationId or organizationSlug is required to fetch address DAO proposals")
        organization_id = self._optional_organization(args)
        data = self._query(
            ADDRESS_DAO_PROPOSALS_Q,
            {"input": builders.address_dao_proposals_input(args, organization_id), "address": address},
        )
        return connection_page(data, "proposals")
