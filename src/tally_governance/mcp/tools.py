# src/tally_governance/mcp/tools.py
"""Tool dispatch: (tool name, argument bag) -> text content.

Each tool name maps to one argument model, one service call and one
formatter. Arguments are validated into the model before anything touches
the network; every failure except an unknown tool comes back as
``Error <action>: <detail>``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

import pydantic

from tally_governance.mcp import formatters
from tally_governance.mcp.errors import UnknownTool, ValidationError, rewrap
from tally_governance.mcp.models import (
    AddressProposalsIn,
    AddressVotesIn,
    GetDAOIn,
    GetDelegatorsIn,
    GetProposalIn,
    ListDAOsIn,
    ListDelegatesIn,
    ListProposalsIn,
    ToolArgs,
)
from tally_governance.mcp.pagination import Page
from tally_governance.mcp.service import TallyService

log = logging.getLogger("tally_tools")


@dataclass(frozen=True)
class ToolSpec:
    name: str
    action: str
    description: str
    args_model: Type[ToolArgs]
    run: Callable[[TallyService, Any], str]
    required: Tuple[str, ...] = ()
    exposed: Optional[Tuple[str, ...]] = None


def _with_cursor(text: str, page: Page) -> str:
    if page.last_cursor:
        return text.rstrip("\n") + f"\n\nNext page: afterCursor={page.last_cursor}"
    return text


def _list_daos(svc: TallyService, a: ListDAOsIn) -> str:
    page = svc.list_daos(a)
    return _with_cursor(formatters.format_dao_list(page.nodes), page)


def _get_dao(svc: TallyService, a: GetDAOIn) -> str:
    return formatters.format_dao(svc.get_dao(a.slug))


def _list_delegates(svc: TallyService, a: ListDelegatesIn) -> str:
    if not (a.organization_id_or_slug or "").strip():
        raise ValidationError("organizationIdOrSlug must be a non-empty string")
    page = svc.list_delegates(a)
    return _with_cursor(formatters.format_delegates_list(page.nodes), page)


def _get_delegators(svc: TallyService, a: GetDelegatorsIn) -> str:
    page = svc.get_delegators(a)
    return _with_cursor(formatters.format_delegators_list(page.nodes), page)


def _list_proposals(svc: TallyService, a: ListProposalsIn) -> str:
    page = svc.list_proposals(a)
    return _with_cursor(formatters.format_proposals_list(page.nodes), page)


def _get_proposal(svc: TallyService, a: GetProposalIn) -> str:
    return formatters.format_proposal(svc.get_proposal(a))


def _address_votes(svc: TallyService, a: AddressVotesIn) -> str:
    page = svc.get_address_votes(a)
    return _with_cursor(formatters.format_votes_list(page.nodes), page)


def _address_created(svc: TallyService, a: AddressProposalsIn) -> str:
    page = svc.get_address_created_proposals(a)
    return _with_cursor(formatters.format_proposals_list(page.nodes), page)


def _address_daos(svc: TallyService, a: AddressProposalsIn) -> str:
    page = svc.get_address_dao_proposals(a)
    return _with_cursor(formatters.format_proposals_list(page.nodes), page)


_PAGED = ("limit", "afterCursor")

TOOL_SPECS: List[ToolSpec] = [
    ToolSpec(
        name="list-daos",
        action="fetching DAOs",
        description="List DAOs on Tally sorted by specified criteria. Use afterCursor from a previous "
                    "page to continue.",
        args_model=ListDAOsIn,
        run=_list_daos,
        exposed=_PAGED + ("sortBy",),
    ),
    ToolSpec(
        name="get-dao",
        action="fetching DAO",
        description="Get detailed information about a specific DAO by slug.",
        args_model=GetDAOIn,
        run=_get_dao,
        required=("slug",),
    ),
    ToolSpec(
        name="list-delegates",
        action="fetching delegates",
        description="List delegates for a specific organization with their metadata, ordered by voting power.",
        args_model=ListDelegatesIn,
        run=_list_delegates,
        required=("organizationIdOrSlug",),
        exposed=("organizationIdOrSlug",) + _PAGED + ("hasVotes", "hasDelegators", "isSeekingDelegation"),
    ),
    ToolSpec(
        name="get-delegators",
        action="fetching delegators",
        description="Get list of delegators for a specific address. Requires organizationId, "
                    "organizationSlug or governorId.",
        args_model=GetDelegatorsIn,
        run=_get_delegators,
        required=("address",),
        exposed=("address", "organizationId", "organizationSlug", "governorId") + _PAGED
        + ("beforeCursor", "sortBy", "isDescending"),
    ),
    ToolSpec(
        name="list-proposals",
        action="fetching proposals",
        description="List proposals for a specific organization or governor.",
        args_model=ListProposalsIn,
        run=_list_proposals,
        exposed=("organizationId", "organizationSlug", "governorId", "includeArchived", "isDraft") + _PAGED
        + ("beforeCursor", "isDescending"),
    ),
    ToolSpec(
        name="get-proposal",
        action="fetching proposal",
        description="Get detailed information about a specific proposal. You must provide either the Tally ID "
                    "(globally unique) or both onchainId and governorId (unique within a governor).",
        args_model=GetProposalIn,
        run=_get_proposal,
    ),
    ToolSpec(
        name="get-address-votes",
        action="fetching address votes",
        description="Get votes cast by an address on the proposals of one organization.",
        args_model=AddressVotesIn,
        run=_address_votes,
        required=("address", "organizationSlug"),
    ),
    ToolSpec(
        name="get-address-created-proposals",
        action="fetching address created proposals",
        description="Returns proposals created by a given address, optionally within one organization.",
        args_model=AddressProposalsIn,
        run=_address_created,
        required=("address",),
        exposed=("address", "organizationId", "organizationSlug") + _PAGED,
    ),
    ToolSpec(
        name="get-address-daos-proposals",
        action="fetching address DAO proposals",
        description="Returns an organization's proposals annotated with how the given address participated. "
                    "Requires organizationId or organizationSlug.",
        args_model=AddressProposalsIn,
        run=_address_daos,
        required=("address",),
        exposed=("address", "organizationId", "organizationSlug") + _PAGED,
    ),
]

TOOLS: Dict[str, ToolSpec] = {spec.name: spec for spec in TOOL_SPECS}


def _validation_message(exc: pydantic.ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc") or ()) or "arguments"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def parse_arguments(spec: ToolSpec, arguments: Any) -> ToolArgs:
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise ValidationError("arguments must be an object")
    try:
        return spec.args_model.model_validate(arguments)
    except pydantic.ValidationError as e:
        raise ValidationError(_validation_message(e)) from None


def run_tool(service: TallyService, name: str, arguments: Optional[Dict[str, Any]] = None) -> str:
    spec = TOOLS.get(name)
    if spec is None:
        raise UnknownTool(name)
    try:
        args = parse_arguments(spec, arguments)
        return spec.run(service, args)
    except Exception as e:
        log.warning("tool %s failed: %s", name, e)
        raise rewrap(e, f"Error {spec.action}") from e


def call_tool(service: TallyService, name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Protocol-shaped result: ``{"content": [{"type": "text", "text": ...}]}``."""
    return {"content": [{"type": "text", "text": run_tool(service, name, arguments)}]}


def tool_definitions() -> List[Dict[str, Any]]:
    """Name, description and JSON-schema parameters for every tool."""
    out = []
    for spec in TOOL_SPECS:
        schema = spec.args_model.model_json_schema(by_alias=True)
        props = schema.get("properties") or {}
        if spec.exposed is not None:
            props = {k: v for k, v in props.items() if k in spec.exposed}
        params: Dict[str, Any] = {"type": "object", "properties": props}
        if spec.required:
            params["required"] = list(spec.required)
        if spec.name == "get-proposal":
            params["oneOf"] = [{"required": ["id"]}, {"required": ["onchainId", "governorId"]}]
        out.append({"name": spec.name, "description": spec.description, "parameters": params})
    return out
