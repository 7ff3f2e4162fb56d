# src/tally_governance/mcp/identifiers.py
"""Organization identifier classification and resolution.

Tally list filters only accept the numeric organization id. Callers may hand
us a slug, a numeric id, or a chain-qualified governor id
(``eip155:<chain>:<address>``); this module turns those into the id.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Any, Dict, Optional, Protocol, Tuple

from tally_governance.mcp.errors import AmbiguousIdentifier, NotFound, ValidationError
from tally_governance.mcp.queries import GET_DAO_Q

log = logging.getLogger("tally_identifiers")

GOVERNOR_PREFIX = "eip155:"
_NUMERIC_RE = re.compile(r"^\d+$")


class GraphQLRequester(Protocol):
    def request(self, query: str, variables: Optional[dict] = None) -> Dict[str, Any]: ...


class IdKind(str, Enum):
    GOVERNOR = "governor"
    ORGANIZATION = "organization"
    SLUG = "slug"


def classify_identifier(value: str) -> IdKind:
    """Strict ``eip155:`` prefix first, then all-digits, else slug."""
    s = (value or "").strip()
    if s.startswith(GOVERNOR_PREFIX):
        return IdKind.GOVERNOR
    if _NUMERIC_RE.match(s):
        return IdKind.ORGANIZATION
    return IdKind.SLUG


def split_id_or_slug(value: str) -> Dict[str, str]:
    """Map a combined organizationIdOrSlug value onto the matching field."""
    s = (value or "").strip()
    kind = classify_identifier(s)
    if kind is IdKind.GOVERNOR:
        return {"governor_id": s}
    if kind is IdKind.ORGANIZATION:
        return {"organization_id": s}
    return {"organization_slug": s}


def normalize_reference(
    organization_id: Optional[str] = None,
    organization_slug: Optional[str] = None,
    governor_id: Optional[str] = None,
) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    """Re-file a misplaced organizationId by its syntax.

    A governor-shaped organizationId becomes the governor id (unless one was
    already given) and a slug-shaped one becomes the slug.
    """
    org = (organization_id or "").strip() or None
    slug = (organization_slug or "").strip() or None
    gov = (governor_id or "").strip() or None
    if org:
        kind = classify_identifier(org)
        if kind is IdKind.GOVERNOR:
            gov = gov or org
            org = None
        elif kind is IdKind.SLUG:
            slug = slug or org
            org = None
    return org, slug, gov


def flatten_socials(org: Dict[str, Any]) -> Dict[str, Any]:
    metadata = dict(org.get("metadata") or {})
    socials = metadata.get("socials") or {}
    metadata["websiteUrl"] = socials.get("website") or None
    metadata["discord"] = socials.get("discord") or None
    metadata["twitter"] = socials.get("twitter") or None
    metadata["discourse"] = socials.get("discourse") or None
    metadata["telegram"] = socials.get("telegram") or None
    out = dict(org)
    out["metadata"] = metadata
    return out


def fetch_organization(client: GraphQLRequester, slug: str) -> Dict[str, Any]:
    """Look an organization up by slug, with socials flattened onto metadata."""
    if not (slug or "").strip():
        raise ValidationError("slug is required")
    data = client.request(GET_DAO_Q, {"input": {"slug": slug}})
    org = (data or {}).get("organization")
    if not org:
        raise NotFound(f"DAO not found: {slug}")
    return flatten_socials(org)


def resolve_organization_id(
    client: GraphQLRequester,
    id: Optional[str] = None,
    slug: Optional[str] = None,
    governor_id: Optional[str] = None,
) -> str:
    """Return the organization id for whichever reference was supplied.

    Numeric ids come back unchanged without a request. A governor id cannot be
    reversed into an organization, so it needs an accompanying slug (which is
    then resolved instead). Anything else is looked up as a slug. Nothing is
    cached.
    """
    if id:
        kind = classify_identifier(id)
        if kind is IdKind.ORGANIZATION:
            return id.strip()
        if kind is IdKind.GOVERNOR:
            governor_id = governor_id or id
        elif not slug:
            slug = id.strip()

    if slug:
        log.debug("resolving organization slug %s", slug)
        return str(fetch_organization(client, slug)["id"])

    if governor_id:
        raise AmbiguousIdentifier(
            "Organization slug is required when using a governor ID; "
            f"cannot resolve an organization from {governor_id} alone"
        )
    raise ValidationError("organizationId or organizationSlug is required")
