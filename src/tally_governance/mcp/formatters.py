# src/tally_governance/mcp/formatters.py
"""Render Tally responses as flat text blocks for LLM consumption.

List views open with ``Found <N> <resource>:`` and end every item with a
``---`` line; items are separated by a blank line. Missing fields render as
placeholders, never as None.
"""

from __future__ import annotations

from datetime import timezone
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Dict, List, Optional

from dateutil import parser as dtp

UTC = timezone.utc
NA = "N/A"
DEFAULT_DECIMALS = 18
DESCRIPTION_PREVIEW = 200


def _or(value: Any, placeholder: str = NA) -> str:
    if value is None or value == "":
        return placeholder
    return str(value)


def _group(value: Decimal) -> str:
    """Comma-grouped with at most three fraction digits, trailing zeros dropped."""
    with localcontext() as ctx:
        ctx.prec = 100
        q = value.quantize(Decimal("0.001"), rounding=ROUND_HALF_UP)
        s = f"{q:,.3f}"
    s = s.rstrip("0").rstrip(".")
    return "0" if s in ("-0", "") else s


def format_amount(raw: Any, decimals: Optional[int] = None, symbol: Optional[str] = None) -> str:
    """Scale a base-unit integer string by ``10**decimals`` (18 when unknown)."""
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return _or(raw)
    d = DEFAULT_DECIMALS if decimals is None else int(decimals)
    with localcontext() as ctx:
        ctx.prec = 100
        scaled = Decimal(value).scaleb(-d)
    text = _group(scaled)
    return f"{text} {symbol}" if symbol else text


def format_votes(votes: Any, token: Optional[Dict[str, Any]] = None) -> str:
    token = token or {}
    return format_amount(votes, token.get("decimals"), token.get("symbol"))


def format_timestamp(value: Any) -> str:
    if value is None or value == "":
        return NA
    try:
        dt = dtp.isoparse(str(value))
    except (ValueError, OverflowError):
        return str(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).strftime("%Y-%m-%d %H:%M:%S UTC")


def truncate(text: Optional[str], limit: int = DESCRIPTION_PREVIEW) -> str:
    s = text or ""
    return s[:limit] + ("..." if len(s) > limit else "")


def _percent(value: Any) -> str:
    try:
        return f"{float(value):.2f}"
    except (TypeError, ValueError):
        return NA


def _governor_token(proposal: Dict[str, Any]) -> Dict[str, Any]:
    return (proposal.get("governor") or {}).get("token") or {}


def _governor_decimals(proposal: Dict[str, Any]) -> Optional[int]:
    return _governor_token(proposal).get("decimals")


def format_vote_stats(proposal: Dict[str, Any]) -> str:
    decimals = _governor_decimals(proposal)
    lines = []
    for stat in proposal.get("voteStats") or []:
        lines.append(
            f"  {_or(stat.get('type'))}: {_percent(stat.get('percent'))}% "
            f"({format_amount(stat.get('votesCount'), decimals)} votes from {_or(stat.get('votersCount'), '0')} voters)"
        )
    return "\n".join(lines) if lines else "  No votes recorded"


def _organization_label(proposal: Dict[str, Any]) -> str:
    org = (proposal.get("governor") or {}).get("organization") or {}
    if not org:
        return NA
    return f"{_or(org.get('name'))} ({_or(org.get('slug'))})"


def _list(header: str, blocks: List[str]) -> str:
    return header + "\n\n" + "\n\n".join(blocks)


# -----------------------------
# Organizations
# -----------------------------
def _dao_lines(dao: Dict[str, Any]) -> List[str]:
    meta = dao.get("metadata") or {}
    return [
        f"{_or(dao.get('name'))} ({_or(dao.get('slug'))})",
        f"Token Holders: {_or(dao.get('tokenOwnersCount'), '0')}",
        f"Delegates: {_or(dao.get('delegatesCount'), '0')}",
        f"Proposals: {_or(dao.get('proposalsCount'), '0')}",
        f"Active Proposals: {'Yes' if dao.get('hasActiveProposals') else 'No'}",
        f"Description: {_or(meta.get('description'), 'No description available')}",
        f"Website: {_or(meta.get('websiteUrl'))}",
        f"Twitter: {_or(meta.get('twitter'))}",
        f"Discord: {_or(meta.get('discord'))}",
    ]


def format_dao_list(daos: List[Dict[str, Any]]) -> str:
    return _list(f"Found {len(daos)} DAOs:", ["\n".join(_dao_lines(d) + ["---"]) for d in daos])


def format_dao(dao: Dict[str, Any]) -> str:
    meta = dao.get("metadata") or {}
    features = [f.get("name") for f in (dao.get("features") or []) if f.get("enabled") and f.get("name")]
    lines = _dao_lines(dao) + [
        f"Discourse: {_or(meta.get('discourse'))}",
        f"Telegram: {_or(meta.get('telegram'))}",
        f"Chain IDs: {', '.join(dao.get('chainIds') or []) or NA}",
        f"Token IDs: {', '.join(dao.get('tokenIds') or []) or NA}",
        f"Governor IDs: {', '.join(dao.get('governorIds') or []) or NA}",
        f"Features: {', '.join(features) or NA}",
    ]
    return "\n".join(lines)


# -----------------------------
# Delegates / delegators
# -----------------------------
def format_delegates_list(delegates: List[Dict[str, Any]]) -> str:
    blocks = []
    for d in delegates:
        account = d.get("account") or {}
        statement = d.get("statement") or {}
        blocks.append("\n".join([
            _or(account.get("name") or account.get("address")),
            f"Address: {_or(account.get('address'))}",
            f"Votes: {format_votes(d.get('votesCount'), d.get('token'))}",
            f"Delegators: {_or(d.get('delegatorsCount'), '0')}",
            f"Bio: {_or(account.get('bio'), 'No bio available')}",
            f"Statement: {_or(statement.get('statementSummary'), 'No statement available')}",
            "---",
        ]))
    return _list(f"Found {len(delegates)} delegates:", blocks)


def format_delegators_list(delegations: List[Dict[str, Any]]) -> str:
    blocks = []
    for d in delegations:
        who = d.get("delegator") or {}
        token = d.get("token") or None
        lines = [
            _or(who.get("name") or who.get("ens") or who.get("address")),
            f"Address: {_or(who.get('address'))}",
            f"Votes: {format_votes(d.get('votes'), token)}",
            f"Delegated at: Block {_or(d.get('blockNumber'))} ({format_timestamp(d.get('blockTimestamp'))})",
        ]
        if token:
            lines.append(f"Token: {_or(token.get('symbol'))} ({_or(token.get('name'))})")
        lines.append("---")
        blocks.append("\n".join(lines))
    return _list(f"Found {len(delegations)} delegators:", blocks)


# -----------------------------
# Proposals
# -----------------------------
def format_proposals_list(proposals: List[Dict[str, Any]]) -> str:
    blocks = []
    for p in proposals:
        meta = p.get("metadata") or {}
        governor = p.get("governor") or {}
        lines = [
            _or(meta.get("title"), "Untitled proposal"),
            f"Tally ID: {_or(p.get('id'))}",
            f"Onchain ID: {_or(p.get('onchainId'))}",
            f"Status: {_or(p.get('status'))}",
            f"Created: {format_timestamp(p.get('createdAt'))}",
        ]
        if "quorum" in p:
            lines.append(f"Quorum: {format_amount(p.get('quorum'), _governor_decimals(p))}")
        lines += [
            f"Organization: {_organization_label(p)}",
            f"Governor: {_or(governor.get('name') or governor.get('id'))}",
        ]
        if "participationType" in p:
            lines.append(f"Participation: {_or(p.get('participationType'))}")
        lines += [
            f"Vote Stats:\n{format_vote_stats(p)}",
            f"Description: {truncate(meta.get('description')) or 'No description available'}",
            "---",
        ]
        blocks.append("\n".join(lines))
    return _list(f"Found {len(proposals)} proposals:", blocks)


def format_proposal(p: Dict[str, Any]) -> str:
    meta = p.get("metadata") or {}
    governor = p.get("governor") or {}
    proposer = p.get("proposer") or {}
    return "\n".join([
        _or(meta.get("title"), "Untitled proposal"),
        f"Tally ID: {_or(p.get('id'))}",
        f"Onchain ID: {_or(p.get('onchainId'))}",
        f"Status: {_or(p.get('status'))}",
        f"Quorum: {format_amount(p.get('quorum'), _governor_decimals(p))}",
        f"Start: {format_timestamp((p.get('start') or {}).get('timestamp'))}",
        f"End: {format_timestamp((p.get('end') or {}).get('timestamp'))}",
        f"Organization: {_organization_label(p)}",
        f"Governor: {_or(governor.get('name') or governor.get('id'))}",
        f"Proposer: {_or(proposer.get('name') or proposer.get('address'))}",
        f"Executable Calls: {len(p.get('executableCalls') or [])}",
        f"Vote Stats:\n{format_vote_stats(p)}",
        f"Description:\n{_or(meta.get('description'), 'No description available')}",
        "Links:",
        f"  Discourse: {_or(meta.get('discourseURL'))}",
        f"  Snapshot: {_or(meta.get('snapshotURL'))}",
    ])


# -----------------------------
# Votes
# -----------------------------
def format_votes_list(votes: List[Dict[str, Any]]) -> str:
    blocks = []
    for v in votes:
        proposal = v.get("proposal") or {}
        blocks.append("\n".join([
            f"Proposal: {_or(proposal.get('id'))}",
            f"Organization: {_organization_label(proposal)}",
            f"Voter: {_or((v.get('voter') or {}).get('address'))}",
            f"Vote: {_or(v.get('type'))}",
            f"Amount: {format_votes(v.get('amount'), _governor_token(proposal))}",
            f"Reason: {_or(v.get('reason'), 'No reason provided')}",
            f"Cast at: {format_timestamp((v.get('block') or {}).get('timestamp'))}",
            "---",
        ]))
    return _list(f"Found {len(votes)} votes:", blocks)
