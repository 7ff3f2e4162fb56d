from tally_governance.mcp import formatters as fmt

from conftest import organization


def _proposal(**extra):
    p = {
        "id": "2502358713906497413",
        "onchainId": "61",
        "status": "executed",
        "createdAt": "2024-01-05T15:04:05Z",
        "quorum": "40000000000000000000000000",
        "metadata": {"title": "Test Proposal", "description": "Test Description"},
        "voteStats": [
            {"type": "for", "percent": 98.456, "votesCount": "1500000000000000000000", "votersCount": 120},
            {"type": "against", "percent": 1.5, "votesCount": "0", "votersCount": 3},
        ],
        "governor": {
            "id": "eip155:1:0xabc",
            "name": "Test Governor",
            "token": {"decimals": 18},
            "organization": {"name": "Uniswap", "slug": "uniswap"},
        },
    }
    p.update(extra)
    return p


def test_format_votes_with_token():
    token = {"decimals": 18, "symbol": "TEST", "name": "Test"}
    assert fmt.format_votes("1000000000000000000", token) == "1 TEST"


def test_format_votes_defaults_to_18_decimals():
    assert fmt.format_votes("1000000000000000000") == "1"
    assert fmt.format_votes("1000000000000000000", None) == "1"


def test_format_amount_groups_and_keeps_precision():
    assert fmt.format_amount("1234567891000000000000000") == "1,234,567.891"
    assert fmt.format_amount("1500000", 6, "USDC") == "1.5 USDC"
    assert fmt.format_amount("123456789012345678901234567890123") == "123,456,789,012,345.679"
    assert fmt.format_amount("0") == "0"
    assert fmt.format_amount(None) == "N/A"


def test_format_timestamp():
    assert fmt.format_timestamp("2024-01-05T15:04:05Z") == "2024-01-05 15:04:05 UTC"
    assert fmt.format_timestamp("2024-01-05T17:04:05+02:00") == "2024-01-05 15:04:05 UTC"
    assert fmt.format_timestamp(None) == "N/A"


def test_empty_dao_list():
    assert fmt.format_dao_list([]) == "Found 0 DAOs:\n\n"


def test_dao_list_blocks():
    daos = [organization("uniswap"), organization("aave", "2")]
    daos[1]["metadata"] = None
    out = fmt.format_dao_list(daos)
    assert out.startswith("Found 2 DAOs:\n\nUniswap (uniswap)\n")
    assert out.count("\n---") == 2
    assert "Description: No description available" in out
    assert "Website: N/A" in out
    assert "None" not in out


def test_dao_detail_lists_identifiers():
    dao = organization(features=[{"name": "EXCLUDE_TALLY_FEE", "enabled": True}, {"name": "X", "enabled": False}])
    dao["metadata"]["websiteUrl"] = "https://uniswap.org"
    out = fmt.format_dao(dao)
    assert "Website: https://uniswap.org" in out
    assert "Chain IDs: eip155:1" in out
    assert "Governor IDs: eip155:1:0x408ED6354d4973f66138C91495F2f2FCbd8724C3" in out
    assert "Features: EXCLUDE_TALLY_FEE" in out
    assert "---" not in out


def test_delegates_placeholders():
    out = fmt.format_delegates_list([{
        "id": "1",
        "account": {"address": "0xabc", "name": None, "bio": None},
        "votesCount": "2000000000000000000",
        "delegatorsCount": 7,
        "statement": None,
    }])
    assert out.startswith("Found 1 delegates:\n\n0xabc\n")
    assert "Votes: 2\n" in out
    assert "Bio: No bio available" in out
    assert "Statement: No statement available" in out
    assert out.endswith("---")


def test_delegators_use_token_decimals():
    out = fmt.format_delegators_list([{
        "chainId": "eip155:1",
        "blockNumber": 19000000,
        "blockTimestamp": "2024-01-05T15:04:05Z",
        "votes": "2500000",
        "delegator": {"address": "0xdef", "ens": "alice.eth"},
        "token": {"id": "t", "name": "USD Coin", "symbol": "USDC", "decimals": 6},
    }])
    assert "alice.eth\nAddress: 0xdef" in out
    assert "Votes: 2.5 USDC" in out
    assert "Delegated at: Block 19000000 (2024-01-05 15:04:05 UTC)" in out
    assert "Token: USDC (USD Coin)" in out


def test_proposal_list_truncates_description():
    long = "x" * 250
    out = fmt.format_proposals_list([_proposal(metadata={"title": "T", "description": long})])
    assert "Description: " + "x" * 200 + "...\n---" in out
    assert "x" * 201 not in out


def test_proposal_list_vote_stats():
    out = fmt.format_proposals_list([_proposal()])
    assert "Found 1 proposals:" in out
    assert "  for: 98.46% (1,500 votes from 120 voters)" in out
    assert "Organization: Uniswap (uniswap)" in out
    assert "Quorum: 40,000,000" in out


def test_proposal_detail_keeps_full_description():
    long = "y" * 250
    out = fmt.format_proposal(_proposal(
        metadata={"title": "T", "description": long, "discourseURL": None, "snapshotURL": "https://snapshot.org/x"},
        proposer={"address": "0xprop", "name": ""},
        start={"timestamp": "2024-01-01T00:00:00Z"},
        executableCalls=[{"target": "0x1"}, {"target": "0x2"}],
    ))
    assert long in out
    assert "Proposer: 0xprop" in out
    assert "Discourse: N/A" in out
    assert "Snapshot: https://snapshot.org/x" in out
    assert "Start: 2024-01-01 00:00:00 UTC" in out
    assert "End: N/A" in out
    assert "Executable Calls: 2" in out


def test_participation_type_rendered_for_address_proposals():
    out = fmt.format_proposals_list([_proposal(participationType="VOTED")])
    assert "Participation: VOTED" in out


def test_votes_list():
    out = fmt.format_votes_list([{
        "id": "v1",
        "voter": {"address": "0xabc"},
        "proposal": {"id": "p1", "governor": {"organization": {"name": "Uniswap", "slug": "uniswap"}}},
        "type": "for",
        "amount": "3000000000000000000",
        "reason": None,
        "block": {"timestamp": "2024-01-05T15:04:05Z"},
    }])
    assert out.startswith("Found 1 votes:\n\nProposal: p1\n")
    assert "Amount: 3" in out
    assert "Reason: No reason provided" in out
    assert out.endswith("---")


def test_delegate_votes_use_delegate_token():
    nft = {"id": "t", "symbol": "NOUN", "decimals": 0}
    usdc = {"id": "u", "symbol": "USDC", "decimals": 6}
    out = fmt.format_delegates_list([
        {"id": "1", "account": {"address": "0xa"}, "votesCount": "25", "delegatorsCount": 3, "token": nft},
        {"id": "2", "account": {"address": "0xb"}, "votesCount": "2500000", "delegatorsCount": 1, "token": usdc},
    ])
    assert "Votes: 25 NOUN\n" in out
    assert "Votes: 2.5 USDC\n" in out


def test_vote_amount_uses_governor_token():
    out = fmt.format_votes_list([{
        "id": "v1",
        "voter": {"address": "0xabc"},
        "proposal": {"id": "p1", "governor": {"token": {"symbol": "USDC", "decimals": 6}}},
        "type": "against",
        "amount": "2500000",
        "block": {"timestamp": "2024-01-05T15:04:05Z"},
    }])
    assert "Amount: 2.5 USDC\n" in out
