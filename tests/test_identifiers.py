import pytest

from tally_governance.mcp.errors import AmbiguousIdentifier, NotFound, ValidationError
from tally_governance.mcp.identifiers import (
    IdKind,
    classify_identifier,
    fetch_organization,
    normalize_reference,
    resolve_organization_id,
    split_id_or_slug,
)

from conftest import UNISWAP_GOVERNOR, UNISWAP_ID, org_response


@pytest.mark.parametrize("value, kind", [
    ("eip155:1:0xabc", IdKind.GOVERNOR),
    ("2206072050458560434", IdKind.ORGANIZATION),
    ("uniswap", IdKind.SLUG),
    ("arbitrum-eip155:1", IdKind.SLUG),
    ("123abc", IdKind.SLUG),
])
def test_classify_identifier(value, kind):
    assert classify_identifier(value) is kind


def test_split_id_or_slug_routes_each_kind():
    assert split_id_or_slug("eip155:42161:0x789") == {"governor_id": "eip155:42161:0x789"}
    assert split_id_or_slug(" 12345 ") == {"organization_id": "12345"}
    assert split_id_or_slug("arbitrum") == {"organization_slug": "arbitrum"}


def test_normalize_reference_refiles_misplaced_organization_id():
    assert normalize_reference(UNISWAP_GOVERNOR, None, None) == (None, None, UNISWAP_GOVERNOR)
    assert normalize_reference("uniswap", None, None) == (None, "uniswap", None)
    assert normalize_reference(UNISWAP_ID, "uniswap", None) == (UNISWAP_ID, "uniswap", None)


def test_numeric_id_is_returned_without_a_request(client):
    assert resolve_organization_id(client, id=UNISWAP_ID) == UNISWAP_ID
    assert client.calls == []


def test_slug_is_looked_up(client):
    client.add("OrganizationBySlug", org_response())
    assert resolve_organization_id(client, slug="uniswap") == UNISWAP_ID
    assert client.calls == [("OrganizationBySlug", {"input": {"slug": "uniswap"}})]


def test_opaque_id_is_treated_as_slug(client):
    client.add("OrganizationBySlug", org_response())
    assert resolve_organization_id(client, id="uniswap") == UNISWAP_ID


def test_governor_id_alone_is_ambiguous(client):
    with pytest.raises(AmbiguousIdentifier):
        resolve_organization_id(client, governor_id=UNISWAP_GOVERNOR)
    with pytest.raises(AmbiguousIdentifier):
        resolve_organization_id(client, id=UNISWAP_GOVERNOR)
    assert client.calls == []


def test_governor_id_with_slug_resolves_the_slug(client):
    client.add("OrganizationBySlug", org_response())
    assert resolve_organization_id(client, id=UNISWAP_GOVERNOR, slug="uniswap") == UNISWAP_ID


def test_nothing_supplied_is_a_validation_error(client):
    with pytest.raises(ValidationError):
        resolve_organization_id(client)


def test_unknown_slug_is_not_found(client):
    client.add("OrganizationBySlug", {"organization": None})
    with pytest.raises(NotFound, match="DAO not found: nope"):
        resolve_organization_id(client, slug="nope")


def test_every_resolution_refetches(client):
    client.add("OrganizationBySlug", org_response()).add("OrganizationBySlug", org_response())
    resolve_organization_id(client, slug="uniswap")
    resolve_organization_id(client, slug="uniswap")
    assert len(client.calls) == 2


def test_fetch_organization_flattens_socials(client):
    client.add("OrganizationBySlug", org_response())
    org = fetch_organization(client, "uniswap")
    assert org["metadata"]["websiteUrl"] == "https://uniswap.org"
    assert org["metadata"]["twitter"] == "uniswap"
    assert org["metadata"]["discord"] is None
