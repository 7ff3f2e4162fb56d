# src/tally_governance/mcp/queries.py
"""GraphQL documents sent to the Tally API."""

LIST_DAOS_Q = """
query Organizations($input: OrganizationsInput!) {
  organizations(input: $input) {
    nodes {
      ... on Organization {
        id
        name
        slug
        chainIds
        proposalsCount
        hasActiveProposals
        tokenOwnersCount
        delegatesCount
        metadata {
          description
          socials {
            website
            discord
            twitter
          }
        }
      }
    }
    pageInfo {
      firstCursor
      lastCursor
    }
  }
}
"""

GET_DAO_Q = """
query OrganizationBySlug($input: OrganizationInput!) {
  organization(input: $input) {
    id
    name
    slug
    chainIds
    governorIds
    tokenIds
    hasActiveProposals
    proposalsCount
    delegatesCount
    tokenOwnersCount
    metadata {
      description
      icon
      socials {
        website
        discord
        telegram
        twitter
        discourse
        others {
          label
          value
        }
      }
      karmaName
    }
    features {
      name
      enabled
    }
  }
}
"""

LIST_DELEGATES_Q = """
query Delegates($input: DelegatesInput!) {
  delegates(input: $input) {
    nodes {
      id
      account {
        address
        bio
        name
        picture
      }
      votesCount
      delegatorsCount
      token {
        id
        symbol
        decimals
      }
      statement {
        statementSummary
      }
    }
    pageInfo {
      firstCursor
      lastCursor
    }
  }
}
"""

GET_DELEGATORS_Q = """
query Delegators($input: DelegatorsInput!) {
  delegators(input: $input) {
    nodes {
      chainId
      blockNumber
      blockTimestamp
      votes
      delegator {
        address
        name
        picture
        twitter
        ens
      }
      token {
        id
        name
        symbol
        decimals
      }
    }
    pageInfo {
      firstCursor
      lastCursor
    }
  }
}
"""

_TIME_BLOCK = """
      ... on Block {
        timestamp
      }
      ... on BlocklessTimestamp {
        timestamp
      }
"""

LIST_PROPOSALS_Q = """
query GovernanceProposals($input: ProposalsInput!) {
  proposals(input: $input) {
    nodes {
      ... on Proposal {
        id
        onchainId
        status
        createdAt
        quorum
        metadata {
          title
          description
        }
        voteStats {
          votesCount
          percent
          type
          votersCount
        }
        governor {
          id
          chainId
          name
          token {
            decimals
          }
          organization {
            name
            slug
          }
        }
      }
    }
    pageInfo {
      firstCursor
      lastCursor
    }
  }
}
"""

PROPOSAL_IDS_Q = """
query OrganizationProposalIds($input: ProposalsInput!) {
  proposals(input: $input) {
    nodes {
      ... on Proposal {
        id
      }
    }
    pageInfo {
      firstCursor
      lastCursor
    }
  }
}
"""

GET_PROPOSAL_Q = """
query ProposalDetails($input: ProposalInput!) {
  proposal(input: $input) {
    id
    onchainId
    metadata {
      title
      description
      discourseURL
      snapshotURL
    }
    status
    quorum
    createdAt
    start {%s    }
    end {%s    }
    executableCalls {
      value
      target
      calldata
      signature
      type
    }
    voteStats {
      votesCount
      votersCount
      type
      percent
    }
    governor {
      id
      chainId
      name
      token {
        decimals
      }
      organization {
        name
        slug
      }
    }
    proposer {
      address
      name
      picture
    }
  }
}
""" % (_TIME_BLOCK, _TIME_BLOCK)

ADDRESS_CREATED_PROPOSALS_Q = """
query GetAddressCreatedProposals($input: ProposalsInput!) {
  proposals(input: $input) {
    nodes {
      ... on Proposal {
        id
        onchainId
        status
        createdAt
        metadata {
          title
          description
        }
        governor {
          id
          name
          token {
            decimals
          }
          organization {
            id
            name
            slug
          }
        }
        voteStats {
          votesCount
          votersCount
          type
          percent
        }
      }
    }
    pageInfo {
      firstCursor
      lastCursor
    }
  }
}
"""

ADDRESS_DAO_PROPOSALS_Q = """
query GetAddressDAOSProposals($input: ProposalsInput!, $address: Address!) {
  proposals(input: $input) {
    nodes {
      ... on Proposal {
        id
        onchainId
        status
        createdAt
        metadata {
          title
          description
        }
        governor {
          id
          name
          token {
            decimals
          }
          organization {
            id
            name
            slug
          }
        }
        proposer {
          address
        }
        voteStats {
          votesCount
          votersCount
          type
          percent
        }
        participationType(address: $address)
      }
    }
    pageInfo {
      firstCursor
      lastCursor
    }
  }
}
"""

ADDRESS_VOTES_Q = """
query GetVotes($input: VotesInput!) {
  votes(input: $input) {
    nodes {
      ... on Vote {
        id
        voter {
          address
        }
        proposal {
          id
          governor {
            id
            token {
              symbol
              decimals
            }
            organization {
              id
              name
              slug
            }
          }
        }
        type
        amount
        reason
        block {
          timestamp
        }
      }
    }
    pageInfo {
      firstCursor
      lastCursor
    }
  }
}
"""
