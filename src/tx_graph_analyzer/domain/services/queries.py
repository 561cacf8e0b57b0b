"""Cypher statements executed against the transaction graph."""

ACCOUNT_NEIGHBOURHOOD = (
    "MATCH (accountOne:Account {address: $address})-[r]-(neighbors) "
    "RETURN accountOne, neighbors, r LIMIT $limit"
)

# Category labels cannot be parameterised; they come from this fixed table.
DEGREE_CENTRALITY_LABELS = {
    "account": "Account",
    "external": "External",
    "contract": "Contract",
}

DEGREE_CENTRALITY = (
    "MATCH (n:{label})-[r:Transaction]-(m:Account) "
    "RETURN n.address AS address, count(r) AS score "
    "ORDER BY score DESC "
    "LIMIT $limit"
)

ACCOUNT_BETWEENNESS_CENTRALITY = (
    "MATCH p=allShortestPaths((source:Account)-[:Transaction*]-(target:Account)) "
    "WHERE elementId(source) < elementId(target) AND length(p) > 1 "
    "UNWIND nodes(p)[1..-1] AS n "
    "RETURN n.address AS address, count(*) AS score "
    "ORDER BY score DESC "
    "LIMIT $limit"
)


def degree_centrality_query(category: str) -> str:
    return DEGREE_CENTRALITY.format(label=DEGREE_CENTRALITY_LABELS[category])
