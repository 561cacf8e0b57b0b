from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Enumerations ---
class NodeLabel(str, Enum):
    EXTERNAL = "External"
    CONTRACT = "Contract"
    BLOCK = "Block"


class LinkType(str, Enum):
    TRANSACTION = "Transaction"
    MINED = "Mined"


# --- Graph elements ---
class NormalizedNode(BaseModel):
    """A deduplicated graph node ready for a node-link visualisation.

    ``index`` starts out as the string identity and is replaced by the
    node's position in :attr:`Graph.nodes` once aggregation finishes.
    """

    id: str
    index: Union[int, str]
    label: str
    properties: dict[str, Any] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()


class TransactionProperties(BaseModel):
    """The fixed property set carried by ``Transaction`` links."""

    input: Any = None
    blockNumber: str
    gas: str
    from_: Any = Field(default=None, alias="from")
    transactionIndex: str
    to: Any = None
    value: str
    gasPrice: str

    model_config = ConfigDict(populate_by_name=True)


class NormalizedLink(BaseModel):
    """A ``Transaction`` or ``Mined`` edge.

    ``source`` and ``target`` hold endpoint identities until the aggregator
    rewrites them to node positions.
    """

    id: str
    source: Union[int, str]
    target: Union[int, str]
    type: LinkType
    properties: Optional[TransactionProperties] = None

    model_config = ConfigDict(use_enum_values=True)

    def to_dict(self) -> dict[str, Any]:
        exclude = {"properties"} if self.properties is None else None
        return self.model_dump(by_alias=True, exclude=exclude)


class Graph(BaseModel):
    nodes: list[NormalizedNode] = Field(default_factory=list)
    links: list[NormalizedLink] = Field(default_factory=list)

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        """Plain ``{"nodes": [...], "links": [...]}`` mapping for JSON encoding."""
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "links": [link.to_dict() for link in self.links],
        }


class CentralityScore(BaseModel):
    address: Optional[str] = None
    score: int
