import asyncio
import json
from collections.abc import Sequence
from typing import Any, Optional

from loguru import logger

from ...config import GraphSettingsModel
from ..interfaces import GraphRepository
from .exceptions import MalformedInputError
from .graph_aggregator import convert_graph
from .queries import ACCOUNT_NEIGHBOURHOOD


def normalize_address(address: Any) -> str:
    if not isinstance(address, str) or not address.strip():
        raise MalformedInputError(f"Invalid account address: {address!r}")
    return address.strip().lower()


def parse_account_list(addresses_json: str) -> list[str]:
    """Decode a JSON array of account addresses.

    Raises:
        MalformedInputError: If the payload is not valid JSON or is not an
            array of non-empty strings.
    """
    try:
        decoded = json.loads(addresses_json)
    except (TypeError, json.JSONDecodeError) as exc:
        raise MalformedInputError(f"Account list is not valid JSON: {exc}") from exc
    if not isinstance(decoded, list):
        raise MalformedInputError("Account list must be a JSON array of addresses")
    return [normalize_address(address) for address in decoded]


class TransactionGraphService:
    """Build node-link graphs around one or more accounts.

    Each account is expanded with a single neighbourhood query. For a batch
    the queries run concurrently and the call fails as soon as any of them
    fails; the remaining queries are left to finish and their records are
    discarded.
    """

    def __init__(
        self,
        repository: GraphRepository,
        graph_settings: Optional[GraphSettingsModel] = None,
    ) -> None:
        self.repository = repository
        self.graph_settings = graph_settings or GraphSettingsModel()

    async def _neighbourhood(self, address: str, limit: int) -> list[Any]:
        return await self.repository.execute_query(
            ACCOUNT_NEIGHBOURHOOD, {"address": address, "limit": limit}
        )

    async def graph_for_account(self, address: str) -> dict[str, Any]:
        """Return the graph of up to ``single_account_limit`` relationships of one account."""
        address = normalize_address(address)
        records = await self._neighbourhood(
            address, self.graph_settings.single_account_limit
        )
        logger.info(f"Building graph for account {address} from {len(records)} records")
        return convert_graph(records).to_dict()

    async def graph_for_account_list(self, addresses: Sequence[str]) -> dict[str, Any]:
        addresses = [normalize_address(address) for address in addresses]
        limit = self.graph_settings.batch_account_limit
        results = await asyncio.gather(
            *(self._neighbourhood(address, limit) for address in addresses)
        )
        combined = [record for records in results for record in records]
        logger.info(
            f"Building graph for {len(addresses)} accounts from {len(combined)} records"
        )
        return convert_graph(combined).to_dict()

    async def graph_for_accounts(self, addresses_json: str) -> dict[str, Any]:
        """Return the combined graph for a JSON array of account addresses."""
        return await self.graph_for_account_list(parse_account_list(addresses_json))
