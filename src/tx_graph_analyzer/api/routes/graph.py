from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, Request

from ...domain.services import CentralityService, TransactionGraphService

graph_router = APIRouter()


def get_graph_service(request: Request) -> TransactionGraphService:
    return request.app.state.graph_service


def get_centrality_service(request: Request) -> CentralityService:
    return request.app.state.centrality_service


@graph_router.get("/graph/account/{address}")
async def graph_for_account(
    address: str,
    service: TransactionGraphService = Depends(get_graph_service),
) -> dict[str, Any]:
    """
    Return the neighbourhood graph of a single account.

    The response has two keys: ``nodes`` (deduplicated, in first-seen order)
    and ``links`` whose ``source``/``target`` are positions in ``nodes``.
    """
    return await service.graph_for_account(address)


@graph_router.get("/graph/accounts")
async def graph_for_accounts(
    addresses: str = Query(..., description="JSON array of account addresses"),
    service: TransactionGraphService = Depends(get_graph_service),
) -> dict[str, Any]:
    """Return one merged graph for several accounts."""
    return await service.graph_for_accounts(addresses)


@graph_router.get("/centrality/degree/{category}")
async def degree_centrality(
    category: str,
    service: CentralityService = Depends(get_centrality_service),
) -> list[dict[str, Any]]:
    return await service.degree_centrality(category.lower())


@graph_router.get("/centrality/betweenness")
async def betweenness_centrality(
    service: CentralityService = Depends(get_centrality_service),
) -> list[dict[str, Any]]:
    return await service.account_betweenness_centrality()
