import asyncio
import json
import os
from pathlib import Path
from typing import Any, Awaitable, Callable

import typer
from dotenv import load_dotenv, set_key
from loguru import logger

from .app_setup import configure_logging
from .config import Neo4jSettingsModel, runtime_settings
from .domain.services import (
    CentralityService,
    GraphAnalyzerError,
    TransactionGraphService,
)
from .infrastructure import Neo4jConnectionManager, Neo4jGraphRepository

app = typer.Typer(add_completion=False, help="Transaction graph analyzer.")


def _run_with_repository(
    action: Callable[[Neo4jGraphRepository], Awaitable[Any]],
) -> Any:
    configure_logging(runtime_settings.app.log_level)
    try:
        with Neo4jConnectionManager(runtime_settings.neo4j) as connection:
            return asyncio.run(action(Neo4jGraphRepository(connection)))
    except GraphAnalyzerError as e:
        typer.secho(str(e), fg="red", err=True)
        raise typer.Exit(1)


@app.command()
def setup() -> None:
    """Prompt for Neo4j credentials, test them and store them in .env."""
    if Path(".env").exists():
        if typer.confirm("Import existing .env values?", default=True):
            load_dotenv(".env")
            typer.echo("Loaded values from .env")
    uri = typer.prompt("Neo4j URI", default=os.getenv("NEO4J_URI", "bolt://localhost:7687"))
    user = typer.prompt("Neo4j User", default=os.getenv("NEO4J_USER", "neo4j"))
    password = typer.prompt(
        "Neo4j Password",
        default=os.getenv("NEO4J_PASSWORD", ""),
        hide_input=True,
    )
    database = typer.prompt("Neo4j Database", default=os.getenv("NEO4J_DATABASE", "neo4j"))

    typer.echo("Testing Neo4j connection...")
    candidate = Neo4jSettingsModel(uri=uri, user=user, password=password, database=database)
    try:
        with Neo4jConnectionManager(candidate):
            pass
    except GraphAnalyzerError as e:
        logger.debug(f"Connection test failed: {e}")
        typer.secho("Failed to connect to Neo4j with provided details", fg="red")
        raise typer.Exit(1)
    typer.secho("Connected successfully!", fg="green")

    env_path = Path(".env")
    env_path.touch(mode=0o600, exist_ok=True)
    set_key(str(env_path), "NEO4J_URI", uri)
    set_key(str(env_path), "NEO4J_USER", user)
    set_key(str(env_path), "NEO4J_PASSWORD", password)
    set_key(str(env_path), "NEO4J_DATABASE", database)
    env_path.chmod(0o600)
    typer.secho(f"Credentials saved to {env_path}", fg="green")


@app.command()
def graph(
    addresses: list[str] = typer.Argument(..., help="One or more account addresses"),
    indent: int = typer.Option(2, help="JSON indentation"),
) -> None:
    """Print the node-link graph around the given accounts."""

    async def action(repository: Neo4jGraphRepository) -> dict[str, Any]:
        service = TransactionGraphService(repository, runtime_settings.graph)
        if len(addresses) == 1:
            return await service.graph_for_account(addresses[0])
        return await service.graph_for_account_list(addresses)

    typer.echo(json.dumps(_run_with_repository(action), indent=indent))


@app.command()
def centrality(
    kind: str = typer.Argument(
        ..., help="account, external or contract degree, or betweenness"
    ),
) -> None:
    """Print a centrality ranking computed by Neo4j."""

    async def action(repository: Neo4jGraphRepository) -> list[dict[str, Any]]:
        service = CentralityService(repository, runtime_settings.graph)
        if kind.lower() == "betweenness":
            return await service.account_betweenness_centrality()
        return await service.degree_centrality(kind.lower())

    typer.echo(json.dumps(_run_with_repository(action), indent=2))


@app.command()
def serve() -> None:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run(
        "tx_graph_analyzer.app_setup:create_app",
        factory=True,
        host=runtime_settings.app.host,
        port=runtime_settings.app.port,
        reload=runtime_settings.app.uvicorn_reload,
    )


if __name__ == "__main__":
    app()
