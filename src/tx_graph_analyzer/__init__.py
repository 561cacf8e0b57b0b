"""Analytic queries and node-link graph conversion over a Neo4j transaction graph."""

__version__ = "0.1.0"
