"""Data providers feeding the declaration pipeline."""

from dimob_gen.providers.base import DataProvider
from dimob_gen.providers.memory import InMemoryDataProvider
from dimob_gen.providers.postgres import PostgresDataProvider

__all__ = ["DataProvider", "InMemoryDataProvider", "PostgresDataProvider"]
