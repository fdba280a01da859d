"""
Schema manager: tables, additive column migrations, indexes.

Startup order is fixed:
  connect -> create_schema -> apply_migrations (best effort) -> create_indexes (best effort)

Migrations are not versioned. Every startup walks the same ordered list of
ADD COLUMN statements; a column that is already there is reported as
ALREADY_PRESENT, a statement that fails anyway is reported as FAILED with a
MigrationWarning attached. Neither outcome stops startup.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.schema import CreateTable

from minakami.core.errors import IndexWarning, MigrationWarning, QueryError
from minakami.db.base import Base
from minakami.db.connection import DatabaseConnection

# Registers every table on Base.metadata
import minakami.models  # noqa: F401

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ColumnMigration:
    table: str
    column: str
    ddl_type: str

    @property
    def statement(self) -> str:
        return f"ALTER TABLE {self.table} ADD COLUMN {self.column} {self.ddl_type}"


@dataclass(frozen=True)
class IndexDefinition:
    name: str
    table: str
    columns: tuple[str, ...]

    @property
    def statement(self) -> str:
        cols = ", ".join(self.columns)
        return f"CREATE INDEX IF NOT EXISTS {self.name} ON {self.table}({cols})"


COLUMN_MIGRATIONS: tuple[ColumnMigration, ...] = (
    # activities
    ColumnMigration("activities", "strava_id", "TEXT"),
    ColumnMigration("activities", "heart_rate_avg", "INTEGER"),
    ColumnMigration("activities", "heart_rate_max", "INTEGER"),
    ColumnMigration("activities", "elevation_gain", "REAL DEFAULT 0"),
    # locations
    ColumnMigration("locations", "visit_count", "INTEGER DEFAULT 1"),
    ColumnMigration("locations", "last_visited", "INTEGER"),
    # call_logs
    ColumnMigration("call_logs", "is_analyzed", "BOOLEAN DEFAULT 0"),
    # app_usage
    ColumnMigration("app_usage", "source", "TEXT DEFAULT 'manual'"),
)

INDEXES: tuple[IndexDefinition, ...] = (
    IndexDefinition("idx_activities_start_time", "activities", ("start_time",)),
    IndexDefinition("idx_activities_type", "activities", ("type",)),
    IndexDefinition("idx_activities_source", "activities", ("source",)),
    IndexDefinition("idx_activities_strava_id", "activities", ("strava_id",)),
    IndexDefinition("idx_locations_timestamp", "locations", ("timestamp",)),
    IndexDefinition("idx_locations_coords", "locations", ("latitude", "longitude")),
    IndexDefinition("idx_call_logs_date", "call_logs", ("call_date",)),
    IndexDefinition("idx_call_logs_type", "call_logs", ("call_type",)),
    IndexDefinition("idx_daily_summaries_date", "daily_summaries", ("date",)),
    IndexDefinition("idx_narrative_summaries_date", "narrative_summaries", ("date",)),
    IndexDefinition("idx_user_daily_notes_date", "user_daily_notes", ("date",)),
    IndexDefinition("idx_user_daily_notes_timestamp", "user_daily_notes", ("timestamp",)),
    IndexDefinition("idx_app_usage_date", "app_usage", ("session_date",)),
    IndexDefinition("idx_app_usage_app_name", "app_usage", ("app_name",)),
    IndexDefinition("idx_app_usage_timestamp", "app_usage", ("timestamp",)),
)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

class MigrationOutcome(str, enum.Enum):
    added = "added"
    already_present = "already_present"
    failed = "failed"


@dataclass
class MigrationResult:
    migration: ColumnMigration
    outcome: MigrationOutcome
    warning: Optional[MigrationWarning] = None


@dataclass
class IndexResult:
    index: IndexDefinition
    created: bool
    warning: Optional[IndexWarning] = None


# ---------------------------------------------------------------------------
# Manager
# ---------------------------------------------------------------------------

class SchemaManager:
    def __init__(
        self,
        connection: DatabaseConnection,
        migrations: tuple[ColumnMigration, ...] = COLUMN_MIGRATIONS,
        indexes: tuple[IndexDefinition, ...] = INDEXES,
    ):
        self.connection = connection
        self.migrations = migrations
        self.indexes = indexes

    async def create_schema(self) -> None:
        """CREATE TABLE IF NOT EXISTS for every table; safe on every startup."""
        for table in Base.metadata.sorted_tables:
            await self.connection.execute(CreateTable(table, if_not_exists=True))

    async def _existing_columns(self, table: str) -> set[str]:
        rows = await self.connection.query_all(f"PRAGMA table_info({table})")
        return {row["name"] for row in rows}

    async def _apply_one(self, migration: ColumnMigration) -> MigrationResult:
        try:
            if migration.column in await self._existing_columns(migration.table):
                return MigrationResult(migration, MigrationOutcome.already_present)
            await self.connection.execute(migration.statement)
        except QueryError as exc:
            warning = MigrationWarning(migration.table, migration.column, exc.original or exc)
            logger.warning("Migration warning: %s", warning)
            return MigrationResult(migration, MigrationOutcome.failed, warning)

        logger.info("Added column %s.%s", migration.table, migration.column)
        return MigrationResult(migration, MigrationOutcome.added)

    async def apply_migrations(self) -> list[MigrationResult]:
        return [await self._apply_one(m) for m in self.migrations]

    async def create_indexes(self) -> list[IndexResult]:
        results: list[IndexResult] = []
        for index in self.indexes:
            try:
                await self.connection.execute(index.statement)
            except QueryError as exc:
                warning = IndexWarning(index.name, exc.original or exc)
                logger.warning("Index warning: %s", warning)
                results.append(IndexResult(index, created=False, warning=warning))
                continue
            results.append(IndexResult(index, created=True))
        return results

    async def initialize_database(self) -> None:
        await self.connection.initialize()
        await self.create_schema()

        try:
            await self.apply_migrations()
        except QueryError as exc:
            logger.warning("Migrations failed, database is still usable: %s", exc)

        try:
            await self.create_indexes()
        except QueryError as exc:
            logger.warning("Performance index creation failed: %s", exc)
