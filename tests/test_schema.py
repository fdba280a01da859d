"""
Tests for the schema manager: idempotent startup, additive migrations, indexes.
"""
import pytest

from minakami.core.errors import IndexWarning, MigrationWarning
from minakami.db.schema import (
    COLUMN_MIGRATIONS,
    INDEXES,
    ColumnMigration,
    IndexDefinition,
    MigrationOutcome,
    SchemaManager,
)

TABLES = {
    "activities",
    "locations",
    "call_logs",
    "daily_summaries",
    "narrative_summaries",
    "user_daily_notes",
    "app_usage",
}


async def _names(connection, kind: str) -> set[str]:
    rows = await connection.query_all(
        "SELECT name FROM sqlite_master WHERE type = :kind", {"kind": kind}
    )
    return {r["name"] for r in rows}


@pytest.mark.asyncio
class TestStartup:
    async def test_creates_all_tables_and_indexes(self, schema_ready):
        assert TABLES <= await _names(schema_ready, "table")
        assert {i.name for i in INDEXES} <= await _names(schema_ready, "index")

    async def test_second_startup_is_harmless(self, schema_ready):
        await schema_ready.execute(
            "INSERT INTO narrative_summaries (date, summary) VALUES ('2024-03-10', 'kept')"
        )
        await SchemaManager(schema_ready).initialize_database()
        row = await schema_ready.query_one("SELECT summary FROM narrative_summaries")
        assert row == {"summary": "kept"}

    async def test_fresh_schema_reports_every_column_present(self, schema_ready):
        results = await SchemaManager(schema_ready).apply_migrations()
        assert len(results) == len(COLUMN_MIGRATIONS)
        assert all(r.outcome is MigrationOutcome.already_present for r in results)
        assert all(r.warning is None for r in results)


@pytest.mark.asyncio
class TestMigrations:
    async def test_legacy_table_gets_missing_columns(self, connection):
        await connection.execute(
            """
            CREATE TABLE activities (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                type TEXT NOT NULL,
                start_time INTEGER NOT NULL,
                end_time INTEGER,
                duration INTEGER,
                details TEXT,
                source TEXT DEFAULT 'manual',
                metadata TEXT,
                calories INTEGER DEFAULT 0,
                distance REAL DEFAULT 0,
                sport_type TEXT
            )
            """
        )
        manager = SchemaManager(connection)
        await manager.create_schema()
        results = await manager.apply_migrations()

        added = {(r.migration.table, r.migration.column) for r in results
                 if r.outcome is MigrationOutcome.added}
        assert added == {
            ("activities", "strava_id"),
            ("activities", "heart_rate_avg"),
            ("activities", "heart_rate_max"),
            ("activities", "elevation_gain"),
        }

        columns = {r["name"] for r in await connection.query_all("PRAGMA table_info(activities)")}
        assert {"strava_id", "heart_rate_avg", "heart_rate_max", "elevation_gain"} <= columns

        again = await manager.apply_migrations()
        assert all(r.outcome is MigrationOutcome.already_present for r in again)

    async def test_failing_migration_is_reported_not_raised(self, connection):
        manager = SchemaManager(
            connection,
            migrations=(ColumnMigration("no_such_table", "extra", "TEXT"),),
        )
        [result] = await manager.apply_migrations()
        assert result.outcome is MigrationOutcome.failed
        assert isinstance(result.warning, MigrationWarning)
        assert result.warning.table == "no_such_table"
        assert result.warning.original is not None


class TestDefinitions:
    def test_migration_statement(self):
        m = ColumnMigration("locations", "visit_count", "INTEGER DEFAULT 1")
        assert m.statement == "ALTER TABLE locations ADD COLUMN visit_count INTEGER DEFAULT 1"

    def test_index_statement(self):
        i = IndexDefinition("idx_locations_coords", "locations", ("latitude", "longitude"))
        assert i.statement == (
            "CREATE INDEX IF NOT EXISTS idx_locations_coords ON locations(latitude, longitude)"
        )


@pytest.mark.asyncio
class TestIndexes:
    async def test_index_on_missing_column_is_reported_not_raised(self, schema_ready):
        manager = SchemaManager(
            schema_ready,
            indexes=(
                IndexDefinition("idx_bad", "activities", ("no_such_column",)),
                IndexDefinition("idx_activities_type", "activities", ("type",)),
            ),
        )
        bad, good = await manager.create_indexes()
        assert not bad.created
        assert isinstance(bad.warning, IndexWarning)
        assert bad.warning.index_name == "idx_bad"
        assert good.created
        assert good.warning is None

    async def test_startup_survives_a_bad_index(self, connection):
        manager = SchemaManager(
            connection,
            indexes=INDEXES + (IndexDefinition("idx_bad", "locations", ("nope",)),),
        )
        await manager.initialize_database()
        assert "idx_locations_coords" in await _names(connection, "index")
