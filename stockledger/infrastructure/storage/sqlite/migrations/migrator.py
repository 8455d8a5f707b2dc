"""
Versioned schema migrations for the ledger database.

Migration files are named ``vNNN_description.sql`` and live next to this
module. Each one runs in its own transaction together with the row that
records it in ``schema_migrations``. A recorded migration whose file has
since changed is refused rather than re-applied.
"""

import asyncio
import hashlib
import re
import shutil
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

import aiosqlite

from stockledger.config import configure_logging, get_logger, get_settings
from stockledger.core.exceptions import MigrationError

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

_FILENAME = re.compile(r"v(\d+)_(.+)\.sql")

REQUIRED_TABLES = [
    "products",
    "purchases",
    "purchase_items",
    "sales",
    "sale_lines",
    "sale_sequences",
    "inventory_log",
    "schema_migrations",
]

# The log is only append-only while these exist
REQUIRED_TRIGGERS = [
    "inventory_log_no_update",
    "inventory_log_no_delete",
]


@dataclass(frozen=True)
class MigrationInfo:
    """A migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = _FILENAME.fullmatch(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")
        checksum = hashlib.sha256(path.read_bytes()).hexdigest()[:16]
        return cls(version=match.group(1), name=match.group(2), path=path, checksum=checksum)

    def read(self) -> str:
        return self.path.read_text(encoding="utf-8")


@dataclass
class MigrationResult:
    version: str
    name: str
    execution_time_ms: int


@dataclass
class SchemaCheck:
    """Outcome of one integrity check."""

    check: str
    passed: bool
    details: dict = field(default_factory=dict)

    @property
    def status(self) -> str:
        return "PASS" if self.passed else "FAIL"


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """Bundled migrations in version order; badly named files are skipped."""
    found = []
    for path in sorted(directory.glob("v*.sql")):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return found


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Map of applied version -> checksum; empty before the first migration."""
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        return {}
    return {row[0]: row[1] for row in await cursor.fetchall()}


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    applied = await get_applied_migrations(conn)
    return max(applied) if applied else None


async def apply_migration(conn: aiosqlite.Connection, migration: MigrationInfo) -> MigrationResult:
    """Run one migration file and record it, all in a single transaction."""
    logger.info("applying_migration", version=migration.version, name=migration.name)
    started = time.perf_counter()

    try:
        # executescript leaves the transaction opened by the script's BEGIN
        await conn.executescript("BEGIN IMMEDIATE;\n" + migration.read())
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        await conn.execute(
            "INSERT INTO schema_migrations (version, name, checksum, execution_time_ms) "
            "VALUES (?, ?, ?, ?)",
            (migration.version, migration.name, migration.checksum, elapsed_ms),
        )
        await conn.commit()
    except (aiosqlite.Error, OSError) as e:
        if conn.in_transaction:
            await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=str(e))
        raise MigrationError(migration.version, str(e)) from e

    logger.info("migration_applied", version=migration.version, execution_time_ms=elapsed_ms)
    return MigrationResult(
        version=migration.version, name=migration.name, execution_time_ms=elapsed_ms
    )


def pending_migrations(
    discovered: list[MigrationInfo], applied: dict[str, str]
) -> list[MigrationInfo]:
    """Migrations not yet applied; raises when an applied file was edited."""
    pending = []
    for migration in discovered:
        recorded = applied.get(migration.version)
        if recorded is None:
            pending.append(migration)
        elif recorded != migration.checksum:
            raise MigrationError(
                migration.version,
                f"checksum {migration.checksum} differs from applied {recorded}",
            )
    return pending


def create_backup(db_path: Path) -> Path:
    """Copy the database file aside before touching its schema."""
    stamp = datetime.now(UTC).strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_suffix(f".backup_{stamp}.db")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


def restore_backup(db_path: Path, backup_path: Path) -> None:
    shutil.copy2(backup_path, db_path)
    logger.info("database_restored_from_backup", backup_path=str(backup_path))


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Bring the ledger database up to the newest schema.

    Args:
        db_path: Database file (default from settings)
        create_backup_before: Copy an existing file aside while migrating and
            restore it if any migration fails

    Returns:
        One result per migration applied by this call; empty when the
        schema was already current.

    Raises:
        MigrationError: A migration failed or an applied file was changed.
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(db_path) as conn:
        pending = pending_migrations(discover_migrations(), await get_applied_migrations(conn))

    if not pending:
        logger.info("database_schema_current", db_path=str(db_path))
        return []

    # Copied while no connection is open so the WAL is already checkpointed
    backup_path = None
    if create_backup_before and db_path.stat().st_size > 0:
        backup_path = create_backup(db_path)

    results = []
    try:
        async with aiosqlite.connect(db_path, isolation_level=None) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")
            for migration in pending:
                results.append(await apply_migration(conn, migration))
    except MigrationError:
        if backup_path is not None:
            restore_backup(db_path, backup_path)
        raise

    if backup_path is not None:
        backup_path.unlink()

    logger.info(
        "database_migrated",
        db_path=str(db_path),
        versions=[r.version for r in results],
    )
    return results


# Used by the application lifespan
run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> dict:
    db_path = db_path or get_settings().storage.db_path
    discovered = discover_migrations()

    if not db_path.exists():
        return {
            "exists": False,
            "current_version": None,
            "applied_migrations": [],
            "pending_migrations": [m.version for m in discovered],
        }

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)

    return {
        "exists": True,
        "current_version": max(applied) if applied else None,
        "applied_migrations": sorted(applied),
        "pending_migrations": [m.version for m in discovered if m.version not in applied],
    }


async def verify_schema_integrity(db_path: Path | None = None) -> list[SchemaCheck]:
    """SQLite integrity, foreign keys, and presence of ledger tables and triggers."""
    db_path = db_path or get_settings().storage.db_path

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA integrity_check")
        integrity = (await cursor.fetchone())[0]

        cursor = await conn.execute("PRAGMA foreign_key_check")
        fk_violations = len(await cursor.fetchall())

        cursor = await conn.execute("SELECT type, name FROM sqlite_master")
        objects = {(row[0], row[1]) for row in await cursor.fetchall()}

    missing_tables = [t for t in REQUIRED_TABLES if ("table", t) not in objects]
    missing_triggers = [t for t in REQUIRED_TRIGGERS if ("trigger", t) not in objects]

    return [
        SchemaCheck("integrity", integrity == "ok", {"result": integrity}),
        SchemaCheck("foreign_keys", fk_violations == 0, {"violations": fk_violations}),
        SchemaCheck("required_tables", not missing_tables, {"missing": missing_tables}),
        SchemaCheck("append_only_triggers", not missing_triggers, {"missing": missing_triggers}),
    ]


def main() -> None:
    """stockledger-migrate: apply, inspect or verify the ledger schema."""
    import argparse

    parser = argparse.ArgumentParser(description="StockLedger database migrator")
    parser.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--status", action="store_true", help="Show applied and pending versions")
    group.add_argument("--verify", action="store_true", help="Check schema integrity")
    parser.add_argument("--no-backup", action="store_true", help="Skip the pre-migration backup")
    args = parser.parse_args()
    configure_logging()

    async def run() -> int:
        if args.status:
            status = await get_migration_status(args.db_path)
            print(f"Database exists:  {status['exists']}")
            print(f"Current version:  {status['current_version'] or '-'}")
            print(f"Applied:          {', '.join(status['applied_migrations']) or '-'}")
            print(f"Pending:          {', '.join(status['pending_migrations']) or '-'}")
            return 0

        if args.verify:
            checks = await verify_schema_integrity(args.db_path)
            for check in checks:
                print(f"[{check.status}] {check.check} {check.details if not check.passed else ''}")
            return 0 if all(c.passed for c in checks) else 1

        try:
            results = await initialize_database(
                args.db_path, create_backup_before=not args.no_backup
            )
        except MigrationError as e:
            print(f"[FAILED] {e.message}")
            return 1
        for result in results:
            print(f"[APPLIED] v{result.version}: {result.name} ({result.execution_time_ms}ms)")
        if not results:
            print("Schema is current")
        return 0

    raise SystemExit(asyncio.run(run()))


if __name__ == "__main__":
    main()
