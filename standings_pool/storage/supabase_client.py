# standings_pool/storage/supabase_client.py
from datetime import datetime, timezone
from typing import List, Dict, Any, Optional

from loguru import logger
from supabase import create_async_client, AsyncClient
from postgrest import APIResponse
from postgrest.exceptions import APIError

from standings_pool.config.settings import settings
from standings_pool.models.entry import Entry
from standings_pool.models.wins import TeamWins, WinsTable

TEAM_WINS_TABLE = "team_wins"
TEAM_WINS_HISTORY_TABLE = "team_wins_history"
ENTRIES_TABLE = "entries"

# Module-level storage for the async client instance
_async_supabase_client: Optional[AsyncClient] = None


async def initialize_supabase() -> Optional[AsyncClient]:
    """Initializes the global ASYNC Supabase client and returns it."""
    global _async_supabase_client
    if _async_supabase_client:
        logger.debug("Async Supabase client already initialized.")
        return _async_supabase_client

    key = settings.write_key
    if not settings.supabase_url or not key:
        logger.critical("Supabase URL or Key not configured in settings.")
        raise SystemExit("Supabase configuration missing.")

    logger.debug(
        f"Attempting to initialize Async Supabase client with URL: {settings.supabase_url}"
    )

    try:
        client: AsyncClient = await create_async_client(settings.supabase_url, key)
        _async_supabase_client = client
        logger.success("Async Supabase client initialized successfully.")
        return client
    except Exception as e:
        logger.exception(f"Failed to initialize Async Supabase client: {e}")
        return None


def set_supabase_client(client: Optional[AsyncClient]) -> None:
    """Installs (or clears) the module-level client."""
    global _async_supabase_client
    _async_supabase_client = client


def get_supabase_client() -> Optional[AsyncClient]:
    """Returns the initialized ASYNC Supabase client instance."""
    if not _async_supabase_client:
        logger.warning("Async Supabase client accessed before initialization.")
        return None
    return _async_supabase_client


async def _handle_upsert(
    table_name: str, data: List[Dict[str, Any]], on_conflict: str = ""
) -> bool:
    """Handles the upsert operation for a given table using the ASYNC client."""
    client = get_supabase_client()
    if not client:
        logger.error(f"Async Supabase client not available for upsert to {table_name}.")
        return False

    if not data:
        logger.debug(f"No data provided for upsert to table {table_name}. Skipping.")
        return True

    try:
        await client.table(table_name).upsert(data, on_conflict=on_conflict).execute()
        logger.success(f"Successfully upserted {len(data)} records to {table_name}.")
        return True
    except APIError as e:
        logger.error(f"Error during async upsert to {table_name}: {e.message}")
        logger.debug(f"Full APIError details: {e}")
        return False
    except Exception as e:
        logger.error(
            f"An unexpected error occurred during async upsert to {table_name}: {e}"
        )
        logger.exception("Traceback:")
        return False


async def _handle_insert(table_name: str, data: List[Dict[str, Any]]) -> bool:
    client = get_supabase_client()
    if not client:
        logger.error(f"Async Supabase client not available for insert to {table_name}.")
        return False

    if not data:
        return True

    try:
        await client.table(table_name).insert(data).execute()
        logger.success(f"Inserted {len(data)} records into {table_name}.")
        return True
    except APIError as e:
        logger.error(f"Error during async insert to {table_name}: {e.message}")
        logger.debug(f"Full APIError details: {e}")
        return False
    except Exception as e:
        logger.error(
            f"An unexpected error occurred during async insert to {table_name}: {e}"
        )
        logger.exception("Traceback:")
        return False


async def save_team_wins(
    rows: List[TeamWins], as_of: Optional[datetime] = None
) -> bool:
    """Upserts current win counts and appends them to the history table."""
    as_of = as_of or datetime.now(timezone.utc)
    stamp = as_of.isoformat()

    current = [
        {"team_id": r.team_id, "wins": r.wins, "updated_at": stamp} for r in rows
    ]
    if not await _handle_upsert(TEAM_WINS_TABLE, current, on_conflict="team_id"):
        logger.error("Failed to upsert current team wins.")
        return False

    # History is append-only; a failure here leaves current wins intact
    history = [{"team_id": r.team_id, "wins": r.wins, "as_of": stamp} for r in rows]
    if not await _handle_insert(TEAM_WINS_HISTORY_TABLE, history):
        logger.warning("Current wins saved but history append failed.")
    return True


async def fetch_wins_table() -> Optional[WinsTable]:
    """Reads the ``team_wins`` table into an immutable WinsTable snapshot."""
    client = get_supabase_client()
    if not client:
        logger.error("Supabase client not available for fetch_wins_table.")
        return None

    try:
        response: APIResponse = (
            await client.table(TEAM_WINS_TABLE)
            .select("team_id,wins,updated_at")
            .execute()
        )
        table = WinsTable.from_rows(response.data or [])
        logger.info(
            f"Fetched wins for {len(table.wins)} teams (last updated {table.last_updated.isoformat()})."
        )
        return table
    except APIError as e:
        logger.error(f"Supabase API error fetching wins: {e.message}")
        logger.debug(f"Full APIError details: {e}")
        return None
    except Exception as e:
        logger.error(f"An unexpected error occurred fetching wins: {e}")
        logger.exception("Traceback:")
        return None


async def fetch_entries(season: Optional[str] = None) -> Optional[List[Entry]]:
    """Fetches pool entries, optionally restricted to one season.

    Malformed rows are skipped with a warning rather than failing the fetch.
    """
    client = get_supabase_client()
    if not client:
        logger.error("Supabase client not available for fetch_entries.")
        return None

    try:
        query = client.table(ENTRIES_TABLE).select("*")
        if season:
            query = query.eq("season", season)
        response: APIResponse = await query.execute()
    except APIError as e:
        logger.error(f"Supabase API error fetching entries: {e.message}")
        logger.debug(f"Full APIError details: {e}")
        return None
    except Exception as e:
        logger.error(f"An unexpected error occurred fetching entries: {e}")
        logger.exception("Traceback:")
        return None

    entries: List[Entry] = []
    for row in response.data or []:
        try:
            entries.append(Entry.model_validate(row))
        except ValueError as e:
            logger.warning(f"Skipping malformed entry row {row.get('id')}: {e}")
    logger.info(f"Fetched {len(entries)} entries.")
    return entries


async def save_entry(entry: Entry) -> bool:
    """Inserts a new entry. Entries are immutable, so this never updates."""
    return await _handle_insert(ENTRIES_TABLE, [entry.to_record()])


async def is_display_name_taken(user_id: str, season: str, name: str) -> Optional[bool]:
    """Case-insensitive exact check for a name this user already used this season."""
    client = get_supabase_client()
    if not client:
        logger.error("Supabase client not available for is_display_name_taken.")
        return None

    # Escape LIKE wildcards so ilike behaves as an exact, case-insensitive compare
    pattern = name.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    try:
        response: APIResponse = (
            await client.table(ENTRIES_TABLE)
            .select("id", count="exact")
            .eq("user_id", user_id)
            .eq("season", season)
            .ilike("name", pattern)
            .execute()
        )
        return (response.count or 0) > 0
    except APIError as e:
        logger.error(f"Supabase API error checking display name: {e.message}")
        logger.debug(f"Full APIError details: {e}")
        return None
    except Exception as e:
        logger.error(f"An unexpected error occurred checking display name: {e}")
        logger.exception("Traceback:")
        return None
