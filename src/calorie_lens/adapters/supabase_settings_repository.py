"""Supabase key-value repository for app settings."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from calorie_lens.adapters.supabase_errors import storage_errors
from calorie_lens.services.goals import SettingsRepository


@dataclass
class SupabaseSettingsRepository(SettingsRepository):
    """Supabase implementation for settings."""

    client: Client

    def get(self, key: str) -> str | None:
        """Return the stored value for a key."""
        with storage_errors(f"load setting {key}"):
            response = (
                self.client.table("app_settings")
                .select("value")
                .eq("key", key)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        value = response.data[0].get("value")
        return str(value) if value is not None else None

    def set(self, key: str, value: str) -> None:
        """Insert or replace the value for a key."""
        with storage_errors(f"save setting {key}"):
            self.client.table("app_settings").upsert(
                {
                    "key": key,
                    "value": value,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="key",
            ).execute()
