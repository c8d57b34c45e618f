"""Translation of Supabase client failures into application errors."""

from collections.abc import Iterator
from contextlib import contextmanager

import httpx
from postgrest.exceptions import APIError

from calorie_lens.errors import NetworkError, StorageError


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Raise `StorageError` or `NetworkError` for failures inside the block."""
    try:
        yield
    except APIError as exc:
        raise StorageError(f"Failed to {action}: {exc.message}") from exc
    except httpx.HTTPError as exc:
        raise NetworkError("Please check your network connection.") from exc
