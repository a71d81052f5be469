from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Current time as a timezone-aware UTC datetime.

    Used as the application-side default for every created_at column so
    listings can be ordered most recent first with sub-second resolution.
    """
    return datetime.now(timezone.utc)

