from datetime import datetime, timezone


def utc_now() -> datetime:
    # naive UTC: SQLite DateTime columns drop tzinfo, so both stores keep it off
    return datetime.now(timezone.utc).replace(tzinfo=None)
