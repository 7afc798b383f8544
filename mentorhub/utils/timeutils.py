from datetime import date, datetime, UTC


# Timestamps are stored naive in UTC; TIMESTAMP columns carry no zone
def utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def utc_today() -> date:
    return datetime.now(UTC).date()
