import datetime
import secrets
import time


class IdGenerator:
    """Produce opaque identifiers for exercises and entries."""

    TOKEN_BYTES: int = 6

    @classmethod
    def uid(cls) -> str:
        """Return a random token with a short time-derived suffix."""
        stamp = format(int(time.time() * 1000), "x")[-4:]
        return secrets.token_hex(cls.TOKEN_BYTES) + stamp


class DateTools:
    """Helpers for the fixed-width ``YYYY-MM-DD`` dates used by entries."""

    ISO_LENGTH: int = 10

    @staticmethod
    def today() -> str:
        return datetime.date.today().isoformat()

    @staticmethod
    def days_ago(days: int, today: datetime.date | None = None) -> str:
        """Return the ISO date ``days`` before ``today``."""
        base = today or datetime.date.today()
        return (base - datetime.timedelta(days=days)).isoformat()

    @classmethod
    def is_iso_date(cls, value: object) -> bool:
        if not isinstance(value, str) or len(value) != cls.ISO_LENGTH:
            return False
        try:
            datetime.date.fromisoformat(value)
        except ValueError:
            return False
        return True

    @classmethod
    def normalize(cls, value: object) -> str:
        """Return ``value`` as a zero-padded ISO date string.

        Accepts ``datetime.date`` objects and ISO strings. Anything else
        raises ``ValueError``.
        """
        if isinstance(value, datetime.datetime):
            return value.date().isoformat()
        if isinstance(value, datetime.date):
            return value.isoformat()
        if cls.is_iso_date(value):
            return value
        raise ValueError(f"invalid date: {value!r}")

    @staticmethod
    def display(iso: str) -> str:
        """Format ``YYYY-MM-DD`` as ``DD.MM.YYYY``."""
        year, month, day = iso.split("-")
        return f"{day}.{month}.{year}"
