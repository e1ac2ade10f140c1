from flask_sqlalchemy import SQLAlchemy
from datetime import date, datetime, timedelta, timezone

db = SQLAlchemy()

_TZ_OFFSET_HOURS = -8  # PST; change to -7 for PDT


def today_local() -> date:
    return (datetime.now(timezone.utc) + timedelta(hours=_TZ_OFFSET_HOURS)).date()


class StoredBlob(db.Model):
    """One serialized document per fixed key (e.g. the whole progress state)."""
    __tablename__ = "stored_blob"

    key = db.Column(db.String(80), primary_key=True)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False,
                           default=lambda: datetime.now(timezone.utc),
                           onupdate=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f"<StoredBlob {self.key} {len(self.value or '')}b>"
