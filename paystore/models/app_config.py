from datetime import datetime, timezone

from paystore.extensions import db, JSONDocument


class AppConfigDocument(db.Model):
    """Keyed configuration documents; 'daraja' holds the fallback credentials."""
    __tablename__ = 'app_config'

    key = db.Column(db.String(64), primary_key=True)
    data = db.Column(JSONDocument, nullable=False, default=dict)

    updated_at = db.Column(db.DateTime(timezone=True), nullable=False,
                           default=lambda: datetime.now(timezone.utc),
                           onupdate=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f'<AppConfigDocument {self.key}>'
