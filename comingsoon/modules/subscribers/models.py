import secrets
import uuid
from datetime import datetime

from sqlalchemy.orm import validates

from comingsoon.core.database import db


def generate_unsubscribe_token():
    return str(uuid.uuid4())


def generate_confirmation_token():
    return secrets.token_hex(32)


class Subscriber(db.Model):
    """One email address and its opt-in state. Rows are deactivated, never deleted."""

    __tablename__ = 'email_subscribers'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    subscribed_at = db.Column(db.DateTime, nullable=False, default=datetime.now)
    ip_address = db.Column(db.String(64))
    user_agent = db.Column(db.Text)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    # Reserved for double opt-in, which no endpoint completes yet
    confirmed = db.Column(db.Boolean, nullable=False, default=False, index=True)
    confirmation_token = db.Column(db.String(255), default=generate_confirmation_token)
    unsubscribe_token = db.Column(db.String(255), unique=True, nullable=False,
                                  default=generate_unsubscribe_token)

    @validates('unsubscribe_token')
    def _freeze_unsubscribe_token(self, key, value):
        if self.unsubscribe_token is not None and value != self.unsubscribe_token:
            raise ValueError('unsubscribe_token cannot be changed once assigned')
        return value

    def to_export_dict(self):
        return {
            'email': self.email,
            'subscribed_at': self.subscribed_at.isoformat() if self.subscribed_at else None,
            'is_active': bool(self.is_active),
            'confirmed': bool(self.confirmed),
        }

    def __repr__(self):
        return f'<Subscriber {self.email} active={self.is_active}>'
