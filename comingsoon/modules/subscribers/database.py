"""
Subscriber persistence helpers.

Mutations are single conditional statements so that concurrent requests
cannot both win: reactivation only matches inactive rows, unsubscribe only
matches active rows, and the unique index on email turns a racing second
insert into an IntegrityError for the caller to report as a conflict.
"""

from datetime import datetime, time, timedelta

from sqlalchemy import case, func, select, update
from sqlalchemy.exc import IntegrityError

from comingsoon.core.database import db

from .models import Subscriber


def find_by_email(email):
    return db.session.execute(
        select(Subscriber).where(Subscriber.email == email)
    ).scalar_one_or_none()


def create_subscriber(email, ip_address=None, user_agent=None):
    """Insert a new active subscriber. Raises IntegrityError if the email exists."""
    subscriber = Subscriber(
        email=email,
        ip_address=ip_address,
        user_agent=user_agent,
        is_active=True,
        confirmed=False,
    )
    db.session.add(subscriber)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise
    return subscriber


def reactivate_subscriber(email):
    """Flip an inactive subscriber back on and restart its subscription date.

    Returns False when no inactive row matched (already active, or another
    request reactivated it first).
    """
    result = db.session.execute(
        update(Subscriber)
        .where(Subscriber.email == email, Subscriber.is_active.is_(False))
        .values(is_active=True, subscribed_at=datetime.now())
        .execution_options(synchronize_session=False)
    )
    db.session.commit()
    return result.rowcount == 1


def deactivate_by_token(token):
    """Unsubscribe the active row holding `token`.

    Returns the email that was unsubscribed, or None if the token is unknown
    or its subscriber is already inactive.
    """
    email = db.session.execute(
        select(Subscriber.email).where(
            Subscriber.unsubscribe_token == token,
            Subscriber.is_active.is_(True),
        )
    ).scalar_one_or_none()
    if email is None:
        return None

    result = db.session.execute(
        update(Subscriber)
        .where(Subscriber.unsubscribe_token == token, Subscriber.is_active.is_(True))
        .values(is_active=False)
        .execution_options(synchronize_session=False)
    )
    db.session.commit()
    return email if result.rowcount == 1 else None


def _count_where(condition):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


def get_stats(now=None):
    """Aggregate counts over every row, active or not.

    Signup buckets are measured from local midnight: today, and midnight
    seven and thirty days back.
    """
    now = now or datetime.now()
    today = datetime.combine(now.date(), time.min)
    week_start = today - timedelta(days=7)
    month_start = today - timedelta(days=30)

    row = db.session.execute(
        select(
            func.count(Subscriber.id),
            _count_where(Subscriber.is_active.is_(True)),
            _count_where(Subscriber.confirmed.is_(True)),
            _count_where(Subscriber.subscribed_at >= today),
            _count_where(Subscriber.subscribed_at >= week_start),
            _count_where(Subscriber.subscribed_at >= month_start),
        )
    ).one()

    keys = (
        'total_subscribers',
        'active_subscribers',
        'confirmed_subscribers',
        'today_signups',
        'week_signups',
        'month_signups',
    )
    return {key: int(value or 0) for key, value in zip(keys, row)}


def get_active_export():
    """Active subscribers, newest first"""
    subscribers = db.session.execute(
        select(Subscriber)
        .where(Subscriber.is_active.is_(True))
        .order_by(Subscriber.subscribed_at.desc(), Subscriber.id.desc())
    ).scalars().all()
    return [s.to_export_dict() for s in subscribers]
