"""
Subscribers Routes
==================

Provides:
- POST /subscribe -- subscribe or reactivate (rate limited per IP)
- GET /unsubscribe/<token> -- unsubscribe page (HTML)
- GET /stats -- subscriber statistics
- GET /export -- active subscriber list

The stats and export endpoints are not authenticated; put them behind the
proxy's access control in deployments that need it.
"""

import logging

from flask import current_app, jsonify, render_template, request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from comingsoon.core.database import db
from comingsoon.core.logging_service import event_log
from comingsoon.core.rate_limit import get_client_ip, limiter

from . import subscribers_bp
from .database import (
    create_subscriber,
    deactivate_by_token,
    find_by_email,
    get_active_export,
    get_stats,
    reactivate_subscriber,
)
from .utils import sanitize_email, validate_email

logger = logging.getLogger(__name__)


def _get_brand_name():
    return current_app.config.get('BRAND_NAME', 'our newsletter')


def _request_data():
    """Body as a dict, whether it was sent as JSON or as a form"""
    data = request.get_json(silent=True)
    if data is None:
        data = request.form
    return data if hasattr(data, 'get') else {}


def _reply(success, message, status_code):
    return jsonify({'success': success, 'message': message}), status_code


# ===================
# PUBLIC API ROUTES
# ===================

@subscribers_bp.route('/subscribe', methods=['POST'])
@limiter.limit_signups
def subscribe():
    """Handle new subscription requests"""
    email = _request_data().get('email')

    if not email:
        return _reply(False, 'Email address is required.', 400)

    if not isinstance(email, str):
        return _reply(False, 'Please enter a valid email address.', 400)

    sanitized_email = sanitize_email(email)

    if not validate_email(sanitized_email):
        return _reply(False, 'Please enter a valid email address.', 400)

    ip_address = get_client_ip()
    user_agent = (request.headers.get('User-Agent') or 'Unknown')[:500]

    try:
        existing = find_by_email(sanitized_email)

        if existing is not None:
            if existing.is_active:
                return _reply(False, 'This email is already subscribed to our newsletter.', 409)

            if not reactivate_subscriber(sanitized_email):
                # Another request reactivated it between lookup and update
                return _reply(False, 'This email is already subscribed to our newsletter.', 409)

            logger.info(f"Reactivated subscription for: {sanitized_email} from IP: {ip_address}")
            event_log.info('subscribers', f'Reactivated subscriber: {sanitized_email}',
                           {'ip': ip_address})
            return _reply(True, "Welcome back! You've been resubscribed to our newsletter.", 200)

        create_subscriber(sanitized_email, ip_address=ip_address, user_agent=user_agent)

    except IntegrityError:
        # Lost the race against a concurrent insert of the same email
        db.session.rollback()
        logger.info(f"Duplicate subscription rejected by unique index: {sanitized_email}")
        return _reply(False, 'This email is already subscribed.', 409)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Subscription error: {e}")
        event_log.error('subscribers', 'Database error in subscribe', {'error': str(e)})
        return _reply(False, 'Something went wrong. Please try again later.', 500)

    logger.info(f"New email subscription: {sanitized_email} from IP: {ip_address}")
    event_log.info('subscribers', f'New subscriber: {sanitized_email}', {'ip': ip_address})

    return _reply(True, f"Thank you! You'll be notified when {_get_brand_name()} launches.", 201)


@subscribers_bp.route('/unsubscribe/<token>', methods=['GET'])
def unsubscribe(token):
    """One-click unsubscribe from an email link.

    Tokens are single use: once the subscriber is inactive the same link
    reports it has already been used, until they subscribe again.
    """
    brand_name = _get_brand_name()
    try:
        email = deactivate_by_token(token)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Unsubscribe error: {e}")
        event_log.error('subscribers', 'Database error in unsubscribe', {'error': str(e)})
        return render_template('subscribers/unsubscribe.html', status='error',
                               brand_name=brand_name), 500

    if email is None:
        return render_template('subscribers/unsubscribe.html', status='invalid',
                               brand_name=brand_name), 404

    logger.info(f"Unsubscribed: {email}")
    event_log.info('subscribers', f'Unsubscribed: {email}')
    return render_template('subscribers/unsubscribe.html', status='success',
                           brand_name=brand_name), 200


@subscribers_bp.route('/stats', methods=['GET'])
def get_subscriber_stats():
    """Get subscriber statistics"""
    try:
        stats = get_stats()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Stats error: {e}")
        return _reply(False, 'Unable to fetch statistics.', 500)

    return jsonify({'success': True, 'data': stats}), 200


@subscribers_bp.route('/export', methods=['GET'])
def export_subscribers():
    """Export the active subscriber list"""
    try:
        subscribers = get_active_export()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Export error: {e}")
        return _reply(False, 'Unable to export subscribers.', 500)

    return jsonify({
        'success': True,
        'data': subscribers,
        'count': len(subscribers),
    }), 200
