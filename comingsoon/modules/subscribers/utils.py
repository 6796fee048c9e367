"""
Email normalisation and validation, applied before anything touches the
database.
"""

import re

from markupsafe import escape

MAX_EMAIL_LENGTH = 255
MAX_LOCAL_PART_LENGTH = 64
MAX_DOMAIN_LABEL_LENGTH = 63

# Local part: RFC 5322 atom characters, plus the numeric entities that
# escaping leaves behind for quotes. Rejects consecutive dots and
# leading/trailing dots in either part.
_LOCAL_ATOM = r"(?:[a-zA-Z0-9!#$%&'*+/=?^_`{|}~-]|&#[0-9]+;)+"
EMAIL_REGEX = re.compile(
    rf'^{_LOCAL_ATOM}(\.{_LOCAL_ATOM})*@[a-zA-Z0-9-]+(\.[a-zA-Z0-9-]+)*\.[a-zA-Z]{{2,}}$'
)


def sanitize_email(email):
    """Lowercase, trim and HTML-escape a raw email string"""
    return str(escape(email.lower().strip()))


def validate_email(email):
    """Validate a sanitized email address"""
    if not email or len(email) > MAX_EMAIL_LENGTH:
        return False
    if EMAIL_REGEX.match(email) is None:
        return False

    local, domain = email.rsplit('@', 1)
    if len(local) > MAX_LOCAL_PART_LENGTH:
        return False
    labels = domain.split('.')
    if any(len(label) > MAX_DOMAIN_LABEL_LENGTH for label in labels):
        return False
    # Hyphens may not open or close a domain label
    return not any(label.startswith('-') or label.endswith('-') for label in labels)
