# pet_ledger/utils/contact_utils.py
import re

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
PHONE_PATTERN = re.compile(r'^\+?[1-9]\d{0,15}$')


def validate_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email or ''))


def validate_phone_number(phone: str) -> bool:
    """Accepts optional leading '+' and up to 16 digits; formatting characters are ignored."""
    cleaned = re.sub(r'[^\d+]', '', phone or '')
    return bool(PHONE_PATTERN.match(cleaned))


def format_phone_number(phone: str) -> str:
    """Formats 10-digit numbers as (555) 123-4567; anything else is returned unchanged."""
    cleaned = re.sub(r'\D', '', phone or '')
    if len(cleaned) == 10:
        return f"({cleaned[:3]}) {cleaned[3:6]}-{cleaned[6:]}"
    return phone
