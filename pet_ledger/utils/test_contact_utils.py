# pet_ledger/utils/test_contact_utils.py
from pet_ledger.utils.contact_utils import validate_email, validate_phone_number, format_phone_number


def test_validate_email():
    assert validate_email('owner@example.com')
    assert not validate_email('owner@example')
    assert not validate_email('owner example.com')
    assert not validate_email(None)


def test_validate_phone_number():
    assert validate_phone_number('(555) 123-4567')
    assert validate_phone_number('+44 20 7946 0958')
    assert not validate_phone_number('0123')
    assert not validate_phone_number('call me')


def test_format_phone_number():
    assert format_phone_number('5551234567') == '(555) 123-4567'
    assert format_phone_number('555.123.4567') == '(555) 123-4567'
    assert format_phone_number('+44 20 7946 0958') == '+44 20 7946 0958'
