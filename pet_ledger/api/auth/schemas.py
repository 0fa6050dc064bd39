# pet_ledger/api/auth/schemas.py
from marshmallow import Schema, fields


class SessionRequestSchema(Schema):
    """POST /api/auth/session request body."""
    id_token = fields.Str(required=True, error_messages={"required": "An identity provider ID token (id_token) is required."})


class LogoutRequestSchema(Schema):
    access_token = fields.Str(required=True)
    refresh_token = fields.Str(required=True)
