# pet_ledger/api/auth/services.py
import logging
from datetime import datetime, timezone

from pet_ledger.utils.datetime_utils import DateTimeUtils


class AuthService:
    """Keeps the blocklist of revoked app tokens in the document store."""

    def __init__(self, db):
        self.db = db
        self.revoked_tokens_ref = self.db.collection('revoked_tokens')

    def add_token_to_blocklist(self, jti: str, expires: datetime):
        token_data = {
            'revoked_at': DateTimeUtils.now(),
            'expires_at': expires
        }
        self.revoked_tokens_ref.document(jti).set(DateTimeUtils.for_firestore(token_data))

    def is_token_revoked(self, jwt_payload: dict) -> bool:
        jti = jwt_payload['jti']
        return self.revoked_tokens_ref.document(jti).get().exists

    def logout_user(self, access_jti: str, access_exp: int, refresh_jti: str, refresh_exp: int):
        """Revoke both the access and the refresh token."""
        self.add_token_to_blocklist(access_jti, datetime.fromtimestamp(access_exp, tz=timezone.utc))
        self.add_token_to_blocklist(refresh_jti, datetime.fromtimestamp(refresh_exp, tz=timezone.utc))
        logging.info(f"User logged out. JTI: {access_jti[:8]}..., {refresh_jti[:8]}...")
