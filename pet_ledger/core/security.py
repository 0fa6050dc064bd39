# pet_ledger/core/security.py
import logging
import jwt
from flask import current_app
from firebase_admin import auth as firebase_auth

DEV_FALLBACK_USER_ID = 'dev-user'


def verify_id_token(id_token: str) -> str:
    """
    Resolve the user id behind an identity-provider ID token.

    With VERIFY_ID_TOKENS on, the token is verified by Firebase Auth. In
    development the payload is read without checking the signature and the
    id is taken from 'user_id', 'sub' or 'uid', falling back to 'dev-user'.

    Raises:
        PermissionError: the token was rejected by the identity provider
    """
    if current_app.config.get('VERIFY_ID_TOKENS', True):
        try:
            decoded = firebase_auth.verify_id_token(id_token)
        except (ValueError, firebase_auth.InvalidIdTokenError, firebase_auth.ExpiredIdTokenError,
                firebase_auth.RevokedIdTokenError) as e:
            logging.warning(f"ID token rejected: {e}")
            raise PermissionError("Invalid or expired ID token")
        return decoded['uid']

    try:
        payload = jwt.decode(id_token, options={"verify_signature": False})
    except jwt.PyJWTError as e:
        logging.warning(f"Could not decode development ID token, using fallback user: {e}")
        return DEV_FALLBACK_USER_ID

    user_id = payload.get('user_id') or payload.get('sub') or payload.get('uid') or DEV_FALLBACK_USER_ID
    logging.info(f"Development mode: resolved user id {user_id} without verification")
    return str(user_id)
