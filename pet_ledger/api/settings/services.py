# pet_ledger/api/settings/services.py
import logging
from typing import Dict, Any

from pet_ledger.models.settings import AppSettings, settings_doc_id
from pet_ledger.utils.datetime_utils import DateTimeUtils

SETTINGS_SECTIONS = ('currency', 'field_options', 'display', 'notifications')


class SettingsService:
    """Per-user application settings. One document per user in 'settings'."""

    def __init__(self, db):
        self.db = db
        self.settings_ref = self.db.collection('settings')
        logging.info("SettingsService initialized.")

    def get_settings(self, user_id: str) -> AppSettings:
        """Return the user's settings, creating and storing the defaults on first access."""
        doc_ref = self.settings_ref.document(settings_doc_id(user_id))
        doc = doc_ref.get()
        if doc.exists:
            return AppSettings.from_dict(doc.to_dict())

        settings = AppSettings.default()
        doc_ref.set(DateTimeUtils.for_firestore(settings.to_dict()))
        logging.info(f"Default settings created for user {user_id}")
        return settings

    def update_settings(self, user_id: str, update_data: Dict[str, Any]) -> AppSettings:
        """
        Replace the given settings sections as a whole.
        Sections that are not part of update_data keep their stored values.
        """
        current = self.get_settings(user_id).to_dict()
        for section in SETTINGS_SECTIONS:
            if section in update_data:
                current[section] = update_data[section]
        current['updated_at'] = DateTimeUtils.now()

        settings = AppSettings.from_dict(current)
        self.settings_ref.document(settings_doc_id(user_id)).set(DateTimeUtils.for_firestore(settings.to_dict()))
        logging.info(f"Settings updated for user {user_id}")
        return settings

    def reset_settings(self, user_id: str) -> AppSettings:
        """Overwrite the user's settings with fresh defaults (new settings_id)."""
        settings = AppSettings.default()
        self.settings_ref.document(settings_doc_id(user_id)).set(DateTimeUtils.for_firestore(settings.to_dict()))
        logging.info(f"Settings reset to defaults for user {user_id}")
        return settings
