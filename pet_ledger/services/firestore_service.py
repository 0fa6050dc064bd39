# pet_ledger/services/firestore_service.py
import os
import logging
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import credentials, firestore
from flask import Flask

from pet_ledger.services.json_store import JsonDocumentStore
from pet_ledger.utils.datetime_utils import DateTimeUtils


def init_firebase(app: Flask) -> None:
    """Initialize the Firebase Admin SDK once per process."""
    if firebase_admin._apps:
        return

    cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
    options = {'projectId': app.config['FIREBASE_PROJECT_ID']}
    if cred_path:
        if not os.path.exists(cred_path):
            raise FileNotFoundError(f"Firebase credentials file not found: {cred_path}")
        firebase_admin.initialize_app(credentials.Certificate(cred_path), options)
    else:
        # application default credentials (e.g. on Cloud Run)
        firebase_admin.initialize_app(options=options)
    logging.info(f"Firebase Admin initialized for project {options['projectId']}")


def init_document_store(app: Flask):
    """
    Return the document store selected by DATA_BACKEND.

    'firestore' returns the Firestore client; 'json' returns the JSON file
    store, which exposes the same collection/document calls.
    """
    backend = app.config.get('DATA_BACKEND', 'json')
    if backend == 'firestore':
        init_firebase(app)
        return firestore.client()
    if backend == 'json':
        return JsonDocumentStore(app.config['DATA_DIR'])
    raise ValueError(f"Unknown DATA_BACKEND '{backend}'. Use 'firestore' or 'json'.")


def copy_collection(source, target, collection_name: str, default_user_id: Optional[str] = None) -> int:
    """
    Copy every document of a collection from one store to another.
    Documents without an owner get default_user_id when one is given.
    Returns the number of documents copied.
    """
    copied = 0
    target_ref = target.collection(collection_name)
    for snapshot in source.collection(collection_name).stream():
        data: Dict[str, Any] = snapshot.to_dict()
        if default_user_id and collection_name == 'animals' and not data.get('user_id'):
            data['user_id'] = default_user_id
        for key in ('created_at', 'updated_at'):
            if data.get(key):
                data[key] = DateTimeUtils.to_datetime(data[key])
        try:
            target_ref.document(snapshot.id).set(DateTimeUtils.for_firestore(data))
            copied += 1
            logging.info(f"Copied {collection_name}/{snapshot.id}")
        except Exception as e:
            logging.error(f"Failed to copy {collection_name}/{snapshot.id}: {e}", exc_info=True)
    return copied
