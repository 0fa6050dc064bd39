# pet_ledger/commands.py
import logging

import click
from firebase_admin import firestore
from flask import Flask, current_app
from flask.cli import with_appcontext

from pet_ledger.services.firestore_service import init_firebase, copy_collection
from pet_ledger.services.json_store import JsonDocumentStore


@click.command('migrate-to-firestore')
@click.option('--user-id', default=None, help='Owner assigned to animals stored without a user_id.')
@with_appcontext
def migrate_to_firestore(user_id):
    """Copy every collection of the JSON file store (DATA_DIR) into Firestore."""
    source = JsonDocumentStore(current_app.config['DATA_DIR'])
    init_firebase(current_app)
    target = firestore.client()

    total = 0
    for collection in source.collections():
        copied = copy_collection(source, target, collection.name, default_user_id=user_id)
        click.echo(f"{collection.name}: {copied} document(s) copied")
        total += copied

    logging.info(f"Migration to Firestore finished: {total} document(s)")
    click.echo(f"Done. {total} document(s) copied to project {current_app.config['FIREBASE_PROJECT_ID']}.")


def register_commands(app: Flask) -> None:
    app.cli.add_command(migrate_to_firestore)
