# pet_ledger/services/test_json_store.py
import json
import os
from datetime import datetime, timezone

import pytest

from pet_ledger.services.json_store import JsonDocumentStore
from pet_ledger.services.firestore_service import copy_collection


@pytest.fixture
def store(tmp_path):
    return JsonDocumentStore(str(tmp_path / 'store'))


def test_missing_document(store):
    snapshot = store.collection('animals').document('nope').get()
    assert not snapshot.exists
    assert snapshot.to_dict() is None


def test_set_get_and_file_layout(store):
    ref = store.collection('animals').document('a1')
    ref.set({'name': 'Biscuit', 'created_at': datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)})

    snapshot = ref.get()
    assert snapshot.exists
    assert snapshot.id == 'a1'
    # timestamps are stored as ISO strings
    assert snapshot.to_dict() == {'name': 'Biscuit', 'created_at': '2024-01-15T10:30:00Z'}

    with open(os.path.join(store.data_dir, 'animals.json'), encoding='utf-8') as f:
        assert json.load(f)['a1']['name'] == 'Biscuit'


def test_snapshot_is_a_copy(store):
    ref = store.collection('animals').document('a1')
    ref.set({'name': 'Biscuit', 'tags': ['a']})

    data = ref.get().to_dict()
    data['tags'].append('b')
    assert ref.get().to_dict()['tags'] == ['a']


def test_update_and_delete(store):
    ref = store.collection('settings').document('s1')
    with pytest.raises(FileNotFoundError):
        ref.update({'x': 1})

    ref.set({'x': 1, 'y': 2})
    ref.update({'y': 3})
    assert ref.get().to_dict() == {'x': 1, 'y': 3}

    ref.delete()
    assert not ref.get().exists
    ref.delete()  # deleting a missing document is a no-op


def test_where_stream(store):
    animals = store.collection('animals')
    animals.document('a1').set({'user_id': 'u1', 'species': 'dog'})
    animals.document('a2').set({'user_id': 'u1', 'species': 'cat'})
    animals.document('a3').set({'user_id': 'u2', 'species': 'dog'})

    mine = {s.id for s in animals.where('user_id', '==', 'u1').stream()}
    assert mine == {'a1', 'a2'}

    dogs_of_u1 = [s.id for s in animals.where('user_id', '==', 'u1').where('species', '==', 'dog').stream()]
    assert dogs_of_u1 == ['a1']

    assert {s.id for s in animals.where('species', 'in', ['cat', 'horse']).stream()} == {'a2'}
    assert {s.id for s in animals.where('user_id', '!=', 'u1').stream()} == {'a3'}

    with pytest.raises(ValueError):
        animals.where('user_id', '>=', 'u1')


def test_collections(store):
    store.collection('settings').document('s1').set({})
    store.collection('animals').document('a1').set({})
    assert [c.name for c in store.collections()] == ['animals', 'settings']


def test_copy_collection_assigns_owner(tmp_path):
    source = JsonDocumentStore(str(tmp_path / 'source'))
    target = JsonDocumentStore(str(tmp_path / 'target'))
    source.collection('animals').document('a1').set({'name': 'Old', 'created_at': '2023-01-01T00:00:00Z'})
    source.collection('animals').document('a2').set({'name': 'Owned', 'user_id': 'u9'})

    copied = copy_collection(source, target, 'animals', default_user_id='u1')

    assert copied == 2
    assert target.collection('animals').document('a1').get().to_dict() == {
        'name': 'Old', 'created_at': '2023-01-01T00:00:00Z', 'user_id': 'u1'
    }
    assert target.collection('animals').document('a2').get().to_dict()['user_id'] == 'u9'
