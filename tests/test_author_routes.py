# pylint: disable=missing-docstring
from unittest.mock import MagicMock
from bson.objectid import ObjectId
import pytest


@pytest.fixture(name="authors_collection")
def authors_collection_fixture(mocker):
    mock_authors_collection = MagicMock()
    mocker.patch(
        'database.mongo_helper.get_authors_collection',
        return_value=mock_authors_collection
    )
    return mock_authors_collection


def test_get_all_authors(client, authors_collection):
    author_id = ObjectId()
    authors_collection.find.return_value = [{'_id': author_id, 'name': 'Alice Johnson'}]

    response = client.get('/api/authors')

    assert response.status_code == 200
    assert response.get_json() == [{'_id': str(author_id), 'name': 'Alice Johnson'}]
    authors_collection.find.assert_called_once_with({})


def test_get_author_not_found(client, authors_collection):
    authors_collection.find_one.return_value = None

    response = client.get(f'/api/authors/{ObjectId()}')

    assert response.status_code == 404
    assert response.get_json() == {'message': 'Author not found'}


def test_get_author(client, authors_collection):
    author_id = ObjectId()
    authors_collection.find_one.return_value = {'_id': author_id, 'name': 'Alice Johnson'}

    response = client.get(f'/api/authors/{author_id}')

    assert response.status_code == 200
    assert response.get_json()['name'] == 'Alice Johnson'


@pytest.mark.parametrize("method, path", [
    ("post", "/api/authors"),
    ("put", f"/api/authors/{ObjectId()}"),
    ("delete", f"/api/authors/{ObjectId()}"),
])
def test_author_writes_without_session_are_unauthorized(client, authors_collection, method, path):
    response = getattr(client, method)(path, json={'name': 'Alice Johnson'})

    assert response.status_code == 401
    authors_collection.insert_one.assert_not_called()
    authors_collection.find_one_and_update.assert_not_called()
    authors_collection.find_one_and_delete.assert_not_called()


def test_create_author_persists(logged_in_client, authors_collection):
    """
    Regression: the write must go through the real authors collection
    and actually be inserted.
    """
    new_id = ObjectId()
    authors_collection.insert_one.return_value.inserted_id = new_id
    body = {
        'name': 'Alice Johnson',
        'bio': 'Backend engineer.',
        'website': 'https://alicejohnson.dev',
        'country': 'USA',
        'favouriteColour': 'green'
    }

    response = logged_in_client.post('/api/authors', json=body)

    assert response.status_code == 201
    inserted = authors_collection.insert_one.call_args[0][0]
    assert inserted['name'] == 'Alice Johnson'
    assert inserted['country'] == 'USA'
    assert 'favouriteColour' not in inserted
    assert response.get_json()['_id'] == str(new_id)


@pytest.mark.parametrize("body, message", [
    ({}, "Missing required fields: name"),
    ({'name': '   '}, "Missing required fields: name"),
    ({'name': 42}, "Field name must be a string"),
    ({'name': 'Alice', 'website': 123}, "Field website must be a string"),
])
def test_create_author_validation(logged_in_client, authors_collection, body, message):
    response = logged_in_client.post('/api/authors', json=body)

    assert response.status_code == 400
    assert response.get_json() == {'message': message}
    authors_collection.insert_one.assert_not_called()


def test_update_author(logged_in_client, authors_collection):
    author_id = ObjectId()
    authors_collection.find_one_and_update.return_value = {'_id': author_id, 'name': 'A. Johnson'}

    response = logged_in_client.put(f'/api/authors/{author_id}', json={'name': 'A. Johnson'})

    assert response.status_code == 200
    assert response.get_json()['name'] == 'A. Johnson'
    args = authors_collection.find_one_and_update.call_args[0]
    assert args[0] == {'_id': author_id}
    assert args[1]['$set']['name'] == 'A. Johnson'


def test_update_author_not_found(logged_in_client, authors_collection):
    authors_collection.find_one_and_update.return_value = None

    response = logged_in_client.put(f'/api/authors/{ObjectId()}', json={'name': 'Nobody'})

    assert response.status_code == 404
    assert response.get_json() == {'message': 'Author not found'}


def test_delete_author(logged_in_client, authors_collection):
    author_id = ObjectId()
    authors_collection.find_one_and_delete.return_value = {'_id': author_id, 'name': 'Alice'}

    response = logged_in_client.delete(f'/api/authors/{author_id}')

    assert response.status_code == 200
    assert response.get_json() == {'message': 'Author deleted'}
    authors_collection.find_one_and_delete.assert_called_once_with({'_id': author_id})
