# pylint: disable=missing-docstring
import pytest
from bson.objectid import ObjectId
from pymongo import ReturnDocument
from config import ProviderConfig, Settings
from app import create_app


class FakeUsersCollection:
    """
    Just enough of a pymongo collection for the user directory:
    exact-match filters, upsert with $setOnInsert/$set, and create_index.
    """

    def __init__(self):
        self.documents = []
        self.indexes = []

    @staticmethod
    def _matches(document, query_filter):
        return all(document.get(key) == value for key, value in query_filter.items())

    def create_index(self, keys, **kwargs):
        self.indexes.append((keys, kwargs))
        return kwargs.get('name')

    def find_one(self, query_filter):
        for document in self.documents:
            if self._matches(document, query_filter):
                return dict(document)
        return None

    def find_one_and_update(self, query_filter, update, upsert=False,
                            return_document=ReturnDocument.BEFORE):
        for document in self.documents:
            if self._matches(document, query_filter):
                before = dict(document)
                document.update(update.get('$set', {}))
                return dict(document) if return_document == ReturnDocument.AFTER else before
        if not upsert:
            return None
        document = {'_id': ObjectId(), **query_filter}
        document.update(update.get('$setOnInsert', {}))
        document.update(update.get('$set', {}))
        self.documents.append(document)
        return dict(document) if return_document == ReturnDocument.AFTER else None


@pytest.fixture(name="settings")
def settings_fixture():
    return Settings(
        mongo_uri='mongodb://localhost:27017/',
        db_name='test_bookstore',
        secret_key='a-secure-key-for-testing-only',
        providers={
            'github': ProviderConfig(
                name='github',
                client_id='github-client-id',
                client_secret='github-client-secret',
                callback_url='http://localhost:4000/auth/github/callback'
            ),
            # Google has no credentials, so it is disabled
            'google': ProviderConfig(name='google'),
        }
    )


@pytest.fixture(name="app")
def app_fixture(settings):
    flask_app = create_app(settings)
    flask_app.config['TESTING'] = True
    return flask_app


@pytest.fixture(name="client")
def client_fixture(app):
    return app.test_client()


@pytest.fixture(name="users_collection")
def users_collection_fixture(mocker):
    """Swap the users collection for an in-memory fake."""
    fake_collection = FakeUsersCollection()
    mocker.patch(
        'database.user_services.get_users_collection',
        return_value=fake_collection
    )
    return fake_collection


# This client fixture is logged in as a fake user
@pytest.fixture(name="logged_in_client")
def logged_in_client_fixture(client, mocker):
    fake_user_id = ObjectId()
    fake_user_doc = {
        '_id': fake_user_id,
        'provider': 'github',
        'providerId': '1001',
        'username': 'editor',
        'displayName': 'Test Editor',
        'email': 'editor@test.com'
    }

    # Mock the function that the @login_required decorator calls
    mocker.patch(
        'auth.decorators.user_services.find_user_by_id',
        return_value=fake_user_doc
    )

    # Use the client's session_transaction to set the cookie
    with client.session_transaction() as sess:
        sess['user_id'] = str(fake_user_id)

    yield client
