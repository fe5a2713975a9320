"""Module containing pymongo helper functions shared by every collection."""
from datetime import datetime, timezone
from bson.objectid import ObjectId
from flask import current_app
from pymongo import MongoClient, ReturnDocument
from pymongo.errors import ConnectionFailure

BOOKS_COLLECTION = 'books'
AUTHORS_COLLECTION = 'authors'
USERS_COLLECTION = 'users'


def get_mongo_client():
    """
    Return the app's MongoClient, creating it on first use.
    The client is a connection pool, so one per app is enough.
    """
    client = current_app.extensions.get('mongo_client')
    if client is None:
        try:
            client = MongoClient(current_app.config['MONGO_URI'], serverSelectionTimeoutMS=5000)
        except ConnectionFailure as e:
            raise ConnectionFailure(f'Could not connect to MongoDB: {str(e)}') from e
        current_app.extensions['mongo_client'] = client
    return client


def get_collection(name):
    """Return a collection from the configured database."""
    db = get_mongo_client()[current_app.config['DB_NAME']]
    return db[name]


def get_books_collection():
    return get_collection(BOOKS_COLLECTION)


def get_authors_collection():
    return get_collection(AUTHORS_COLLECTION)


def utcnow():
    return datetime.now(timezone.utc)


def to_object_id(value):
    """
    Convert a string id to a BSON ObjectId.
    Returns None for anything that is not a valid id, so callers can answer 404.
    """
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def serialize_document(document):
    """
    Make a MongoDB document JSON serializable:
    ObjectIds become hex strings and datetimes become ISO 8601 strings.
    """
    if document is None:
        return None

    serialized = {}
    for key, value in document.items():
        if isinstance(value, ObjectId):
            serialized[key] = str(value)
        elif isinstance(value, datetime):
            serialized[key] = value.isoformat()
        elif isinstance(value, dict):
            serialized[key] = serialize_document(value)
        elif isinstance(value, list):
            serialized[key] = [
                serialize_document(item) if isinstance(item, dict)
                else str(item) if isinstance(item, ObjectId)
                else item
                for item in value
            ]
        else:
            serialized[key] = value
    return serialized


def find_all_documents(collection):
    """Returns a list of every document in the collection."""
    return list(collection.find({}))


def find_document_by_id(document_id, collection):
    """
    Returns the document with the given _id, or None if the id
    is malformed or nothing matches.
    """
    object_id = to_object_id(document_id)
    if object_id is None:
        return None
    return collection.find_one({'_id': object_id})


def insert_document(document, collection):
    """
    Stamp the document with createdAt/updatedAt, insert it,
    and return it with its new _id.
    """
    now = utcnow()
    new_document = dict(document)
    new_document['createdAt'] = now
    new_document['updatedAt'] = now

    result = collection.insert_one(new_document)
    new_document['_id'] = result.inserted_id
    return new_document


def update_document_by_id(document_id, changes, collection):
    """
    Set the given fields on the document with the given _id
    and return the updated document if it exists or None otherwise.
    """
    object_id = to_object_id(document_id)
    if object_id is None:
        return None

    update_fields = dict(changes)
    update_fields.pop('_id', None)
    update_fields['updatedAt'] = utcnow()

    return collection.find_one_and_update(
        {'_id': object_id},
        {'$set': update_fields},
        # This option tells MongoDB to return the document AFTER the update
        return_document=ReturnDocument.AFTER
    )


def delete_document_by_id(document_id, collection):
    """
    Deletes the document with the given _id and returns it,
    or None if nothing was deleted.
    """
    object_id = to_object_id(document_id)
    if object_id is None:
        return None
    return collection.find_one_and_delete({'_id': object_id})
