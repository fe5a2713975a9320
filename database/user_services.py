""" Contains all mongoDB user service functions """
import logging
from flask import current_app
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError
from . import mongo_helper

IDENTITY_INDEX_NAME = 'provider_identity_unique'


def ensure_user_indexes(users_collection):
    """
    One local user per external identity.
    The unique index is what makes the upsert in resolve_user race free.
    """
    users_collection.create_index(
        [('provider', ASCENDING), ('providerId', ASCENDING)],
        unique=True,
        name=IDENTITY_INDEX_NAME
    )


def get_users_collection():
    """Returns the users collection, creating its indexes the first time."""
    users_collection = mongo_helper.get_collection(mongo_helper.USERS_COLLECTION)
    if not current_app.extensions.get('user_indexes_ready'):
        ensure_user_indexes(users_collection)
        current_app.extensions['user_indexes_ready'] = True
    return users_collection


def same_instant(stored, expected):
    """pymongo hands dates back naive (UTC) unless the client is tz_aware."""
    if stored is None:
        return False
    return stored.replace(tzinfo=None) == expected.replace(tzinfo=None)


def resolve_user(provider, profile):
    """
    Finds the user for (provider, profile.id) or creates one.

    This is a single upsert rather than find-then-insert: two first logins
    with the same identity can't both insert. Profile fields are only written
    when the user is created.
    """
    users_collection = get_users_collection()
    # BSON dates keep milliseconds only
    now = mongo_helper.utcnow()
    now = now.replace(microsecond=now.microsecond // 1000 * 1000)
    identity = {'provider': provider, 'providerId': profile.id}

    update_doc = {
        '$setOnInsert': {
            'username': profile.username,
            'displayName': profile.display_name,
            'email': profile.email,
            'avatarUrl': profile.avatar_url,
            'createdAt': now,
        },
        '$set': {
            'updatedAt': now,
            'lastLogin': now,
        }
    }

    try:
        user = users_collection.find_one_and_update(
            identity,
            update_doc,
            upsert=True,
            return_document=ReturnDocument.AFTER
        )
    except DuplicateKeyError:
        # Another request inserted the same identity between our match and insert
        logging.info("Concurrent first login for %s user %s", provider, profile.id)
        user = users_collection.find_one(identity)
    else:
        # createdAt only equals now when this upsert did the insert
        if user is not None and same_instant(user.get('createdAt'), now):
            logging.info("Created %s user %s", provider, user['_id'])

    return user


def find_user_by_id(user_id):
    """
    Find a single user document by their mongoDB _id field.
    """
    object_id = mongo_helper.to_object_id(user_id)
    if object_id is None:
        return None
    users_collection = get_users_collection()
    return users_collection.find_one({'_id': object_id})


def user_projection(user):
    """The public view of a user, shared by the callback and /auth/me."""
    return {
        'id': str(user['_id']),
        'provider': user.get('provider'),
        'providerId': user.get('providerId'),
        'username': user.get('username'),
        'displayName': user.get('displayName'),
        'email': user.get('email'),
    }
