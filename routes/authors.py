""" Author endpoints. Reads are public, writes need a logged in user. """
import logging
from flask import Blueprint, jsonify
from auth.decorators import login_required
from database import mongo_helper
from errors import ResourceNotFoundError
from .validation import validate_author

authors_bp = Blueprint('authors', __name__)


@authors_bp.route('', methods=['GET'])
def get_all_authors():
    authors = mongo_helper.find_all_documents(mongo_helper.get_authors_collection())
    return jsonify([mongo_helper.serialize_document(author) for author in authors]), 200


@authors_bp.route('/<string:author_id>', methods=['GET'])
def get_author(author_id):
    author = mongo_helper.find_document_by_id(author_id, mongo_helper.get_authors_collection())
    if author is None:
        raise ResourceNotFoundError("Author not found")
    return jsonify(mongo_helper.serialize_document(author)), 200


@authors_bp.route('', methods=['POST'])
@login_required
@validate_author
def create_author(current_user, payload):
    created = mongo_helper.insert_document(payload, mongo_helper.get_authors_collection())
    logging.info("User %s created author %s", current_user['_id'], created['_id'])
    return jsonify(mongo_helper.serialize_document(created)), 201


@authors_bp.route('/<string:author_id>', methods=['PUT'])
@login_required
@validate_author
def update_author(author_id, current_user, payload):
    updated = mongo_helper.update_document_by_id(
        author_id, payload, mongo_helper.get_authors_collection()
    )
    if updated is None:
        raise ResourceNotFoundError("Author not found")
    logging.info("User %s updated author %s", current_user['_id'], author_id)
    return jsonify(mongo_helper.serialize_document(updated)), 200


@authors_bp.route('/<string:author_id>', methods=['DELETE'])
@login_required
def delete_author(author_id, current_user):
    # Books keep their authorId; reads show the missing author as null
    deleted = mongo_helper.delete_document_by_id(author_id, mongo_helper.get_authors_collection())
    if deleted is None:
        raise ResourceNotFoundError("Author not found")
    logging.info("User %s deleted author '%s'", current_user['_id'], deleted.get('name'))
    return jsonify({"message": "Author deleted"}), 200
