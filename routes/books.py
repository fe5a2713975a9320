""" Book endpoints. Reads are public, writes need a logged in user. """
import logging
from flask import Blueprint, jsonify
from auth.decorators import login_required
from database import book_services, mongo_helper
from errors import ResourceNotFoundError
from .validation import validate_book

books_bp = Blueprint('books', __name__)

BOOK_DEFAULTS = {
    'genres': [],
    'inStock': True,
    'rating': 0,
}


# ----------- GET section ------------------
@books_bp.route('', methods=['GET'])
def get_all_books():
    """Retrieve all books, each with its author's name."""
    books = book_services.find_all_books(
        mongo_helper.get_books_collection(),
        mongo_helper.get_authors_collection()
    )
    return jsonify([mongo_helper.serialize_document(book) for book in books]), 200


@books_bp.route('/<string:book_id>', methods=['GET'])
def get_book(book_id):
    """
    Retrieve a specific book by its unique ID.
    """
    book = book_services.find_book_by_id(
        book_id,
        mongo_helper.get_books_collection(),
        mongo_helper.get_authors_collection()
    )
    if book is None:
        raise ResourceNotFoundError("Book not found")
    return jsonify(mongo_helper.serialize_document(book)), 200


# ----------- POST section ------------------
@books_bp.route('', methods=['POST'])
@login_required
@validate_book
def create_book(current_user, payload):
    """Function to add a new book to the collection."""
    new_book = {**BOOK_DEFAULTS, **payload}
    created = mongo_helper.insert_document(new_book, mongo_helper.get_books_collection())
    logging.info("User %s created book %s", current_user['_id'], created['_id'])
    return jsonify(mongo_helper.serialize_document(created)), 201


# ----------- PUT section ------------------
@books_bp.route('/<string:book_id>', methods=['PUT'])
@login_required
@validate_book
def update_book(book_id, current_user, payload):
    """
    Update a book by its unique ID using JSON from the request body.
    Only the fields present in the body are changed.
    """
    updated = mongo_helper.update_document_by_id(
        book_id, payload, mongo_helper.get_books_collection()
    )
    if updated is None:
        raise ResourceNotFoundError("Book not found")
    logging.info("User %s updated book %s", current_user['_id'], book_id)
    return jsonify(mongo_helper.serialize_document(updated)), 200


# ----------- DELETE section ------------------
@books_bp.route('/<string:book_id>', methods=['DELETE'])
@login_required
def delete_book(book_id, current_user):
    """
    Delete a book or return error if not found.
    """
    deleted = mongo_helper.delete_document_by_id(book_id, mongo_helper.get_books_collection())
    if deleted is None:
        raise ResourceNotFoundError("Book not found")
    logging.info("User %s deleted book '%s'", current_user['_id'], deleted.get('title'))
    return jsonify({"message": "Book deleted"}), 200
