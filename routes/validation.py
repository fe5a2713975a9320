""" Request body validation for the book and author write routes """
from functools import wraps
from flask import request
from werkzeug.exceptions import UnsupportedMediaType
from database import mongo_helper
from errors import ValidationError

BOOK_REQUIRED_FIELDS = ('title', 'authorId', 'price', 'publishedYear')
BOOK_OPTIONAL_FIELDS = ('genres', 'inStock', 'rating')
AUTHOR_REQUIRED_FIELDS = ('name',)
AUTHOR_OPTIONAL_FIELDS = ('bio', 'website', 'country')


def is_number(value):
    # bool is a subclass of int, but true is not a price
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def get_json_body():
    """Return the request body as a dict or raise the matching HTTP error."""
    if not request.is_json:
        raise UnsupportedMediaType("Request must be JSON")
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("JSON payload must be an object")
    return body


def check_required(body, required_fields):
    missing_fields = [field for field in required_fields if is_blank(body.get(field))]
    if missing_fields:
        raise ValidationError(f"Missing required fields: {', '.join(missing_fields)}")


def clean_book(body):
    """
    Check a book body and return only the fields a book may have.
    """
    check_required(body, BOOK_REQUIRED_FIELDS)

    for field in ('title', 'authorId'):
        if not isinstance(body[field], str):
            raise ValidationError(f"Field {field} must be a string")
    author_id = mongo_helper.to_object_id(body['authorId'])
    if author_id is None:
        raise ValidationError("Field authorId must be a valid id")

    for field in ('price', 'publishedYear'):
        if not is_number(body[field]):
            raise ValidationError(f"Field {field} must be a number")

    book = {
        'title': body['title'],
        'authorId': author_id,
        'price': body['price'],
        'publishedYear': body['publishedYear'],
    }

    if body.get('genres') is not None:
        genres = body['genres']
        if not isinstance(genres, list) or not all(isinstance(genre, str) for genre in genres):
            raise ValidationError("Field genres must be a list of strings")
        book['genres'] = genres

    if body.get('inStock') is not None:
        if not isinstance(body['inStock'], bool):
            raise ValidationError("Field inStock must be a boolean")
        book['inStock'] = body['inStock']

    if body.get('rating') is not None:
        rating = body['rating']
        if not is_number(rating) or not 0 <= rating <= 5:
            raise ValidationError("Field rating must be a number between 0 and 5")
        book['rating'] = rating

    return book


def clean_author(body):
    """
    Check an author body and return only the fields an author may have.
    """
    check_required(body, AUTHOR_REQUIRED_FIELDS)
    if not isinstance(body['name'], str):
        raise ValidationError("Field name must be a string")

    author = {'name': body['name']}
    for field in AUTHOR_OPTIONAL_FIELDS:
        if body.get(field) is None:
            continue
        if not isinstance(body[field], str):
            raise ValidationError(f"Field {field} must be a string")
        author[field] = body[field]
    return author


def validate_book(f):
    """Pass the validated book to the view as the payload keyword argument."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        kwargs['payload'] = clean_book(get_json_body())
        return f(*args, **kwargs)
    return decorated_function


def validate_author(f):
    """Pass the validated author to the view as the payload keyword argument."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        kwargs['payload'] = clean_author(get_json_body())
        return f(*args, **kwargs)
    return decorated_function
