""" Book queries that need the authors collection to fill in author names """
from . import mongo_helper


def populate_authors(books, authors_collection):
    """
    Replace each book's authorId with {'_id', 'name'} of the referenced author.
    A reference to an author that no longer exists becomes None.
    """
    author_ids = {book.get('authorId') for book in books if book.get('authorId') is not None}
    if not author_ids:
        return books

    cursor = authors_collection.find({'_id': {'$in': list(author_ids)}}, {'name': 1})
    authors_by_id = {author['_id']: author for author in cursor}

    populated = []
    for book in books:
        book_copy = dict(book)
        author = authors_by_id.get(book.get('authorId'))
        book_copy['authorId'] = (
            {'_id': author['_id'], 'name': author.get('name')} if author else None
        )
        populated.append(book_copy)
    return populated


def find_all_books(books_collection, authors_collection):
    """Returns every book with its author populated."""
    books = mongo_helper.find_all_documents(books_collection)
    return populate_authors(books, authors_collection)


def find_book_by_id(book_id, books_collection, authors_collection):
    """Returns one book with its author populated, or None."""
    book = mongo_helper.find_document_by_id(book_id, books_collection)
    if book is None:
        return None
    return populate_authors([book], authors_collection)[0]
