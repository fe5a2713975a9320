""" OpenAPI document for the Bookstore API, served as JSON at /api-docs """
from flask import Blueprint, jsonify

docs_bp = Blueprint('docs', __name__)


def _id_parameter(description):
    return {
        "in": "path",
        "name": "id",
        "required": True,
        "schema": {"type": "string"},
        "description": description
    }


def _json_body(schema_name):
    return {
        "required": True,
        "content": {
            "application/json": {"schema": {"$ref": f"#/components/schemas/{schema_name}"}}
        }
    }


def _json_response(description, schema):
    return {"description": description, "content": {"application/json": {"schema": schema}}}


def _ref(schema_name):
    return {"$ref": f"#/components/schemas/{schema_name}"}


ERROR_RESPONSE = _json_response("Error", _ref("Error"))
WRITE_SECURITY = [{"cookieAuth": []}]


def _crud_paths(tag, schema_name, singular):
    """The five CRUD operations, which books and authors share."""
    collection = {
        "get": {
            "summary": f"Get all {tag.lower()}",
            "tags": [tag],
            "responses": {
                "200": _json_response(f"List of {tag.lower()}",
                                      {"type": "array", "items": _ref(schema_name)}),
                "500": ERROR_RESPONSE
            }
        },
        "post": {
            "summary": f"Create a new {singular}",
            "tags": [tag],
            "security": WRITE_SECURITY,
            "requestBody": _json_body(schema_name),
            "responses": {
                "201": _json_response(f"{schema_name} created", _ref(schema_name)),
                "400": ERROR_RESPONSE,
                "401": ERROR_RESPONSE,
                "500": ERROR_RESPONSE
            }
        }
    }
    item = {
        "parameters": [_id_parameter(f"MongoDB ObjectId of the {singular}")],
        "get": {
            "summary": f"Get a {singular} by ID",
            "tags": [tag],
            "responses": {
                "200": _json_response(f"{schema_name} found", _ref(schema_name)),
                "404": ERROR_RESPONSE,
                "500": ERROR_RESPONSE
            }
        },
        "put": {
            "summary": f"Update a {singular}",
            "tags": [tag],
            "security": WRITE_SECURITY,
            "requestBody": _json_body(schema_name),
            "responses": {
                "200": _json_response(f"{schema_name} updated", _ref(schema_name)),
                "400": ERROR_RESPONSE,
                "401": ERROR_RESPONSE,
                "404": ERROR_RESPONSE,
                "500": ERROR_RESPONSE
            }
        },
        "delete": {
            "summary": f"Delete a {singular}",
            "tags": [tag],
            "security": WRITE_SECURITY,
            "responses": {
                "200": _json_response(f"{schema_name} deleted", _ref("Message")),
                "401": ERROR_RESPONSE,
                "404": ERROR_RESPONSE,
                "500": ERROR_RESPONSE
            }
        }
    }
    return collection, item


_books, _book = _crud_paths("Books", "Book", "book")
_authors, _author = _crud_paths("Authors", "Author", "author")

PROVIDER_PARAMETER = {
    "in": "path",
    "name": "provider",
    "required": True,
    "schema": {"type": "string", "enum": ["github", "google"]}
}

OPENAPI_SPEC = {
    "openapi": "3.0.0",
    "info": {
        "title": "Bookstore API",
        "version": "1.0.0",
        "description": "API for managing books, and authors in a simple bookstore."
    },
    "servers": [
        {
            "url": "http://localhost:{port}",
            "description": "Local server",
            "variables": {"port": {"default": "4000"}}
        }
    ],
    "tags": [
        {"name": "Books", "description": "Book management"},
        {"name": "Authors", "description": "Author management"},
        {"name": "Auth", "description": "OAuth login and session"}
    ],
    "paths": {
        "/api/books": _books,
        "/api/books/{id}": _book,
        "/api/authors": _authors,
        "/api/authors/{id}": _author,
        "/auth/{provider}": {
            "get": {
                "summary": "Start an OAuth login (redirects to the provider)",
                "tags": ["Auth"],
                "parameters": [PROVIDER_PARAMETER],
                "responses": {
                    "302": {"description": "Redirect to the provider"},
                    "404": ERROR_RESPONSE
                }
            }
        },
        "/auth/{provider}/callback": {
            "get": {
                "summary": "OAuth callback",
                "tags": ["Auth"],
                "parameters": [PROVIDER_PARAMETER],
                "responses": {
                    "200": _json_response("Logged in", {
                        "type": "object",
                        "properties": {
                            "message": {"type": "string"},
                            "user": _ref("User")
                        }
                    }),
                    "401": ERROR_RESPONSE,
                    "500": ERROR_RESPONSE
                }
            }
        },
        "/auth/me": {
            "get": {
                "summary": "Return the current authenticated user",
                "tags": ["Auth"],
                "security": WRITE_SECURITY,
                "responses": {
                    "200": _json_response("Current user", _ref("User")),
                    "401": ERROR_RESPONSE
                }
            }
        },
        "/auth/logout": {
            "get": {
                "summary": "Logout current user",
                "tags": ["Auth"],
                "responses": {
                    "200": _json_response("Logged out", _ref("Message")),
                    "500": ERROR_RESPONSE
                }
            }
        },
        "/auth/failure": {
            "get": {
                "summary": "OAuth failure route",
                "tags": ["Auth"],
                "responses": {"401": ERROR_RESPONSE}
            }
        }
    },
    "components": {
        "securitySchemes": {
            "cookieAuth": {"type": "apiKey", "in": "cookie", "name": "session"}
        },
        "schemas": {
            "Book": {
                "type": "object",
                "required": ["title", "authorId", "price", "publishedYear"],
                "properties": {
                    "_id": {"type": "string", "description": "MongoDB ObjectId"},
                    "title": {"type": "string", "example": "Flask for Beginners"},
                    "authorId": {
                        "type": "string",
                        "description": "Author ObjectId",
                        "example": "6750000000000000000000a1"
                    },
                    "price": {"type": "number", "example": 29.99},
                    "publishedYear": {"type": "integer", "example": 2023},
                    "genres": {
                        "type": "array",
                        "items": {"type": "string"},
                        "example": ["Programming", "Web Development"]
                    },
                    "inStock": {"type": "boolean", "example": True},
                    "rating": {
                        "type": "number",
                        "format": "float",
                        "minimum": 0,
                        "maximum": 5,
                        "example": 4.5
                    }
                }
            },
            "Author": {
                "type": "object",
                "required": ["name"],
                "properties": {
                    "_id": {"type": "string", "description": "MongoDB ObjectId"},
                    "name": {"type": "string", "example": "Alice Johnson"},
                    "bio": {
                        "type": "string",
                        "example": "Alice is a software engineer specializing in backend systems."
                    },
                    "website": {"type": "string", "example": "https://alicejohnson.dev"},
                    "country": {"type": "string", "example": "USA"}
                }
            },
            "User": {
                "type": "object",
                "properties": {
                    "id": {"type": "string"},
                    "provider": {"type": "string", "example": "github"},
                    "providerId": {"type": "string", "example": "42"},
                    "username": {"type": "string", "nullable": True, "example": "alicej"},
                    "displayName": {"type": "string", "example": "Alice Johnson"},
                    "email": {"type": "string", "example": "alice@example.com"}
                }
            },
            "Message": {
                "type": "object",
                "properties": {"message": {"type": "string"}}
            },
            "Error": {
                "type": "object",
                "properties": {"message": {"type": "string", "example": "Book not found"}}
            }
        }
    }
}


@docs_bp.route('', methods=['GET'])
def openapi_document():
    """Serve the OpenAPI document."""
    return jsonify(OPENAPI_SPEC), 200
