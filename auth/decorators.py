""" Session handling and the login gate for write routes """
import logging
from functools import wraps
from flask import session
from database import user_services
from errors import NotAuthenticatedError

UNAUTHORIZED_MESSAGE = "Unauthorized. Please log in to access this resource."


def login_user(user):
    """Bind the session to the user's local id after a successful login."""
    session.clear()
    session['user_id'] = str(user['_id'])
    # Permanent sessions expire after PERMANENT_SESSION_LIFETIME
    session.permanent = True


def logout_user():
    """Drop the session binding. The user record itself is kept."""
    session.clear()


def load_current_user():
    """
    Returns the user bound to this request's session, or None.
    A session that points at a user who no longer exists is cleared.
    """
    user_id = session.get('user_id')
    if user_id is None:
        return None

    user = user_services.find_user_by_id(user_id)
    if user is None:
        logging.warning("Session refers to unknown user %s; clearing it.", user_id)
        session.clear()
    return user


def login_required(f):
    """
    A decorator to ensure that a user is logged in.
    The user is handed to the view as the current_user keyword argument.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = load_current_user()
        if user is None:
            raise NotAuthenticatedError(UNAUTHORIZED_MESSAGE)

        kwargs['current_user'] = user
        return f(*args, **kwargs)
    return decorated_function
