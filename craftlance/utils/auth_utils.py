from collections import namedtuple

from flask_jwt_extended import get_jwt_identity

from craftlance.extensions import db
from craftlance.models.user import User, STAFF_ROLES
from craftlance.utils.exceptions import Forbidden, NotFound

Caller = namedtuple("Caller", ["id", "role"])


def current_caller():
    """Resolve the JWT identity of the current request to a Caller.

    Must run inside a ``@jwt_required()`` view.
    """
    uid = get_jwt_identity()
    user = db.session.get(User, uid)
    if not user:
        raise NotFound("User not found")
    if user.is_banned:
        raise Forbidden("Account is banned", {"reason": user.ban_reason})
    return Caller(user.id, user.role)


def require_role(caller, roles, message="Insufficient privileges"):
    if caller is None or caller.role not in roles:
        raise Forbidden(message)
    return caller


def is_staff(caller):
    return caller.role in STAFF_ROLES
