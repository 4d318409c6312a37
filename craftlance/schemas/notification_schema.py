from marshmallow import fields, validate

from craftlance.extensions import ma
from craftlance.models.notification import NOTIFICATION_TYPES


class NotificationFilterSchema(ma.Schema):
    type = fields.String(validate=validate.OneOf(NOTIFICATION_TYPES))
    unread_only = fields.Boolean(load_default=False)
    before = fields.String()
    limit = fields.Integer(load_default=20)


class MarkReadSchema(ma.Schema):
    ids = fields.List(fields.String(), required=True)


class NotificationSchema(ma.Schema):
    id = fields.String()
    type = fields.String()
    title = fields.String()
    message = fields.String()
    link = fields.String(allow_none=True)
    read_at = fields.DateTime(allow_none=True)
    created_at = fields.DateTime()
