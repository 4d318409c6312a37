from marshmallow import fields, validate

from craftlance.extensions import ma
from craftlance.services.store import REVIEW_SORTS


class ReviewCreateSchema(ma.Schema):
    rating = fields.Float(required=True)
    comment = fields.String(allow_none=True)


class ReviewFilterSchema(ma.Schema):
    order_id = fields.String()
    reviewer_id = fields.String()
    min_rating = fields.Integer(validate=validate.Range(min=1, max=5))
    max_rating = fields.Integer(validate=validate.Range(min=1, max=5))
    has_comment = fields.Boolean()
    sort = fields.String(load_default="latest", validate=validate.OneOf(list(REVIEW_SORTS)))
    page = fields.Integer(load_default=1)
    limit = fields.Integer(load_default=10)


class ReviewSchema(ma.Schema):
    id = fields.String()
    order_id = fields.String()
    reviewer_id = fields.String()
    rating = fields.Integer()
    comment = fields.String(allow_none=True)
    created_at = fields.DateTime()
