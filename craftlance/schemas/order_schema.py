from marshmallow import fields, validate

from craftlance.extensions import ma
from craftlance.models.order import ORDER_CATEGORIES, ORDER_STATUSES


class OrderCreateSchema(ma.Schema):
    title = fields.String(required=True)
    description = fields.String(required=True)
    category = fields.String(required=True, validate=validate.OneOf(ORDER_CATEGORIES))
    budget = fields.Float(required=True)


class OrderFilterSchema(ma.Schema):
    q = fields.String()
    category = fields.String(validate=validate.OneOf(ORDER_CATEGORIES))
    status = fields.String(validate=validate.OneOf(ORDER_STATUSES))
    min_budget = fields.Float()
    max_budget = fields.Float()
    date_from = fields.String()
    date_to = fields.String()
    page = fields.Integer(load_default=1)
    limit = fields.Integer(load_default=10)


class OrderStatusSchema(ma.Schema):
    status = fields.String(required=True, validate=validate.OneOf(ORDER_STATUSES))


class DisputeSchema(ma.Schema):
    reason = fields.String(validate=validate.Length(max=1000))


class OrderSchema(ma.Schema):
    id = fields.String()
    title = fields.String()
    description = fields.String()
    category = fields.String()
    budget = fields.Float()
    status = fields.String()
    buyer_id = fields.String()
    payment_status = fields.String()
    paid_amount = fields.Float(allow_none=True)
    paid_at = fields.DateTime(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime(allow_none=True)
