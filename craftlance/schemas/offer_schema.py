from marshmallow import fields

from craftlance.extensions import ma


class OfferCreateSchema(ma.Schema):
    price = fields.Float(required=True)
    delivery_time = fields.Integer(required=True, strict=True)
    message = fields.String(required=True)


class OfferSchema(ma.Schema):
    id = fields.String()
    order_id = fields.String()
    seller_id = fields.String()
    price = fields.Float()
    delivery_time = fields.Integer()
    message = fields.String(allow_none=True)
    status = fields.String()
    created_at = fields.DateTime()
