from marshmallow import EXCLUDE, fields, validate

from craftlance.extensions import ma

AMOUNT_PATTERN = r"^\d+(\.\d{1,2})?$"


class WebhookPayloadSchema(ma.Schema):
    class Meta:
        # the gateway may add fields we do not use
        unknown = EXCLUDE

    data = fields.String(required=True, validate=validate.Length(min=1, max=50))
    amount = fields.String(
        required=True,
        validate=validate.Regexp(AMOUNT_PATTERN, error="Amount must have at most 2 decimal places"),
    )
    card_number = fields.String(required=True, validate=validate.Length(min=1, max=64))
    transaction_id = fields.String(validate=validate.Length(min=1, max=128))


class PaymentInitSchema(ma.Schema):
    order_id = fields.String(required=True)
