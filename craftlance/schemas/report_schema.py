from marshmallow import fields, validate

from craftlance.extensions import ma
from craftlance.models.report import REPORT_STATUSES


class ReportCreateSchema(ma.Schema):
    reported_id = fields.String(required=True)
    reason = fields.String(required=True, validate=validate.Length(min=10, max=1000))
    order_id = fields.String(allow_none=True)
    message_id = fields.String(allow_none=True)


class ReportResolveSchema(ma.Schema):
    action = fields.String(required=True, validate=validate.OneOf(["approve", "reject"]))
    comment = fields.String(allow_none=True, validate=validate.Length(max=1000))


class ReportFilterSchema(ma.Schema):
    status = fields.String(validate=validate.OneOf(REPORT_STATUSES))


class ReportSchema(ma.Schema):
    id = fields.String()
    reporter_id = fields.String()
    reported_id = fields.String()
    order_id = fields.String(allow_none=True)
    message_id = fields.String(allow_none=True)
    reason = fields.String()
    status = fields.String()
    admin_comment = fields.String(allow_none=True)
    resolved_by = fields.String(allow_none=True)
    resolved_at = fields.DateTime(allow_none=True)
    created_at = fields.DateTime()
