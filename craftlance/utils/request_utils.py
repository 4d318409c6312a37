from dateutil import parser
from flask import request

from craftlance.utils.exceptions import ValidationError


def load_body(schema):
    """Validate the JSON body; marshmallow errors are rendered as 422."""
    return schema.load(request.get_json(silent=True) or {})


def load_args(schema):
    return schema.load(request.args.to_dict())


def parse_iso_datetime(value, field):
    if not value:
        return None
    try:
        return parser.isoparse(value)
    except (ValueError, OverflowError):
        raise ValidationError(f"Invalid {field} format (use ISO 8601)", {"field": field})
