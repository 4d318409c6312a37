from flask import jsonify


def success_response(payload=None, message=None, status=200):
    body = {"success": True}
    if payload is not None:
        body.update(payload if isinstance(payload, dict) else {"data": payload})
    if message:
        body["message"] = message
    return jsonify(body), status


def error_response(code, message, details=None, status=400):
    return jsonify({
        "error": {
            "code": code,
            "message": message,
            "details": details or {},
        }
    }), status


def service_error_response(exc):
    """Render a ServiceError (or subclass) with its own HTTP status."""
    return error_response(exc.code, exc.message, exc.details, status=exc.status)
