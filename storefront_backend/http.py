import json

from .errors import ValidationError


def load_json_body(request):
    """Decode a JSON object request body or raise a 400-mapped ValidationError."""
    try:
        data = json.loads(request.body or b'{}')
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError([{'error': 'Invalid JSON'}], message="Invalid JSON")
    if not isinstance(data, dict):
        raise ValidationError([{'error': 'Request body must be a JSON object'}], message="Invalid JSON")
    return data
