"""
Small JSON helpers shared by the API views.
"""
import json
from django.http import JsonResponse


def parse_json_body(request) -> dict:
    """Decode a JSON object body. Returns None when the body is not a JSON object."""
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        return None
    return data if isinstance(data, dict) else None


def error_response(exc) -> JsonResponse:
    """Render a BookingEngineError / PaymentError as `{code, detail}`."""
    return JsonResponse(
        {'code': exc.code, 'detail': str(exc)},
        status=exc.http_status,
    )


def invalid_body_response() -> JsonResponse:
    return JsonResponse({'code': 'INVALID_BODY', 'detail': 'Request body must be a JSON object.'}, status=400)


def form_errors_response(form) -> JsonResponse:
    return JsonResponse(
        {'code': 'VALIDATION_ERROR', 'detail': 'Invalid request.', 'errors': form.errors.get_json_data()},
        status=400,
    )
