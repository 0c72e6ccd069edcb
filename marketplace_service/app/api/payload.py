"""Body parsing for endpoints that accept JSON or multipart with an image"""

import json
from typing import Any, Dict, Optional, Tuple

from fastapi import Request
from starlette.datastructures import UploadFile

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")
_EMPTY_FORM_VALUES = ("", "null", "undefined")


async def read_payload(
    request: Request, file_field: str = "image"
) -> Tuple[Dict[str, Any], Optional[UploadFile]]:
    """Return the request fields and the uploaded image, if any.

    Multipart forms carry every value as a string, so empty markers sent by
    browsers ("", "null", "undefined") become ``None``.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        payload: Dict[str, Any] = {}
        image: Optional[UploadFile] = None
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if key == file_field and value.filename:
                    image = value
                continue
            payload[key] = None if value.strip() in _EMPTY_FORM_VALUES else value
        return payload, image

    body = await request.body()
    if not body:
        return {}, None
    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        raise ValueError("Malformed JSON body")
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return data, None
