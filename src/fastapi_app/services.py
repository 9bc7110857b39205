from fastapi import Request
from fastapi.responses import Response

from src.common.errors import InvalidRequest
from src.fastapi_app.schemas import MailRequest
from src.utils.schemas import UpstreamResponse

MAIL_FIELDS = ("to", "subject", "message")


async def read_mail_request(request: Request) -> MailRequest:
    """Read to/subject/message from a form or JSON body.

    Only presence is checked. Empty strings pass through to the upstream.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise InvalidRequest("Request body is not valid JSON")
        if not isinstance(body, dict):
            raise InvalidRequest("Request body must be a JSON object")
    else:
        body = await request.form()

    missing = [name for name in MAIL_FIELDS if body.get(name) is None]
    if missing:
        raise InvalidRequest(f"Missing field(s): {', '.join(missing)}")
    return MailRequest(**{name: str(body[name]) for name in MAIL_FIELDS})


def upstream_to_response(upstream: UpstreamResponse) -> Response:
    """Relay the upstream status and body unchanged"""
    media_type = upstream.content_type
    if upstream.json_body() is not None:
        media_type = "application/json"
    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        media_type=media_type,
    )
