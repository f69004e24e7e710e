"""Contact form endpoint.

The email is sent after the response, so delivery problems never reach the
visitor; they are logged by the mailer.
"""

from fastapi import APIRouter, BackgroundTasks, Request

from portfolio_api.api.deps import Mailer
from portfolio_api.core.config import settings
from portfolio_api.core.rate_limiting import limiter
from portfolio_api.core.responses import MessageResponse
from portfolio_api.schemas.contact import ContactRequest

router = APIRouter()


@router.post("")
@limiter.limit(lambda: settings.rate_limit_contact)
async def send_contact_message(
    request: Request,  # noqa: ARG001 - required by @limiter.limit()
    body: ContactRequest,
    background_tasks: BackgroundTasks,
    mailer: Mailer,
) -> MessageResponse:
    background_tasks.add_task(
        mailer.send_contact_message,
        name=body.name,
        email=str(body.email),
        message=body.message,
    )
    return MessageResponse(message="Message sent successfully!")
