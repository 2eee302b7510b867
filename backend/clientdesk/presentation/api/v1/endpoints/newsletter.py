"""Newsletter and Gmail mailbox endpoints."""

from fastapi import APIRouter, Depends, Query

from clientdesk.application.schemas.common import ApiResponse
from clientdesk.application.schemas.newsletter import (
    AuthCallbackResponse,
    AuthUrlResponse,
    ConnectionStatusResponse,
    FetchEmailsRequest,
    MailboxPageResponse,
    NewsletterClientSchema,
    NewsletterClientsResponse,
    NewsletterSendRequest,
    NewsletterSummaryResponse,
    TokenPresence,
)
from clientdesk.application.services import MailboxService, NewsletterDispatcher
from clientdesk.domain.entities import Actor
from clientdesk.infrastructure.dependencies import (
    get_current_actor,
    get_mailbox_service,
    get_newsletter_dispatcher,
)

router = APIRouter(prefix="/newsletter", tags=["Newsletter"])


@router.get("/auth-url", response_model=ApiResponse[AuthUrlResponse])
async def get_auth_url(
    actor: Actor = Depends(get_current_actor),
    service: MailboxService = Depends(get_mailbox_service),
) -> ApiResponse[AuthUrlResponse]:
    """Google consent URL for connecting the caller's Gmail account."""
    return ApiResponse(data=AuthUrlResponse(auth_url=service.get_auth_url(actor)))


@router.get("/auth/callback", response_model=ApiResponse[AuthCallbackResponse])
async def auth_callback(
    code: str | None = Query(None),
    actor: Actor = Depends(get_current_actor),
    service: MailboxService = Depends(get_mailbox_service),
) -> ApiResponse[AuthCallbackResponse]:
    result = await service.complete_authorization(actor, code)
    return ApiResponse(
        message="Gmail account connected successfully",
        data=AuthCallbackResponse(
            email=result.email,
            tokens=TokenPresence(
                has_access_token=result.has_access_token,
                has_refresh_token=result.has_refresh_token,
            ),
        ),
    )


@router.get("/status", response_model=ApiResponse[ConnectionStatusResponse])
async def connection_status(
    actor: Actor = Depends(get_current_actor),
    service: MailboxService = Depends(get_mailbox_service),
) -> ApiResponse[ConnectionStatusResponse]:
    result = await service.connection_status(actor)
    return ApiResponse(
        data=ConnectionStatusResponse.model_validate(result, from_attributes=True)
    )


@router.post("/fetch-emails", response_model=ApiResponse[MailboxPageResponse])
async def fetch_emails(
    body: FetchEmailsRequest,
    actor: Actor = Depends(get_current_actor),
    service: MailboxService = Depends(get_mailbox_service),
) -> ApiResponse[MailboxPageResponse]:
    """Read the caller's mailbox; defaults to mail from the firm's collectors and advocates."""
    page = await service.fetch_emails(
        actor,
        query=body.query,
        max_results=body.max_results,
        page_token=body.page_token,
    )
    return ApiResponse(data=MailboxPageResponse.model_validate(page, from_attributes=True))


@router.get("/clients", response_model=ApiResponse[NewsletterClientsResponse])
async def newsletter_clients(
    actor: Actor = Depends(get_current_actor),
    dispatcher: NewsletterDispatcher = Depends(get_newsletter_dispatcher),
) -> ApiResponse[NewsletterClientsResponse]:
    recipients = await dispatcher.list_emailable_clients(actor)
    return ApiResponse(
        data=NewsletterClientsResponse(
            clients=[
                NewsletterClientSchema.model_validate(r, from_attributes=True)
                for r in recipients
            ],
            total=len(recipients),
        )
    )


@router.post("/send", response_model=ApiResponse[NewsletterSummaryResponse])
async def send_newsletter(
    body: NewsletterSendRequest,
    actor: Actor = Depends(get_current_actor),
    dispatcher: NewsletterDispatcher = Depends(get_newsletter_dispatcher),
) -> ApiResponse[NewsletterSummaryResponse]:
    summary = await dispatcher.send(actor, body.subject, body.content, body.client_ids)
    return ApiResponse(
        success=summary.success,
        message=f"Newsletter sent. {summary.sent} succeeded, {summary.failed} failed.",
        data=NewsletterSummaryResponse.model_validate(summary, from_attributes=True),
    )
