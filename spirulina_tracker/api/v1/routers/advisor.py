"""
API router for the culture advisor.
"""
from fastapi import APIRouter, Request

from spirulina_tracker.api.dependencies import AdvisoryGatewayDep, CultureServiceDep
from spirulina_tracker.api.limiter import ADVISOR_RATE_LIMIT, limiter
from spirulina_tracker.api.v1.models.requests import AdvisorQuestion
from spirulina_tracker.api.v1.models.responses import AdvisorReplyResponse


router = APIRouter(
    prefix="/advisor",
    tags=["advisor"],
)


@router.post(
    "/ask",
    response_model=AdvisorReplyResponse,
    summary="Ask the culture advisor",
    description="""
    Send a question to the generative-text advisor together with a summary
    of every pond and its three most recent logs.

    The call always completes: when the service is not configured, fails or
    times out, a fixed fallback message is returned and `fallback` names the
    reason.
    """,
    responses={
        429: {"description": "Too many questions, try again later"},
    },
)
@limiter.limit(ADVISOR_RATE_LIMIT)
async def ask(
    request: Request,
    body: AdvisorQuestion,
    culture_service: CultureServiceDep,
    gateway: AdvisoryGatewayDep,
) -> AdvisorReplyResponse:
    store = culture_service.store
    reply = await gateway.ask(
        body.question,
        ponds=store.ponds.list(),
        logs=store.logs.list(),
    )
    return AdvisorReplyResponse(
        text=reply.text,
        fallback=reply.fallback,
        timestamp=reply.timestamp,
    )
