from fastapi import APIRouter, Depends, HTTPException, Query, status

from barta.core.exceptions import NotFoundError, ValidationError
from barta.core.schemas import SuccessResponse
from barta.db.store import Database, get_db
from barta.domains.calls.schemas import (
    CallOfferRequest, CallOfferResponse, CallAnswerRequest,
    IceCandidateRequest, CallFinishRequest, CallCheckResponse
)
from barta.domains.calls.services import CallSignalingService

router = APIRouter(prefix="/api/call", tags=["calls"])


@router.post("/offer", response_model=CallOfferResponse)
async def offer_call(
    data: CallOfferRequest,
    db: Database = Depends(get_db)
):
    """Начало звонка"""
    call_service = CallSignalingService(db)

    try:
        call_id = await call_service.offer(data.caller_id, data.receiver_id, data.call_type, data.offer)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message
        )

    return CallOfferResponse(call_id=call_id)


@router.post("/answer", response_model=SuccessResponse)
async def answer_call(
    data: CallAnswerRequest,
    db: Database = Depends(get_db)
):
    """Ответ на звонок"""
    try:
        await CallSignalingService(db).answer(data.call_id, data.answer)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message
        )

    return SuccessResponse()


@router.post("/ice-candidate", response_model=SuccessResponse)
async def add_ice_candidate(
    data: IceCandidateRequest,
    db: Database = Depends(get_db)
):
    """Передача ICE-кандидата собеседнику"""
    try:
        await CallSignalingService(db).add_ice_candidate(data.call_id, data.user_id, data.candidate)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message
        )

    return SuccessResponse()


@router.get("/check/{user_id}", response_model=CallCheckResponse)
async def check_calls(
    user_id: str,
    last_check: int = Query(0, alias="lastCheck"),
    db: Database = Depends(get_db)
):
    """Опрос входящих и активных звонков пользователя"""
    poll = await CallSignalingService(db).poll_for_user(user_id, last_check)

    return CallCheckResponse(
        incoming_call=poll.incoming_call.to_dict() if poll.incoming_call else None,
        active_call=poll.active_call.to_dict() if poll.active_call else None,
        ice_candidates=[c.to_dict() for c in poll.ice_candidates],
        ended_call=poll.ended_call.to_dict() if poll.ended_call else None,
    )


@router.post("/end", response_model=SuccessResponse)
async def end_call(
    data: CallFinishRequest,
    db: Database = Depends(get_db)
):
    await CallSignalingService(db).end(data.call_id, data.user_id)
    return SuccessResponse()


@router.post("/reject", response_model=SuccessResponse)
async def reject_call(
    data: CallFinishRequest,
    db: Database = Depends(get_db)
):
    await CallSignalingService(db).reject(data.call_id, data.user_id)
    return SuccessResponse()
