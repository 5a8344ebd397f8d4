import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from barta.core.clock import Clock, now_ms
from barta.core.config import settings
from barta.core.exceptions import NotFoundError, ValidationError
from barta.db.repositories.base import next_id
from barta.db.repositories.call_repository import CallRepository
from barta.db.store import Database
from barta.domains.calls.entities import Call, CallStatus, CallType, IceCandidate

logger = logging.getLogger(__name__)


@dataclass
class CallPoll:
    """Результат опроса звонков пользователем"""

    incoming_call: Optional[Call] = None
    active_call: Optional[Call] = None
    ice_candidates: List[IceCandidate] = field(default_factory=list)
    ended_call: Optional[Call] = None


@dataclass
class SweepResult:
    expired: int = 0
    removed: int = 0


class CallSignalingService:
    """
    Ретрансляция сигналинга WebRTC между двумя участниками звонка.

    SDP offer/answer и ICE-кандидаты не разбираются, а только хранятся
    и отдаются собеседнику при опросе.
    """

    def __init__(
        self,
        db: Database,
        clock: Clock = now_ms,
        ring_timeout_seconds: Optional[int] = None,
        idle_timeout_seconds: Optional[int] = None,
        tombstone_seconds: Optional[int] = None
    ):
        self.repository = CallRepository(db)
        self.clock = clock
        self.ring_timeout_ms = 1000 * (
            settings.call_ring_timeout_seconds if ring_timeout_seconds is None else ring_timeout_seconds
        )
        self.idle_timeout_ms = 1000 * (
            settings.call_idle_timeout_seconds if idle_timeout_seconds is None else idle_timeout_seconds
        )
        self.tombstone_ms = 1000 * (
            settings.call_tombstone_seconds if tombstone_seconds is None else tombstone_seconds
        )

    async def offer(self, caller_id: str, receiver_id: str, call_type: CallType, sdp_offer: Any) -> str:
        """
        Новый звонок в состоянии ringing. Предыдущий звонок между этой
        парой пользователей удаляется: побеждает последний offer.
        """
        if not caller_id or not receiver_id or sdp_offer is None:
            raise ValidationError("Missing required fields")

        now = self.clock()
        async with self.repository.transaction() as calls:
            call_id = next_id((c.id for c in calls), now)
            replaced = [c.id for c in calls if c.connects(caller_id, receiver_id)]
            calls[:] = [c for c in calls if not c.connects(caller_id, receiver_id)]
            call = Call(
                id=call_id,
                caller_id=caller_id,
                receiver_id=receiver_id,
                call_type=call_type,
                offer=sdp_offer,
                timestamp=now,
            )
            calls.append(call)

        if replaced:
            logger.info(f"Call offer {call.id} replaced calls {', '.join(replaced)}")
        logger.info(f"Call {call.id} ({call_type.value}) offered by {caller_id} to {receiver_id}")
        return call.id

    async def answer(self, call_id: str, sdp_answer: Any) -> Call:
        """Ответ на звонок: ringing -> active"""
        now = self.clock()
        async with self.repository.transaction() as calls:
            call = self._get_live(calls, call_id)
            call.accept(sdp_answer, now)
        logger.info(f"Call {call_id} answered")
        return call

    async def add_ice_candidate(self, call_id: str, user_id: str, candidate: Any) -> IceCandidate:
        now = self.clock()
        async with self.repository.transaction() as calls:
            call = self._get_live(calls, call_id)
            ice = call.add_candidate(user_id, candidate, now)
        return ice

    async def poll_for_user(self, user_id: str, last_check: int = 0) -> CallPoll:
        """
        Опрос состояния звонков пользователем.

        Возвращает входящий звонок, активный звонок с новыми кандидатами
        собеседника и последний завершенный после last_check звонок.
        """
        now = self.clock()
        result = CallPoll()
        async with self.repository.transaction() as calls:
            self._sweep(calls, now)

            result.incoming_call = next(
                (c for c in calls if c.receiver_id == user_id and c.status is CallStatus.RINGING), None
            )
            result.active_call = next(
                (c for c in calls if c.involves(user_id) and c.status is CallStatus.ACTIVE), None
            )
            if result.active_call:
                # Опрос участника продлевает жизнь активного звонка
                result.active_call.updated_at = now
                result.ice_candidates = result.active_call.candidates_for(user_id, last_check)

            finished = [
                c for c in calls
                if c.involves(user_id) and c.status.is_terminal
                and c.ended_by != user_id and (c.ended_at or 0) > last_check
            ]
            if finished:
                result.ended_call = max(finished, key=lambda c: c.ended_at or 0)

        logger.debug(f"Call poll for {user_id}: incoming={bool(result.incoming_call)} active={bool(result.active_call)}")
        return result

    async def end(self, call_id: str, user_id: Optional[str] = None) -> bool:
        """Завершение звонка; неизвестный или уже завершенный звонок игнорируется"""
        return await self._finish(call_id, CallStatus.ENDED, user_id)

    async def reject(self, call_id: str, user_id: Optional[str] = None) -> bool:
        """Отклонение звонка; неизвестный или уже завершенный звонок игнорируется"""
        return await self._finish(call_id, CallStatus.REJECTED, user_id)

    async def sweep(self) -> SweepResult:
        """Очистка просроченных звонков вне запросов"""
        async with self.repository.transaction() as calls:
            return self._sweep(calls, self.clock())

    async def _finish(self, call_id: str, status: CallStatus, user_id: Optional[str]) -> bool:
        now = self.clock()
        async with self.repository.transaction() as calls:
            call = next((c for c in calls if c.id == call_id), None)
            changed = call.finish(status, now, user_id) if call else False
        if changed:
            logger.info(f"Call {call_id} {status.value}" + (f" by {user_id}" if user_id else ""))
        return changed

    def _get_live(self, calls: List[Call], call_id: str) -> Call:
        call = next((c for c in calls if c.id == call_id), None)
        if call is None or call.status.is_terminal:
            raise NotFoundError("Call not found")
        return call

    def _sweep(self, calls: List[Call], now: int) -> SweepResult:
        result = SweepResult()
        for call in calls:
            if call.is_ring_timed_out(now, self.ring_timeout_ms) or call.is_idle(now, self.idle_timeout_ms):
                call.finish(CallStatus.EXPIRED, now)
                result.expired += 1

        kept = [c for c in calls if not c.is_tombstone_expired(now, self.tombstone_ms)]
        result.removed = len(calls) - len(kept)
        calls[:] = kept

        if result.expired or result.removed:
            logger.info(f"Call sweep: {result.expired} expired, {result.removed} removed")
        return result
