"""
wordstreak.api.routes.mastery — Word practice endpoints
=========================================================
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from wordstreak.api.deps import EngineDep, require_participant_id
from wordstreak.services import mastery_service

router = APIRouter(prefix="/mastery", tags=["mastery"])


class MasteryRequest(BaseModel):
    participant_id: str | None = Field(None, alias="participantId")


class AnswerRequest(MasteryRequest):
    is_correct: bool = Field(alias="isCorrect")


def _or_404(func, *args):
    try:
        return func(*args)
    except LookupError as exc:
        raise HTTPException(404, str(exc))


@router.get("/problem-words")
def get_problem_words(
    engine: EngineDep,
    participant_id: str | None = Query(None, alias="participantId"),
):
    pid = require_participant_id(participant_id)
    return {"words": mastery_service.get_problem_words(engine, pid)}


@router.get("/{entry_id}")
def get_progress(
    entry_id: int,
    engine: EngineDep,
    participant_id: str | None = Query(None, alias="participantId"),
):
    pid = require_participant_id(participant_id)
    return {"progress": mastery_service.get_practice_progress(engine, entry_id, pid)}


@router.post("/{entry_id}/problem")
def mark_problem(entry_id: int, body: MasteryRequest, engine: EngineDep):
    pid = require_participant_id(body.participant_id)
    return _or_404(mastery_service.mark_as_problem_word, engine, entry_id, pid)


@router.post("/{entry_id}/practice")
def start_practice(entry_id: int, body: MasteryRequest, engine: EngineDep):
    pid = require_participant_id(body.participant_id)
    return _or_404(mastery_service.start_practice, engine, entry_id, pid)


@router.post("/{entry_id}/answer")
def record_answer(entry_id: int, body: AnswerRequest, engine: EngineDep):
    pid = require_participant_id(body.participant_id)
    return _or_404(
        mastery_service.record_practice_answer, engine, entry_id, pid, body.is_correct,
    )


@router.post("/{entry_id}/confident")
def mark_confident(entry_id: int, body: MasteryRequest, engine: EngineDep):
    pid = require_participant_id(body.participant_id)
    return _or_404(mastery_service.mark_as_confident, engine, entry_id, pid)


@router.delete("/{entry_id}")
def remove_problem_word(
    entry_id: int,
    engine: EngineDep,
    participant_id: str | None = Query(None, alias="participantId"),
):
    pid = require_participant_id(participant_id)
    removed = mastery_service.remove_from_problem_words(engine, entry_id, pid)
    return {"removed": removed}
