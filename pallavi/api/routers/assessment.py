"""
Skill assessment upload endpoint.

Accepts questionnaire answers plus an optional transcript file, enforces the
transcript size cap, encodes the file as a data URI and runs the assessment
flow.
"""

import logging
import mimetypes
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from typing import Optional

from ..dependencies.services import get_actions
from pallavi.flows.actions import ActionResult, CareerActions
from pallavi.flows.schemas import SkillAssessmentOutput
from pallavi.utils.data_uri import MAX_ATTACHMENT_BYTES, to_data_uri

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=ActionResult[SkillAssessmentOutput])
async def assess_skills(
    questionnaire_answers: str = Form(..., description="Answers to the skill assessment questionnaire"),
    transcript: Optional[UploadFile] = File(None, description="Transcript (PDF, DOC, TXT or image), max 4MB"),
    actions: CareerActions = Depends(get_actions)
):
    transcript_data_uri = None
    if transcript is not None and transcript.filename:
        content = await transcript.read(MAX_ATTACHMENT_BYTES + 1)
        if len(content) > MAX_ATTACHMENT_BYTES:
            raise HTTPException(status_code=413, detail="Please upload a transcript smaller than 4MB.")
        mime_type = transcript.content_type or mimetypes.guess_type(transcript.filename)[0]
        transcript_data_uri = to_data_uri(content, mime_type)
        logger.info(f"Encoded transcript {transcript.filename} ({len(content)} bytes, {mime_type})")

    return await actions.assess_skills({
        "questionnaire_answers": questionnaire_answers,
        "transcript_data_uri": transcript_data_uri,
    })
