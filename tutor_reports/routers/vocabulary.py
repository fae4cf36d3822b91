"""Vocabulary router."""

from fastapi import APIRouter

from tutor_reports.schemas.reports import VocabularyResponse
from tutor_reports.vocabulary import MAKEUP_TOPICS, SUBJECT_TOPICS, Category, Subject

router = APIRouter()


@router.get("/vocabulary", response_model=VocabularyResponse)
async def get_vocabulary() -> VocabularyResponse:
    """Categories, subjects and the topic options offered for each."""
    return VocabularyResponse(
        categories=list(Category),
        subjects=list(Subject),
        subject_topics={subject.value: list(topics) for subject, topics in SUBJECT_TOPICS.items()},
        makeup_topics=list(MAKEUP_TOPICS),
    )
