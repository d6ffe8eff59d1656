"""
Résumé and cover-letter generation for a tracked application.

Prompts the configured LLM provider once per document and stores both texts
on the record through the tracker.
"""
import logging
from typing import Optional

from openai import APIError

from app.core.exceptions import GenerationError
from app.llm.openai_provider import get_provider
from app.llm.provider import LLMProvider
from app.schemas.application import ApplicationRecord, GenerationResponse
from app.services.tracker_service import ApplicationTracker

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You write concise, professional job application documents grounded "
    "strictly in the candidate details provided. Do not invent experience."
)

MAX_INPUT_CHARS = 3000


def build_prompt(application: ApplicationRecord, document: str) -> str:
    return (
        f"DOCUMENT: {document}\n"
        f"COMPANY: {application.company_name or ''}\n"
        f"POSITION: {application.position or ''}\n"
        f"RESUME:\n{application.resume_details[:MAX_INPUT_CHARS]}\n"
        f"JOB:\n{application.job_description[:MAX_INPUT_CHARS]}\n"
    )


class GenerationService:
    def __init__(self, provider: Optional[LLMProvider] = None):
        self.provider = provider or get_provider()

    def _complete(self, application: ApplicationRecord, document: str) -> str:
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_prompt(application, document)},
        ]
        try:
            response = self.provider.chat(messages, temperature=0.4)
        except APIError as e:
            raise GenerationError("AI service temporarily unavailable. Please try again later.") from e
        if not response.content.strip():
            raise GenerationError("AI service returned an empty document")
        return response.content.strip()

    def generate(self, tracker: ApplicationTracker, application_id: str) -> GenerationResponse:
        application = tracker.get(application_id)
        resume = self._complete(application, "resume")
        cover_letter = self._complete(application, "cover_letter")

        tracker.update_application(application_id, {
            "generated_resume": resume,
            "generated_cover_letter": cover_letter,
        })
        logger.info(f"Documents generated: id={application_id}, provider={self.provider.name}")
        return GenerationResponse(
            application_id=application_id,
            generated_resume=resume,
            generated_cover_letter=cover_letter,
            provider=self.provider.name,
        )
