"""
LLM Provider interface for abstracting LLM implementations.
"""
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any
from dataclasses import dataclass, field


@dataclass
class LLMResponse:
    """Standardized LLM response."""
    content: str
    tokens_in: int = 0
    tokens_out: int = 0
    model: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    name: str = "base"
    
    @abstractmethod
    def chat(
        self,
        messages: list[Dict[str, str]],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        """
        Generate a chat completion.
        
        Args:
            messages: List of message dicts with 'role' and 'content'
            model: Model identifier (provider default when omitted)
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            
        Returns:
            LLMResponse with content and metadata
        """


class TemplateProvider(LLMProvider):
    """
    Rule-based provider used when no API key is configured.

    Echoes the prompt's DOCUMENT/RESUME/JOB sections back into a fixed
    template so the rest of the pipeline works offline.
    """

    name = "template"

    def chat(
        self,
        messages: list[Dict[str, str]],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        prompt = messages[-1]["content"] if messages else ""
        sections = _sections(prompt)
        document = sections.get("DOCUMENT", "resume").strip().lower()
        resume = sections.get("RESUME", "").strip()
        job = sections.get("JOB", "").strip()
        role = sections.get("POSITION", "").strip() or "the role"
        company = sections.get("COMPANY", "").strip() or "your company"

        if document == "cover_letter":
            content = (
                "Dear Hiring Manager,\n\n"
                f"I am writing to apply for {role} at {company}. "
                "My background aligns closely with the requirements you describe:\n\n"
                f"{_first_lines(job, 3)}\n\n"
                "Highlights of my experience:\n"
                f"{_first_lines(resume, 5)}\n\n"
                "Thank you for your consideration.\n\nSincerely,\nApplicant"
            )
        else:
            content = (
                f"TARGET ROLE: {role} at {company}\n\n"
                f"PROFILE\n{_first_lines(resume, 8)}\n\n"
                f"KEY REQUIREMENTS ADDRESSED\n{_first_lines(job, 5)}"
            )
        return LLMResponse(content=content, model="template")


PROMPT_KEYS = ("DOCUMENT", "COMPANY", "POSITION", "RESUME", "JOB")


def _sections(prompt: str) -> Dict[str, str]:
    """Split the known 'KEY:' headed blocks out of a prompt."""
    sections: Dict[str, str] = {}
    current = None
    for line in prompt.splitlines():
        head, sep, rest = line.partition(":")
        if sep and head in PROMPT_KEYS:
            current = head
            sections[current] = rest.strip()
        elif current:
            sections[current] += "\n" + line
    return sections


def _first_lines(text: str, limit: int) -> str:
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    return "\n".join(f"- {line}" for line in lines[:limit]) or "- (not provided)"
