"""Answer generation - grounded LLM answers with templated fallback."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable

from ..models.provider import CompletionResult, Provider, ProviderError, ProviderErrorKind
from ..models.rag import Citation, ContextEntry
from ..protocols.llm import LLMProtocol
from .citation_service import extract_citations, make_citation
from .context_service import ContextBuilder

logger = logging.getLogger(__name__)

FALLBACK_MODEL = "template-fallback"

SYSTEM_PROMPT = (
    "You are a helpful assistant that answers questions based on journal entries. "
    "Always cite specific entries when making claims, using the format [Entry N]. "
    "Be accurate and only make claims supported by the provided context."
)

RAG_PROMPT = """You are a helpful assistant that answers questions about personal journal entries.
Use only the provided context to answer the question. If the context doesn't contain enough information to answer the question, say so clearly.

When referencing information from the context, cite the entry number in square brackets exactly like [Entry 1], [Entry 2], etc.

Context:
{context}

Question: {question}

Answer:"""

INSUFFICIENT_ANSWER = (
    "I don't have enough information in your journal entries to answer this question "
    "confidently. You might want to add more entries on this topic or try rephrasing "
    "your question."
)


@dataclass
class GeneratedAnswer:
    text: str
    citations: list[Citation] = field(default_factory=list)
    model_used: str = FALLBACK_MODEL
    fallback: bool = True


def _body_has(entry: ContextEntry, *words: str) -> bool:
    body = entry.body.lower()
    return any(w in body for w in words)


@dataclass(frozen=True)
class _Template:
    """Question category for templated answers."""
    name: str
    question_keywords: tuple[str, ...]
    intro: str
    sentence: str  # formatted with date and number
    matches: Callable[[ContextEntry], bool]


TEMPLATES = (
    _Template(
        name="work",
        question_keywords=("work", "job"),
        intro="Looking at your work-related journal entries, I can see several patterns. ",
        sentence="You wrote about work experiences on {date} [{number}]. ",
        matches=lambda e: "work" in e.tags or _body_has(e, "work", "meeting"),
    ),
    _Template(
        name="goals",
        question_keywords=("goal", "plan"),
        intro="Your journal entries reveal several goals and plans you've set. ",
        sentence="On {date}, you outlined some objectives [{number}]. ",
        matches=lambda e: "goals" in e.tags or _body_has(e, "goal", "plan"),
    ),
    _Template(
        name="feelings",
        question_keywords=("feel", "emotion"),
        intro="Based on your journal entries, you've experienced a range of emotions. ",
        sentence="On {date}, you mentioned feeling certain emotions [{number}]. ",
        matches=lambda e: _body_has(e, "feel", "happy", "sad", "excited"),
    ),
)

GENERAL_TEMPLATE = _Template(
    name="general",
    question_keywords=(),
    intro="Based on your journal entries, I found {count} relevant entries that relate to your question. ",
    sentence="One entry from {date} discusses related topics [{number}]. ",
    matches=lambda e: True,
)


def classify_question(question: str) -> _Template:
    """Pick the answer template for a question.

    Topic categories (work, goals) take precedence over the mood category,
    so "how do I feel about work" is answered from work entries.
    """
    question_lower = question.lower()
    for template in TEMPLATES:
        if any(k in question_lower for k in template.question_keywords):
            return template
    return GENERAL_TEMPLATE


def synthesize_answer(question: str, context: list[ContextEntry]) -> GeneratedAnswer:
    """Templated answer used when no language model is usable."""
    template = classify_question(question)
    answer = template.intro.format(count=len(context))
    citations = []

    for number, entry in enumerate(context[:3], 1):
        if not template.matches(entry):
            continue
        answer += template.sentence.format(
            date=entry.date.strftime("%B %d"), number=number
        )
        citations.append(make_citation(entry, number))

    if not citations:
        answer = INSUFFICIENT_ANSWER

    logger.info(
        f"Fallback answer: template={template.name}, citations={len(citations)}"
    )
    return GeneratedAnswer(text=answer.strip(), citations=citations)


class AnswerGenerator:
    """Grounded answer generation across interchangeable providers."""

    def __init__(
        self,
        providers: dict[str, LLMProtocol],
        temperature: float = 0.3,
        max_tokens: int = 1000,
        timeout: float = 60.0,
    ):
        """Initialize answer generator.

        Args:
            providers: Completion providers by name.
            temperature: Sampling temperature.
            max_tokens: Max response tokens.
            timeout: Per-call timeout in seconds.
        """
        self._providers = providers
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout

    @staticmethod
    def build_prompt(question: str, context: list[ContextEntry]) -> str:
        return RAG_PROMPT.format(context=ContextBuilder.render(context), question=question)

    async def _complete(
        self, provider: str, prompt: str, model: str
    ) -> CompletionResult:
        llm = self._providers.get(provider)
        if llm is None:
            return CompletionResult.failure(
                ProviderError(provider, ProviderErrorKind.NOT_CONFIGURED, "unknown provider")
            )

        try:
            return await asyncio.wait_for(
                llm.complete(
                    prompt,
                    model=model,
                    temperature=self._temperature,
                    max_tokens=self._max_tokens,
                    system_prompt=SYSTEM_PROMPT,
                ),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            return CompletionResult.failure(
                ProviderError(provider, ProviderErrorKind.TIMEOUT, f"no response after {self._timeout}s")
            )
        except Exception as e:
            logger.error(f"[{provider}] Completion call raised: {e}")
            return CompletionResult.failure(
                ProviderError(provider, ProviderErrorKind.UNAVAILABLE, str(e)[:200])
            )

    async def generate(
        self,
        question: str,
        context: list[ContextEntry],
        provider: Provider | str = Provider.OLLAMA,
        model: str = "default",
    ) -> GeneratedAnswer:
        """Answer a question from context.

        Any provider failure, including an empty reply, yields the templated
        answer instead.
        """
        provider_name = provider.value if isinstance(provider, Provider) else str(provider)
        result = await self._complete(provider_name, self.build_prompt(question, context), model)

        if not result.ok:
            logger.warning(f"Completion unavailable ({result.error}), using templated answer")
            return synthesize_answer(question, context)

        if not result.text.strip():
            logger.warning(f"[{provider_name}] Empty completion, using templated answer")
            return synthesize_answer(question, context)

        return GeneratedAnswer(
            text=result.text,
            citations=extract_citations(result.text, context),
            model_used=f"{provider_name}:{result.model}",
            fallback=False,
        )
