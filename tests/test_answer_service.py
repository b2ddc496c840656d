"""
Tests for grounded answer generation and the templated fallback.

Run with: pytest tests/test_answer_service.py -v
"""

import asyncio
from datetime import datetime, timezone

from journal_rag.core.models.provider import Provider, ProviderError, ProviderErrorKind
from journal_rag.core.services.answer_service import (
    FALLBACK_MODEL,
    INSUFFICIENT_ANSWER,
    SYSTEM_PROMPT,
    AnswerGenerator,
    classify_question,
    synthesize_answer,
)

from fakes import FakeLLM, make_context


def _work_context():
    return [
        make_context(
            "a", 0.9, body="Long work meeting about the launch.", tags=["work"],
            date=datetime(2024, 3, 15, tzinfo=timezone.utc),
        ),
        make_context(
            "b", 0.6, body="Quarterly planning at the office.", tags=["work"],
            date=datetime(2024, 3, 18, tzinfo=timezone.utc),
        ),
    ]


def _generate(llm, question="How do I feel about work?", context=None, provider="ollama", model="llama3.1:8b", timeout=60.0):
    generator = AnswerGenerator({"ollama": llm}, timeout=timeout)
    return asyncio.run(
        generator.generate(question, context if context is not None else _work_context(), provider, model)
    )


class TestClassifyQuestion:
    """Template selection."""

    def test_work(self):
        assert classify_question("What happened at my job?").name == "work"

    def test_topic_wins_over_mood(self):
        assert classify_question("How do I feel about work?").name == "work"

    def test_goals(self):
        assert classify_question("What are my plans for spring?").name == "goals"

    def test_feelings(self):
        assert classify_question("How did I feel last week?").name == "feelings"

    def test_general(self):
        assert classify_question("What did I eat on Sunday?").name == "general"


class TestSynthesizeAnswer:
    """Templated answers."""

    def test_work_template_cites_matching_entries(self):
        answer = synthesize_answer("How do I feel about work?", _work_context())
        assert answer.text.startswith("Looking at your work-related journal entries")
        assert "March 15 [1]" in answer.text
        assert "March 18 [2]" in answer.text
        assert [c.citation_number for c in answer.citations] == [1, 2]
        assert answer.model_used == FALLBACK_MODEL
        assert answer.fallback

    def test_only_first_three_entries_considered(self):
        context = [make_context(str(i), 0.9, tags=["work"]) for i in range(5)]
        answer = synthesize_answer("work?", context)
        assert [c.citation_number for c in answer.citations] == [1, 2, 3]

    def test_no_matching_entries_is_insufficient(self):
        context = [make_context("a", 0.9, body="Quiet walk by the lake.")]
        answer = synthesize_answer("How was work?", context)
        assert answer.text == INSUFFICIENT_ANSWER
        assert answer.citations == []

    def test_empty_context_is_insufficient(self):
        assert synthesize_answer("Anything?", []).text == INSUFFICIENT_ANSWER

    def test_general_template_counts_entries(self):
        context = [make_context("a", 0.9), make_context("b", 0.8)]
        answer = synthesize_answer("What did I eat?", context)
        assert "I found 2 relevant entries" in answer.text
        assert len(answer.citations) == 2

    def test_feelings_template_matches_body(self):
        context = [
            make_context("a", 0.9, body="I was so happy today."),
            make_context("b", 0.9, body="Cleaned the garage."),
        ]
        answer = synthesize_answer("How do I feel lately?", context)
        assert [c.entry_id for c in answer.citations] == ["a"]


class TestAnswerGenerator:
    """Provider calls and fallback."""

    def test_success_uses_model_answer(self):
        llm = FakeLLM("Work has been draining [Entry 2].")
        answer = _generate(llm)
        assert answer.text == "Work has been draining [Entry 2]."
        assert not answer.fallback
        assert answer.model_used == "ollama:llama3.1:8b"
        assert [c.citation_number for c in answer.citations] == [2]

    def test_prompt_carries_context_and_question(self):
        llm = FakeLLM("ok [Entry 1]")
        _generate(llm)
        prompt = llm.prompts[0]
        assert "[Entry 1] Date: 2024-03-15 | Tags: work | Content: Long work meeting" in prompt
        assert "Question: How do I feel about work?" in prompt
        assert prompt.rstrip().endswith("Answer:")

    def test_provider_enum_accepted(self):
        answer = _generate(FakeLLM("fine [Entry 1]"), provider=Provider.OLLAMA)
        assert not answer.fallback

    def test_all_failures_give_same_fallback(self):
        expected = synthesize_answer("How do I feel about work?", _work_context())
        failures = [
            _generate(FakeLLM(error=ProviderError("ollama", ProviderErrorKind.UNAVAILABLE))),
            _generate(FakeLLM(error=ProviderError("ollama", ProviderErrorKind.HTTP_STATUS, "status 500"))),
            _generate(FakeLLM("   ")),
            _generate(FakeLLM("late", delay=0.5), timeout=0.01),
            _generate(FakeLLM("never called"), provider="openai"),
        ]
        for answer in failures:
            assert answer.fallback
            assert answer.text == expected.text
            assert answer.model_used == FALLBACK_MODEL
            assert [c.entry_id for c in answer.citations] == ["a", "b"]

    def test_unknown_provider_makes_no_call(self):
        llm = FakeLLM("unused")
        _generate(llm, provider="openai")
        assert llm.prompts == []

    def test_system_prompt_mentions_citation_format(self):
        assert "[Entry N]" in SYSTEM_PROMPT

    def test_raising_provider_falls_back(self):
        class _Broken(FakeLLM):
            async def complete(self, prompt, **kwargs):
                raise RuntimeError("socket closed")

        answer = _generate(_Broken())
        assert answer.fallback
        assert answer.model_used == FALLBACK_MODEL
