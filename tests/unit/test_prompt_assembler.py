"""Tests for PromptAssembler and its steps."""

from unittest.mock import AsyncMock

from smart_tutor.services.course_prompts import CoursePromptTable
from smart_tutor.services.prompt_assembler import (
    BASE_SYSTEM_PROMPT,
    COURSE_HEADER,
    KNOWLEDGE_HEADER,
    PromptAssembler,
    PromptContext,
)

TABLE = CoursePromptTable({"python-programming": "Teach Python basics."})


def _reader(value: str | None = None, error: Exception | None = None) -> AsyncMock:
    reader = AsyncMock()
    reader.get_value = AsyncMock(return_value=value, side_effect=error)
    return reader


class TestPromptAssembler:
    """Tests for block order and optional blocks."""

    async def test_base_prompt_only(self) -> None:
        assembler = PromptAssembler.for_tutor(_reader(None), TABLE)
        assert await assembler.assemble() == BASE_SYSTEM_PROMPT

    async def test_all_blocks_in_order(self) -> None:
        assembler = PromptAssembler.for_tutor(_reader("Exams are in June."), TABLE)
        prompt = await assembler.assemble("python-programming")

        base_at = prompt.index(BASE_SYSTEM_PROMPT)
        knowledge_at = prompt.index(KNOWLEDGE_HEADER)
        course_at = prompt.index(COURSE_HEADER)
        assert base_at < knowledge_at < course_at
        assert "Exams are in June." in prompt
        assert "Teach Python basics." in prompt

    async def test_blocks_joined_by_blank_line(self) -> None:
        assembler = PromptAssembler.for_tutor(_reader("Fact."), TABLE)
        prompt = await assembler.assemble()
        assert prompt == f"{BASE_SYSTEM_PROMPT}\n\n{KNOWLEDGE_HEADER}\nFact."

    async def test_unknown_course_is_skipped(self) -> None:
        assembler = PromptAssembler.for_tutor(_reader(None), TABLE)
        assert await assembler.assemble("underwater-basket-weaving") == BASE_SYSTEM_PROMPT

    async def test_blank_knowledge_is_skipped(self) -> None:
        assembler = PromptAssembler.for_tutor(_reader("   \n"), TABLE)
        assert KNOWLEDGE_HEADER not in await assembler.assemble()

    async def test_knowledge_failure_is_skipped(self) -> None:
        assembler = PromptAssembler.for_tutor(
            _reader(error=RuntimeError("db down")), TABLE
        )
        prompt = await assembler.assemble("python-programming")
        assert KNOWLEDGE_HEADER not in prompt
        assert COURSE_HEADER in prompt

    async def test_custom_steps(self) -> None:
        async def first(context: PromptContext) -> str | None:
            return "one"

        async def skipped(context: PromptContext) -> str | None:
            return None

        async def echo_course(context: PromptContext) -> str | None:
            return context.course_id

        assembler = PromptAssembler([first, skipped, echo_course])
        assert await assembler.assemble("abc") == "one\n\nabc"
