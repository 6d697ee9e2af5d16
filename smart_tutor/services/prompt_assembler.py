"""System prompt assembly for the tutor chat.

The prompt is built by an ordered list of steps. Each step may contribute a
block of text or nothing; blocks are joined in step order. The default
order is base persona, admin knowledge, course instructions.
"""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Protocol

import structlog

from smart_tutor.models.admin_setting import BOT_KNOWLEDGE_KEY
from smart_tutor.services.course_prompts import CoursePromptTable

logger = structlog.get_logger()

BASE_SYSTEM_PROMPT = """You are DLH Smart Tutor, an intelligent AI assistant for the Digital Learning Hub platform. You are friendly, encouraging, and focused on helping students learn effectively.

Your capabilities include:
- Answering questions on any academic subject
- Explaining complex concepts in simple terms
- Helping with homework and problem-solving
- Generating practice questions and assignments
- Providing study tips and learning strategies
- Offering mentorship and motivation

Guidelines:
- Be patient and supportive with learners of all levels
- Use examples and analogies to explain difficult concepts
- Encourage critical thinking rather than just giving answers
- Adapt your explanations based on the student's level
- Use markdown formatting for better readability
- Include emojis occasionally to keep the tone friendly
- If a topic is beyond your knowledge, be honest about it

Remember: Your goal is to empower students to learn and understand, not just to provide answers."""

KNOWLEDGE_HEADER = "ADDITIONAL KNOWLEDGE (provided by the Digital Learning Hub team):"
COURSE_HEADER = "COURSE-SPECIFIC INSTRUCTIONS:"
COURSE_REDIRECT = (
    "The student is currently studying this course. If they ask about "
    "something unrelated, answer briefly and gently guide them back to the "
    "course material."
)


@dataclass(frozen=True)
class PromptContext:
    """Inputs for one exchange's prompt."""

    course_id: str | None = None


PromptStep = Callable[[PromptContext], Awaitable[str | None]]


class SettingsReader(Protocol):
    """Anything that can read a single admin setting."""

    async def get_value(self, key: str) -> str | None: ...


async def base_prompt_step(context: PromptContext) -> str | None:
    """Persona, capabilities and formatting rules. Always present."""
    return BASE_SYSTEM_PROMPT


class KnowledgeStep:
    """Admin-supplied free text from the settings store."""

    def __init__(self, reader: SettingsReader, key: str = BOT_KNOWLEDGE_KEY) -> None:
        self._reader = reader
        self._key = key

    async def __call__(self, context: PromptContext) -> str | None:
        try:
            knowledge = await self._reader.get_value(self._key)
        except Exception:
            # Optional block: the exchange goes on without it.
            logger.exception("Failed to load bot knowledge", key=self._key)
            return None
        if knowledge is None or not knowledge.strip():
            return None
        return f"{KNOWLEDGE_HEADER}\n{knowledge.strip()}"


class CourseInstructionStep:
    """Instructions for the course the student is chatting from."""

    def __init__(self, table: CoursePromptTable) -> None:
        self._table = table

    async def __call__(self, context: PromptContext) -> str | None:
        instructions = self._table.lookup(context.course_id)
        if instructions is None:
            if context.course_id:
                logger.debug("Unknown course id", course_id=context.course_id)
            return None
        return f"{COURSE_HEADER}\n{instructions}\n\n{COURSE_REDIRECT}"


class PromptAssembler:
    """Runs prompt steps in order and joins the blocks they produce."""

    def __init__(self, steps: Sequence[PromptStep]) -> None:
        self._steps = tuple(steps)

    @classmethod
    def for_tutor(
        cls, reader: SettingsReader, table: CoursePromptTable
    ) -> "PromptAssembler":
        """Standard order: base prompt, admin knowledge, course instructions."""
        return cls([base_prompt_step, KnowledgeStep(reader), CourseInstructionStep(table)])

    async def assemble(self, course_id: str | None = None) -> str:
        """Build the system prompt for one exchange."""
        context = PromptContext(course_id=course_id)
        blocks: list[str] = []
        for step in self._steps:
            block = await step(context)
            if block:
                blocks.append(block)
        return "\n\n".join(blocks)
