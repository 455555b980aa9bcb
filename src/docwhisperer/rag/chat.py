"""Question answering over indexed documents.

Pipeline:
  1. Retrieve chunks for the question (optionally scoped to one document).
  2. EmptyScope or no matches → fixed user-facing reply, no LLM call.
  3. Build the grounded prompt and call the generation function, with any
     prior turns of the conversation placed between system and user message.
  4. Record the question and the reply in the conversation memory.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field

from docwhisperer.errors import GenerationFailed
from docwhisperer.rag.assembler import build_prompt
from docwhisperer.rag.retriever import EmptyScope, Retriever

logger = logging.getLogger(__name__)

# generate(system_instruction, user_message) carried as a messages list:
# [system, *history, user], so prior turns fit between the two parts.
Generator = Callable[[list[dict]], str]

EMPTY_DOCUMENT_REPLY = (
    "I apologize, but this document seems to be empty or was not processed "
    "correctly. Please try deleting and re-uploading it."
)
NO_MATCH_REPLY = (
    "I apologize, but I couldn't find any relevant information in this document "
    "to answer your question."
)

ANSWERED = "answered"
EMPTY_DOCUMENT = "empty_document"
NO_RELEVANT_MATCH = "no_relevant_match"


@dataclass(frozen=True)
class Turn:
    role: str  # "user" | "assistant"
    content: str


class ConversationMemory:
    """Bounded window of prior turns for one conversation.

    Holds at most *max_messages* turns; the oldest are dropped on append.
    Owned by the caller and passed to ChatService.answer() explicitly.
    """

    def __init__(self, max_messages: int = 10) -> None:
        if max_messages < 1:
            raise ValueError("max_messages must be >= 1")
        self.max_messages = max_messages
        self._turns: deque[Turn] = deque(maxlen=max_messages)

    def append(self, role: str, content: str) -> None:
        self._turns.append(Turn(role=role, content=content))

    @property
    def turns(self) -> list[Turn]:
        return list(self._turns)

    def to_messages(self) -> list[dict]:
        return [{"role": t.role, "content": t.content} for t in self._turns]

    def clear(self) -> None:
        self._turns.clear()

    def __len__(self) -> int:
        return len(self._turns)


@dataclass
class Answer:
    """Result of ChatService.answer().

    Attributes:
        text: Reply shown to the user.
        status: ANSWERED, EMPTY_DOCUMENT, or NO_RELEVANT_MATCH.
        contexts: Chunk texts the reply was grounded on (rank order).
    """

    text: str
    status: str = ANSWERED
    contexts: list[str] = field(default_factory=list)


class ChatService:
    """Answer questions with retrieval-augmented generation.

    Args:
        retriever: Retriever over the document index.
        generate:  Generation function taking OpenAI-style messages.
    """

    def __init__(self, retriever: Retriever, generate: Generator) -> None:
        self._retriever = retriever
        self._generate = generate

    def answer(
        self,
        question: str,
        document_id: str | None = None,
        memory: ConversationMemory | None = None,
        max_results: int | None = None,
        min_score: float | None = None,
    ) -> Answer:
        """Answer *question*, optionally restricted to one document.

        Raises:
            ValueError: If *question* is empty.
            EmbeddingFailed: The question could not be embedded.
            GenerationFailed: The generation function raised; memory is left
                unchanged.
        """
        if not question or not question.strip():
            raise ValueError("Question cannot be empty")

        logger.info("Question for document %s: %r", document_id, question)
        contexts = self._retriever.retrieve(
            question,
            scope_tag=document_id,
            max_results=max_results,
            min_score=min_score,
        )

        if isinstance(contexts, EmptyScope):
            return Answer(text=EMPTY_DOCUMENT_REPLY, status=EMPTY_DOCUMENT)
        if not contexts:
            logger.warning("No relevant chunks for question %r", question)
            return Answer(text=NO_MATCH_REPLY, status=NO_RELEVANT_MATCH)

        system_instruction, user_message = build_prompt(question, contexts)
        messages = [{"role": "system", "content": system_instruction}]
        if memory is not None:
            messages.extend(memory.to_messages())
        messages.append({"role": "user", "content": user_message})

        try:
            reply = self._generate(messages)
        except Exception as exc:
            raise GenerationFailed(f"Could not generate an answer: {exc}") from exc

        if memory is not None:
            memory.append("user", question)
            memory.append("assistant", reply)

        return Answer(text=reply, status=ANSWERED, contexts=list(contexts))
