"""
PromptMaster Backend - Abstract LLM Service Interface
=====================================================

What:  Abstract base class for the Generation/Improvement Stage.
How:   Concrete providers inherit from LLMService and implement every
       operation below. GeminiService is the production implementation;
       tests substitute AsyncMock objects with the same surface.
Who:   Called by PromptPipeline (generate, improve, transcribe) and by the
       ModelTranslator strategy of the translation fallback chain (translate).

Contract:
    - All operations are stateless apart from process-wide credentials
    - Provider errors are translated into ConfigurationError,
      UpstreamRateLimitError, UpstreamGenerationError or TranscriptionError
    - No automatic retries: a failure is terminal for the current request
"""

from abc import ABC, abstractmethod

from promptmaster.services.response_decoder import DecodedImprovement


class LLMService(ABC):
    """Abstract interface for the generative model behind the pipeline."""

    @abstractmethod
    async def generate(self, text: str) -> str:
        """
        Answer a user query with a single completion.

        Returns:
            The raw completion text (never empty).

        Raises:
            ConfigurationError, UpstreamRateLimitError, UpstreamGenerationError
        """
        ...

    @abstractmethod
    async def improve(self, text: str) -> DecodedImprovement:
        """
        Critique a prompt and produce an improved version.

        Returns:
            DecodedImprovement. Malformed model output degrades to a RAW
            result instead of raising.

        Raises:
            ConfigurationError, UpstreamRateLimitError, UpstreamGenerationError
        """
        ...

    @abstractmethod
    async def transcribe(self, audio: bytes, mime_type: str) -> str:
        """
        Transcribe spoken audio verbatim.

        Returns:
            Trimmed transcript.

        Raises:
            TranscriptionError: the model returned no text
            ConfigurationError, UpstreamRateLimitError, UpstreamGenerationError
        """
        ...

    @abstractmethod
    async def translate(self, text: str, source_language: str, target_language: str) -> str:
        """
        Translate text with a direct model instruction.

        Used only as the secondary strategy of the translation fallback chain,
        which absorbs any exception raised here.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Lightweight connectivity test. Returns False instead of raising."""
        ...
