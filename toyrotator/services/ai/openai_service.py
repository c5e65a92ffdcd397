"""OpenAI API integration for JSON chat completions and vision prompts."""

import time
from typing import Optional

from openai import OpenAI

from toyrotator.utils.logger import get_logger

logger = get_logger(__name__)


class OpenAIService:
    """Service for structured generation using the OpenAI chat API."""

    # Default parameters
    DEFAULT_MAX_TOKENS = 800
    DEFAULT_TEMPERATURE = 0.4
    DEFAULT_TIMEOUT = 30  # seconds
    DEFAULT_RETRIES = 2

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        vision_model: str = "gpt-4o-mini",
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_RETRIES,
    ):
        """
        Initialize OpenAI service.

        Args:
            api_key: OpenAI API key
            model: Model for text prompts
            vision_model: Model for prompts with an image
            timeout: Request timeout in seconds
            max_retries: Maximum number of attempts

        Raises:
            ValueError: If api_key is empty
        """
        if not api_key:
            raise ValueError("API key cannot be empty")

        # Retries are handled below so each attempt gets logged
        self.client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.model = model
        self.vision_model = vision_model
        self.timeout = timeout
        self.max_retries = max_retries

        logger.info("OpenAIService initialized with model=%s, vision_model=%s, timeout=%s",
                    model, vision_model, timeout)

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        image_url: Optional[str] = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> str:
        """
        Run a chat completion that must answer with a JSON object.

        Args:
            system_prompt: Instructions for the model
            user_prompt: Request text
            image_url: Optional image as a ``data:image/*;base64,`` URL
            max_tokens: Maximum tokens in response
            temperature: Sampling temperature (0.0-2.0)

        Returns:
            Raw message content

        Raises:
            ValueError: If a prompt is empty
            RuntimeError: If every attempt fails
        """
        if not system_prompt or not user_prompt:
            raise ValueError("Prompts cannot be empty")

        if image_url:
            model = self.vision_model
            content = [
                {"type": "text", "text": user_prompt},
                {
                    "type": "image_url",
                    "image_url": {"url": image_url, "detail": "low"},
                },
            ]
        else:
            model = self.model
            content = user_prompt

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": content},
        ]

        last_error = None

        for attempt in range(self.max_retries):
            try:
                logger.debug("Chat completion (attempt %d/%d) with model=%s",
                             attempt + 1, self.max_retries, model)

                response = self.client.chat.completions.create(
                    model=model,
                    messages=messages,
                    response_format={"type": "json_object"},
                    max_tokens=max_tokens,
                    temperature=temperature,
                )

                text = (response.choices[0].message.content or "").strip()
                usage = response.usage.total_tokens if response.usage else None
                logger.info("Chat completion succeeded with model=%s, tokens_used=%s", model, usage)
                return text

            except Exception as e:
                last_error = e
                logger.warning("Chat completion attempt %d/%d failed: %s",
                               attempt + 1, self.max_retries, str(e))

                # Exponential backoff: 1s, 2s, 4s
                if attempt < self.max_retries - 1:
                    time.sleep(2 ** attempt)

        error_message = (
            f"Chat completion failed after {self.max_retries} attempts. "
            f"Last error: {str(last_error)}"
        )
        logger.error(error_message)
        raise RuntimeError(error_message) from last_error
