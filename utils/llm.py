"""Claude API client used as the completion service for every stage."""

import base64
import logging
import os

import anthropic

from config.defaults import load_max_tokens, load_model
from core.errors import ErrorKind, StageResult

logger = logging.getLogger(__name__)

JSON_INSTRUCTION = "IMPORTANT: Respond ONLY with valid JSON. No markdown fences, no commentary."


def get_client():
    """Return an Anthropic client. Raises if no API key is set."""
    api_key = os.environ.get("ANTHROPIC_API_KEY")
    if not api_key:
        raise RuntimeError(
            "ANTHROPIC_API_KEY environment variable is not set. "
            "Get a key at https://console.anthropic.com/ and run:\n"
            "  export ANTHROPIC_API_KEY='your-key-here'"
        )
    return anthropic.Anthropic(api_key=api_key)


def build_content(instruction, attachments=()):
    """Build the user message content: image blocks first, then the instruction."""
    if not attachments:
        return instruction
    blocks = []
    for image in attachments:
        blocks.append({
            "type": "image",
            "source": {
                "type": "base64",
                "media_type": image.mime_type,
                "data": base64.b64encode(image.data).decode("ascii"),
            },
        })
    blocks.append({"type": "text", "text": instruction})
    return blocks


class CompletionClient:
    """Blocking request/response wrapper around the Messages API.

    ``send`` never retries and never parses the response; failures come back
    as a ``CLIENT_FAILURE`` result carrying the SDK exception.
    """

    def __init__(self, api_key=None, model=None, max_tokens=None):
        self._api_key = api_key
        self._client = None
        self.model = model or load_model()
        self.max_tokens = max_tokens or load_max_tokens()

    def _get_client(self):
        if self._client is None:
            if self._api_key:
                self._client = anthropic.Anthropic(api_key=self._api_key)
            else:
                self._client = get_client()
        return self._client

    def send(self, instruction, system="", options=None) -> StageResult:
        """Send one instruction and return the response text.

        Args:
            instruction: The stage prompt.
            system: Optional system prompt.
            options: Optional dict. ``response_format="json"`` asks for a bare
                     JSON object; ``attachments`` is a sequence of
                     ImageAttachment sent ahead of the instruction.
        """
        options = options or {}
        if options.get("response_format") == "json":
            system = f"{system}\n\n{JSON_INSTRUCTION}" if system else JSON_INSTRUCTION

        kwargs = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{
                "role": "user",
                "content": build_content(instruction, options.get("attachments") or ()),
            }],
        }
        if system:
            kwargs["system"] = system

        client = self._get_client()
        try:
            # Use streaming to avoid SDK timeout for large max_tokens
            text = ""
            with client.messages.stream(**kwargs) as stream:
                for chunk in stream.text_stream:
                    text += chunk
                stop_reason = stream.get_final_message().stop_reason
        except anthropic.APIError as e:
            logger.warning("Completion request failed: %s", e)
            return StageResult.failure(ErrorKind.CLIENT_FAILURE, str(e), cause=e)

        if stop_reason == "max_tokens":
            logger.warning("Completion truncated at %d tokens", self.max_tokens)
            return StageResult.failure(
                ErrorKind.CLIENT_FAILURE,
                f"Response hit the token limit ({self.max_tokens}) and is incomplete",
            )

        logger.debug("Completion received: %d chars, stop_reason=%s", len(text), stop_reason)
        return StageResult.success(text)
