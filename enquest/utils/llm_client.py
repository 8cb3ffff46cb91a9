import time

import openai

from enquest.utils.logging_utils import get_logger

logger = get_logger("CONTENT_GEN")


class TextGenerationClient:
    """
    Prompt in, free text out. Wraps an OpenAI-compatible chat completions
    endpoint (DeepSeek by default).
    """

    def __init__(self, client, model, timeout=30.0):
        """
        Args:
            client: openai.OpenAI instance pointed at the provider
            model: model name passed on every request
            timeout: per-request timeout in seconds
        """
        self.client = client
        self.model = model
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        client = openai.OpenAI(api_key=config.llm_api_key, base_url=config.llm_base_url)
        return cls(client, config.llm_model, timeout=config.llm_timeout)

    def complete(self, prompt, max_tokens=1024, temperature=0.8, top_p=0.95):
        """Send a single user prompt and return the raw reply text ('' when empty)."""
        start = time.time()
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
            temperature=temperature,
            top_p=top_p,
            stream=False,
            timeout=self.timeout
        )
        logger.info(f"[LLM] {self.model}: {time.time() - start:.2f}s")

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
