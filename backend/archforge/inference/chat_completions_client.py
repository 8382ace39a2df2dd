import json
import re
from typing import Dict, Iterator, List, Optional

import requests

from archforge.inference.base import LLMClient


class ChatCompletionsClient(LLMClient):
    """OpenAI-compatible /chat/completions client (works with Gemini's compatibility endpoint)."""

    def __init__(
        self,
        base_url: str,
        model: str,
        temperature: float = 0.2,
        api_key: Optional[str] = None,
        timeout: float = 300,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.api_key = api_key
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            return {}
        return {"Authorization": f"Bearer {self.api_key}"}

    def _payload(self, messages, stream: bool) -> dict:
        return {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "stream": stream,
        }

    def generate(self, messages: List[Dict]) -> str:
        url = f"{self.base_url}/chat/completions"

        response = requests.post(
            url,
            json=self._payload(messages, stream=False),
            headers=self._headers(),
            timeout=self.timeout,
        )
        response.raise_for_status()

        content = response.json()["choices"][0]["message"].get("content")
        if not isinstance(content, str):
            # e.g. a content-filtered reply carries "content": null
            raise ValueError("response carried no text content")

        #  STRIP MARKDOWN FENCES
        content = re.sub(r"^```(?:\w+)?\s*", "", content.strip())
        content = re.sub(r"\s*```$", "", content.strip())

        return content

    def stream(self, messages: List[Dict]) -> Iterator[str]:
        """Yields content deltas from a server-sent-events response."""
        url = f"{self.base_url}/chat/completions"

        with requests.post(
            url,
            json=self._payload(messages, stream=True),
            headers=self._headers(),
            timeout=self.timeout,
            stream=True,
        ) as response:
            response.raise_for_status()

            for line in response.iter_lines(decode_unicode=True):
                if not line or not line.startswith("data:"):
                    continue

                data = line[len("data:"):].strip()
                if data == "[DONE]":
                    break

                chunk = json.loads(data)
                choices = chunk.get("choices") or []
                if not choices:
                    continue

                delta = (choices[0].get("delta") or {}).get("content")
                if delta:
                    yield delta
