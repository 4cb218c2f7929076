from abc import ABC, abstractmethod
import os
from typing import Any, Union

from langchain_aws import ChatBedrock
from langchain_core.messages import BaseMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

ChatInput = Union[str, list[BaseMessage]]


class BaseChatbot(ABC):
    llm: Any

    @abstractmethod
    async def get_text_response_async(self, prompt: ChatInput) -> str:
        pass


class GeminiChatbot(BaseChatbot):
    def __init__(self, model_name: str = "gemini-2.0-flash", temperature: float = 0, max_tokens: int | None = None):
        self.llm = ChatGoogleGenerativeAI(model=model_name, temperature=temperature, max_output_tokens=max_tokens)

    async def get_text_response_async(self, prompt: ChatInput) -> str:
        response = await self.llm.ainvoke(prompt)
        return response.text()


class ClaudeSonnetChatbot(BaseChatbot):
    def __init__(self, temperature: float = 0, max_tokens: int | None = None):
        stage = os.getenv("STAGE", "local").lower()

        model_kwargs: dict[str, Any] = {"temperature": temperature}
        if max_tokens:
            model_kwargs["max_tokens"] = max_tokens
        bedrock_kwargs = {
            "model": "us.anthropic.claude-3-7-sonnet-20250219-v1:0",
            "model_kwargs": model_kwargs,
            "region": os.getenv("AWS_REGION", "us-east-1"),
        }

        # Only use profile for local development if AWS_PROFILE is explicitly set
        if stage == "local" and os.getenv("AWS_PROFILE"):
            bedrock_kwargs["credentials_profile_name"] = os.getenv("AWS_PROFILE")

        self.llm = ChatBedrock(**bedrock_kwargs)

    async def get_text_response_async(self, prompt: ChatInput) -> str:
        response = await self.llm.ainvoke(prompt)
        return response.text()


class OpenAIChatbot(BaseChatbot):
    def __init__(self, model_name: str = "gpt-4o", temperature: float = 0, max_tokens: int | None = None):
        self.llm = ChatOpenAI(model=model_name, temperature=temperature, max_tokens=max_tokens, api_key=os.getenv("OPENAI_API_KEY"))

    async def get_text_response_async(self, prompt: ChatInput) -> str:
        response = await self.llm.ainvoke(prompt)
        return response.text()
