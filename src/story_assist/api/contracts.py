"""Typed wire contracts for the completion relay."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ContractModel(BaseModel):
    """Base model config used by all relay contracts."""

    model_config = ConfigDict(extra="forbid")


class ChatMessagePayload(ContractModel):
    """One chat message forwarded to the upstream provider."""

    role: Literal["system", "user", "assistant"]
    content: str


class CompletionRelayRequest(ContractModel):
    """Body accepted by the relay completion endpoint."""

    messages: list[ChatMessagePayload] = Field(min_length=1)
    model: str | None = Field(default=None, min_length=1, max_length=200)


class HealthResponse(ContractModel):
    """Simple health payload used by probes."""

    status: Literal["ok"] = "ok"
    service: str = "story_assist.relay"
