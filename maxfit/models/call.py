# maxfit/models/call.py
# Vapi call objects are provider-defined; only the fields we read are declared.

from pydantic import BaseModel, ConfigDict
from typing import Any, Dict, List, Optional

DEFAULT_ASSISTANT_NAME = "MaxFit AI Assistant"


class CostBreakdown(BaseModel):
    model_config = ConfigDict(extra="allow")

    total: Optional[float] = None
    transport: Optional[float] = None
    stt: Optional[float] = None
    llm: Optional[float] = None
    tts: Optional[float] = None
    vapi: Optional[float] = None


class AssistantInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None


class VariableValues(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: Optional[str] = None
    name: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None


class AssistantOverrides(BaseModel):
    model_config = ConfigDict(extra="allow")

    variableValues: Optional[VariableValues] = None


class Artifact(BaseModel):
    model_config = ConfigDict(extra="allow")

    transcript: Optional[str] = None
    messages: Optional[List[Any]] = None


class Analysis(BaseModel):
    model_config = ConfigDict(extra="allow")

    summary: Optional[str] = None
    structuredData: Optional[Any] = None


class VapiCallLog(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    orgId: Optional[str] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    startedAt: Optional[str] = None
    endedAt: Optional[str] = None
    cost: Optional[float] = None
    costBreakdown: Optional[CostBreakdown] = None
    assistant: Optional[AssistantInfo] = None
    assistantId: Optional[str] = None
    assistantOverrides: Optional[AssistantOverrides] = None
    metadata: Optional[Dict[str, Any]] = None
    artifact: Optional[Artifact] = None
    analysis: Optional[Analysis] = None


class CallLogView(BaseModel):
    id: str
    assistantName: str
    createdAt: Optional[str] = None
    startedAt: Optional[str] = None
    endedAt: Optional[str] = None
    duration: int = 0
    status: Optional[str] = None
    type: Optional[str] = None
    cost: float = 0
    costBreakdown: Optional[Dict[str, Any]] = None
    transcript: str = ""
    summary: str = ""
    orgId: Optional[str] = None
    assistantId: Optional[str] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int
