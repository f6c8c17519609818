"""Request and response bodies for the HTTP API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ExecuteQueryRequest(BaseModel):
    sql: str = Field(min_length=1)


class ExecuteQueryResponse(BaseModel):
    data: list[dict[str, Any]]
    message: str


class GenerateSQLRequest(BaseModel):
    prompt: str = Field(min_length=1)


class GenerateSQLResponse(BaseModel):
    sql: str


class DebugInconsistencyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    problem_description: str = Field(alias="problemDescription", min_length=1)


class ViewDefinitionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    view_name: str = Field(alias="viewName")
    definition: str
    created_at: str | None = None


class ViewListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    views: list[str]
    all_views: dict[str, Any] = Field(alias="allViews")


class TableDumpResponse(BaseModel):
    table: str
    count: int
    data: Any


# 400 messages for request bodies that fail validation, by path
INVALID_BODY_MESSAGES = {
    "/execute-query": "Invalid SQL provided",
    "/generate-sql": "Invalid prompt provided",
    "/debug-inconsistency": "Invalid problem description provided",
}


__all__ = [
    "ExecuteQueryRequest",
    "ExecuteQueryResponse",
    "GenerateSQLRequest",
    "GenerateSQLResponse",
    "DebugInconsistencyRequest",
    "ViewDefinitionResponse",
    "ViewListResponse",
    "TableDumpResponse",
    "INVALID_BODY_MESSAGES",
]
