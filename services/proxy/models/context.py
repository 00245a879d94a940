"""
Input context models.

Encapsulates all data required to translate an inbound request.
"""

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class InputContext(BaseModel):
    """
    Read-only snapshot of an inbound request.

    This model decouples the translation layer from FastAPI's Request object.
    Headers hold one value per name; query_params is the form-decoded query
    with the last value winning on duplicate keys.
    """

    method: str
    path: str
    raw_query: str = ""
    query_params: Dict[str, str] = Field(default_factory=dict)
    headers: Dict[str, str] = Field(default_factory=dict)
    body: bytes = b""

    model_config = ConfigDict(frozen=True)
