"""
Reconstructed response model.

Standardizes the output of the translation pipeline.
"""

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class ReconstructedResponse(BaseModel):
    """
    Fully validated response, ready to be sent to the caller.

    Used to decouple the translation pipeline from FastAPI Response objects.
    """

    status_code: int
    headers: Dict[str, str] = Field(default_factory=dict)
    body: bytes = b""

    model_config = ConfigDict(frozen=True)
