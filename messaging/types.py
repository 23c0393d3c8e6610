from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from pydantic import BaseModel

DEFAULT_API_VERSION = "v21.0"
GRAPH_API_BASE_URL = "https://graph.facebook.com"


@dataclass(frozen=True)
class SendTemplateParams:
    """A single template send. `parameters` fill the body placeholders {{1}}, {{2}}, ... in order."""

    to: str  # E.164, e.g. "+224620123456"
    template: str  # name as registered in Business Manager
    language: str  # template language code, e.g. "fr"
    parameters: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if isinstance(self.parameters, str):
            raise TypeError("parameters must be a sequence of strings, not a single str")
        # accept any sequence (lists are the common case) but store immutably
        object.__setattr__(self, "parameters", tuple(self.parameters or ()))


@dataclass(frozen=True)
class SendTemplateResult:
    message_id: str  # "wamid.HBgL..." or "" when the provider returned none
    phone: str  # wire format, no leading "+"


class MetaApiErrorDetail(BaseModel):
    message: str
    type: str
    code: int
    fbtrace_id: Optional[str] = None


class MetaApiErrorBody(BaseModel):
    """Raw Graph API error envelope: {"error": {"message", "type", "code", "fbtrace_id"?}}."""

    error: MetaApiErrorDetail
