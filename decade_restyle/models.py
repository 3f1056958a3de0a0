"""
Value types for Decade Restyle
Request payloads sent to Gemini and the outcomes interpreted from its replies
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


@dataclass(frozen=True)
class ImagePayload:
    """Uploaded photo as captured from its data URL

    `data` keeps the base64 text; `raw` holds the bytes decoded once at parse time.
    """
    mime_type: str
    data: str
    raw: bytes = field(default=b"", repr=False, compare=False)


@dataclass(frozen=True)
class GenerationRequest:
    """One image + prompt pair handed to the remote model"""
    image: ImagePayload
    prompt_text: str


class FailureKind(Enum):
    EMPTY_RESPONSE = "EmptyResponse"
    UNEXPECTED_TEXT_ONLY = "UnexpectedTextOnly"


@dataclass(frozen=True)
class ImageOutcome:
    data_url: str


@dataclass(frozen=True)
class PolicyRejected:
    raw_text: str


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    message: str


GenerationOutcome = Union[ImageOutcome, PolicyRejected, Failure]
