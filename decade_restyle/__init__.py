"""
Decade Restyle

Re-renders an uploaded photo in the style of a chosen decade.
Uses the Gemini image model for generation, with bounded retry on transient
errors and a single generic-prompt fallback when the model declines for
content-policy reasons.

Entry points:
- generate_image: data-URL photo + prompt -> data-URL image
- generate_for_decade: data-URL photo + decade label -> data-URL image
- api_routes.create_app: aiohttp application exposing both over HTTP
"""

from .errors import (
    DecadeRestyleError,
    InvalidInputFormat,
    MissingCredential,
    RemoteCallError,
    TerminalRemoteError,
    ExhaustedRetries,
    UnclassifiedRemoteError,
    EmptyResponse,
    PolicyRejectedError,
    UnexpectedTextOnly,
)
from .restyler import DecadeRestyler, generate_image, generate_for_decade

__all__ = [
    "DecadeRestyler",
    "generate_image",
    "generate_for_decade",
    "DecadeRestyleError",
    "InvalidInputFormat",
    "MissingCredential",
    "RemoteCallError",
    "TerminalRemoteError",
    "ExhaustedRetries",
    "UnclassifiedRemoteError",
    "EmptyResponse",
    "PolicyRejectedError",
    "UnexpectedTextOnly",
]
