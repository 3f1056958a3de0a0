"""
Response interpreter for Decade Restyle
Turns a raw Gemini reply into an image, a policy rejection, or a failure
"""

from typing import Optional

from .image_utils import build_image_data_url, detect_image_mime_type
from .models import Failure, FailureKind, GenerationOutcome, ImageOutcome, PolicyRejected

DEFAULT_TEXT_ONLY_MESSAGE = (
    "The AI returned a text response instead of an image. "
    "This might be due to safety filters."
)

POLICY_MARKER = "safety"


def _block_reason(reply) -> Optional[str]:
    feedback = getattr(reply, "prompt_feedback", None)
    reason = getattr(feedback, "block_reason", None) if feedback else None
    if reason is None:
        return None
    return getattr(reason, "value", str(reason))


def interpret_response(reply) -> GenerationOutcome:
    """
    Classify a generate_content reply

    Every part of the first candidate is scanned, so an image that follows
    commentary text is still found.

    Args:
        reply: GenerateContentResponse from the SDK

    Returns:
        ImageOutcome, PolicyRejected, or Failure
    """
    if reply is None or not reply.candidates:
        message = "No candidates present in the model response."
        reason = _block_reason(reply) if reply is not None else None
        if reason:
            message = f"{message} Prompt blocked: {reason}"
        return Failure(FailureKind.EMPTY_RESPONSE, message)

    content = reply.candidates[0].content
    parts = (content.parts if content else None) or []

    for part in parts:
        inline = part.inline_data
        if inline is not None and inline.data:
            mime_type = inline.mime_type or detect_image_mime_type(inline.data)
            return ImageOutcome(build_image_data_url(mime_type, inline.data))

    text = reply.text
    if text and POLICY_MARKER in text.lower():
        return PolicyRejected(text)

    return Failure(FailureKind.UNEXPECTED_TEXT_ONLY, text or DEFAULT_TEXT_ONLY_MESSAGE)
