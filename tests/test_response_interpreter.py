import base64

from google.genai import types

from decade_restyle.models import Failure, FailureKind, ImageOutcome, PolicyRejected
from decade_restyle.response_interpreter import DEFAULT_TEXT_ONLY_MESSAGE, interpret_response

from fakes import OUTPUT_BYTES, bare_candidate_reply, empty_reply, image_reply, text_reply


def test_inline_image_becomes_data_url():
    outcome = interpret_response(image_reply())
    expected = "data:image/jpeg;base64," + base64.b64encode(OUTPUT_BYTES).decode("ascii")
    assert outcome == ImageOutcome(expected)


def test_image_after_text_part_is_found():
    outcome = interpret_response(image_reply(leading_text="Here is your 1960s portrait."))
    assert isinstance(outcome, ImageOutcome)
    assert outcome.data_url.startswith("data:image/jpeg;base64,")


def test_first_image_part_wins():
    parts = [
        types.Part(text="two versions"),
        types.Part(inline_data=types.Blob(data=b"first", mime_type="image/png")),
        types.Part(inline_data=types.Blob(data=b"second", mime_type="image/png")),
    ]
    reply = types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=parts))]
    )
    outcome = interpret_response(reply)
    assert outcome == ImageOutcome("data:image/png;base64," + base64.b64encode(b"first").decode("ascii"))


def test_missing_mime_type_is_sniffed():
    reply = types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(
            role="model", parts=[types.Part(inline_data=types.Blob(data=OUTPUT_BYTES))]
        ))]
    )
    assert interpret_response(reply).data_url.startswith("data:image/jpeg;base64,")


def test_no_candidates_is_empty_response():
    outcome = interpret_response(empty_reply())
    assert isinstance(outcome, Failure)
    assert outcome.kind is FailureKind.EMPTY_RESPONSE


def test_empty_response_mentions_block_reason():
    outcome = interpret_response(empty_reply(block_reason="SAFETY"))
    assert outcome.kind is FailureKind.EMPTY_RESPONSE
    assert "SAFETY" in outcome.message


def test_safety_text_is_policy_rejection():
    text = "I can't create this image because of SAFETY guidelines."
    assert interpret_response(text_reply(text)) == PolicyRejected(text)


def test_other_text_is_unexpected_text_only():
    outcome = interpret_response(text_reply("Sure! What decade would you like?"))
    assert outcome == Failure(FailureKind.UNEXPECTED_TEXT_ONLY, "Sure! What decade would you like?")


def test_candidate_without_parts_uses_default_message():
    outcome = interpret_response(bare_candidate_reply())
    assert outcome == Failure(FailureKind.UNEXPECTED_TEXT_ONLY, DEFAULT_TEXT_ONLY_MESSAGE)
