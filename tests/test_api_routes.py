import asyncio

from aiohttp import test_utils

from decade_restyle.api_routes import create_app
from decade_restyle.fallback import build_fallback_prompt

from fakes import (
    PNG_DATA_URL,
    FakeClientFactory,
    client_error,
    image_reply,
    text_reply,
)


def _post(app, path, payload=None, data=None):
    async def _request():
        async with test_utils.TestClient(test_utils.TestServer(app)) as client:
            if data is not None:
                resp = await client.post(path, data=data)
            else:
                resp = await client.post(path, json=payload)
            return resp.status, await resp.json()
    return asyncio.run(_request())


def test_generate_with_prompt(api_key, make_restyler):
    factory = FakeClientFactory(text_reply("safety"), image_reply())
    app = create_app(make_restyler(factory))
    status, body = _post(app, "/decade_restyle/generate", {"image": PNG_DATA_URL, "prompt": "the 1980s"})
    assert status == 200
    assert body["status"] == "success"
    assert body["image"].startswith("data:image/jpeg;base64,")
    assert "EXECUTION SUMMARY" in body["log"]
    assert factory.prompts() == ["the 1980s", build_fallback_prompt("1980s")]


def test_generate_with_decade(api_key, make_restyler):
    factory = FakeClientFactory(image_reply())
    app = create_app(make_restyler(factory))
    status, body = _post(app, "/decade_restyle/generate", {"image": PNG_DATA_URL, "decade": "1950s"})
    assert status == 200
    assert "1950s" in factory.prompts()[0]


def test_generate_reports_error_kind(api_key, make_restyler):
    factory = FakeClientFactory(client_error(429, "RESOURCE_EXHAUSTED", "Quota exceeded"))
    app = create_app(make_restyler(factory))
    status, body = _post(app, "/decade_restyle/generate", {"image": PNG_DATA_URL, "prompt": "the 1950s"})
    assert status == 502
    assert body["kind"] == "TerminalRemoteError"


def test_generate_rejects_bad_image(api_key, make_restyler):
    factory = FakeClientFactory(image_reply())
    app = create_app(make_restyler(factory))
    status, body = _post(app, "/decade_restyle/generate", {"image": "nope", "prompt": "the 1950s"})
    assert status == 400
    assert body["kind"] == "InvalidInputFormat"
    assert factory.calls == []


def test_generate_requires_prompt_or_decade(api_key, make_restyler):
    app = create_app(make_restyler(FakeClientFactory(image_reply())))
    status, body = _post(app, "/decade_restyle/generate", {"image": PNG_DATA_URL})
    assert status == 400


def test_generate_rejects_non_json_body(api_key, make_restyler):
    app = create_app(make_restyler(FakeClientFactory(image_reply())))
    status, body = _post(app, "/decade_restyle/generate", data="not json")
    assert status == 400


def test_verify_api_key(make_restyler):
    factory = FakeClientFactory(text_reply("ok"))
    app = create_app(make_restyler(factory))
    status, body = _post(app, "/decade_restyle/verify_api", {"api_key": "abc"})
    assert body == {"status": "success", "message": "API Key Valid"}
    assert factory.api_keys == ["abc"]


def test_verify_api_key_missing(make_restyler):
    app = create_app(make_restyler(FakeClientFactory(text_reply("ok"))))
    status, body = _post(app, "/decade_restyle/verify_api", {})
    assert body == {"status": "error", "message": "API Key Missing"}


def test_verify_api_key_invalid(make_restyler):
    factory = FakeClientFactory(client_error(400, "INVALID_ARGUMENT", "API key not valid."))
    restyler = make_restyler(factory)
    status, body = _post(create_app(restyler), "/decade_restyle/verify_api", {"api_key": "bad"})
    assert body["status"] == "error"
    assert restyler.client.status == "Invalid"


def test_verify_api_key_null_is_missing(make_restyler):
    factory = FakeClientFactory(text_reply("ok"))
    status, body = _post(create_app(make_restyler(factory)), "/decade_restyle/verify_api", {"api_key": None})
    assert body == {"status": "error", "message": "API Key Missing"}
    assert factory.calls == []
