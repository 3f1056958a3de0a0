"""
Decade Restyle - API Routes
HTTP endpoints for image generation and API key verification
"""

from typing import Optional

from aiohttp import web

from .errors import DecadeRestyleError
from .logger import RunLogger
from .restyler import DecadeRestyler, get_restyler

RESTYLER_KEY = web.AppKey("restyler", DecadeRestyler)

routes = web.RouteTableDef()


def _get_restyler(request: web.Request) -> DecadeRestyler:
    restyler = request.app.get(RESTYLER_KEY)
    return restyler if restyler is not None else get_restyler()


def _error_response(error: DecadeRestyleError, logger: RunLogger) -> web.Response:
    return web.json_response(
        {
            "status": "error",
            "kind": error.kind,
            "message": error.message,
            "log": logger.get_summary()
        },
        status=error.http_status
    )


@routes.post("/decade_restyle/generate")
async def generate(request: web.Request) -> web.Response:
    try:
        data = await request.json()
    except ValueError:
        return web.json_response(
            {"status": "error", "kind": "InvalidInputFormat", "message": "Request body must be JSON"},
            status=400
        )

    if not isinstance(data, dict):
        data = {}

    image = data.get("image", "")
    prompt = data.get("prompt")
    decade = data.get("decade")

    if not prompt and not decade:
        return web.json_response(
            {"status": "error", "kind": "InvalidInputFormat", "message": "Either 'prompt' or 'decade' is required"},
            status=400
        )

    restyler = _get_restyler(request)
    logger = RunLogger()

    try:
        if prompt:
            result = await restyler.generate(image, str(prompt), logger=logger)
        else:
            result = await restyler.generate_for_decade(image, str(decade), logger=logger)
    except DecadeRestyleError as e:
        return _error_response(e, logger)

    return web.json_response({"status": "success", "image": result, "log": logger.get_summary()})


@routes.post("/decade_restyle/verify_api")
async def verify_api_key(request: web.Request) -> web.Response:
    try:
        data = await request.json()
    except ValueError:
        data = {}

    if not isinstance(data, dict):
        data = {}
    api_key = str(data.get("api_key") or "").strip()
    if not api_key:
        return web.json_response({"status": "error", "message": "API Key Missing"})

    ok, message = await _get_restyler(request).client.verify_api_key(api_key)
    if ok:
        return web.json_response({"status": "success", "message": "API Key Valid"})
    return web.json_response({"status": "error", "message": message[:120]})


def create_app(restyler: Optional[DecadeRestyler] = None) -> web.Application:
    """Build an aiohttp application exposing the Decade Restyle routes"""
    app = web.Application(client_max_size=20 * 1024 ** 2)
    if restyler is not None:
        app[RESTYLER_KEY] = restyler
    app.add_routes(routes)
    return app
