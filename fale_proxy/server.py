"""fale_proxy.server: HTTP-интерфейс прокси на aiohttp.web.

Маршруты:
  POST    /fetch   загрузить страницу и вернуть её с заменённым текстом
  OPTIONS /fetch   CORS preflight, пустой ответ 200
  *       /fetch   405 Method not allowed
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, Optional

from aiohttp import web

from fale_proxy.config import ProxyConfig
from fale_proxy.engine import PageSource, proxy_page
from fale_proxy.exceptions import ProxyError, UrlRequiredError
from fale_proxy.fetcher import Fetcher, build_session
from fale_proxy.logger import logger
from fale_proxy.models import error_body
from fale_proxy.parser.html_rewriter import SubstitutionRule

__all__ = ["create_app", "run_server", "CONFIG_KEY", "RULE_KEY", "SOURCE_KEY"]

CONFIG_KEY = web.AppKey("config", ProxyConfig)
RULE_KEY = web.AppKey("rule", SubstitutionRule)
SOURCE_KEY = web.AppKey("source", PageSource)

_ALLOW_METHODS = "GET,OPTIONS,PATCH,DELETE,POST,PUT"
_ALLOW_HEADERS = (
    "X-CSRF-Token, X-Requested-With, Accept, Accept-Version, Content-Length, "
    "Content-MD5, Content-Type, Date, X-Api-Version"
)

_Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


class _BadBody(Exception):
    pass


def _apply_cors(headers, cfg: ProxyConfig) -> None:
    headers["Access-Control-Allow-Origin"] = cfg.allow_origin
    headers["Access-Control-Allow-Credentials"] = "true"
    headers["Access-Control-Allow-Methods"] = _ALLOW_METHODS
    headers["Access-Control-Allow-Headers"] = _ALLOW_HEADERS


@web.middleware
async def cors_middleware(request: web.Request, handler: _Handler) -> web.StreamResponse:
    """Добавляет CORS-заголовки ко всем ответам, включая ошибки маршрутизации."""
    cfg = request.app[CONFIG_KEY]
    try:
        response = await handler(request)
    except web.HTTPException as exc:
        _apply_cors(exc.headers, cfg)
        raise
    _apply_cors(response.headers, cfg)
    return response


async def _read_body(request: web.Request) -> Dict[str, Any]:
    """Тело запроса: JSON или form-urlencoded. Без тела возвращается пустой словарь."""
    if request.content_type == "application/json":
        if not request.can_read_body:
            return {}
        try:
            data = await request.json()
        except ValueError as exc:
            # JSONDecodeError and UnicodeDecodeError are both ValueError
            raise _BadBody("Invalid JSON body") from exc
        return data if isinstance(data, dict) else {}
    if request.content_type in ("application/x-www-form-urlencoded", "multipart/form-data"):
        return dict(await request.post())
    return {}


async def handle_fetch(request: web.Request) -> web.Response:
    if request.method == "OPTIONS":
        return web.Response(status=200)
    if request.method != "POST":
        return web.json_response(error_body("Method not allowed"), status=405)

    try:
        body = await _read_body(request)
    except _BadBody as exc:
        return web.json_response(error_body(str(exc)), status=400)

    raw_url = body.get("url")
    if not isinstance(raw_url, str):
        raw_url = None

    try:
        payload = await proxy_page(raw_url, request.app[SOURCE_KEY], request.app[RULE_KEY])
    except UrlRequiredError as exc:
        return web.json_response(error_body(str(exc)), status=400)
    except ProxyError as exc:
        logger.error("Error fetching URL: %s", exc)
        return web.json_response(error_body(f"Failed to fetch content: {exc}"), status=500)

    return web.json_response(payload.to_dict())


async def _client_session_ctx(app: web.Application):
    """Открывает общий ClientSession на время жизни приложения."""
    session = build_session(app[CONFIG_KEY])
    app[SOURCE_KEY] = Fetcher(session)
    yield
    await session.close()


def create_app(config: Optional[ProxyConfig] = None, source: Optional[PageSource] = None) -> web.Application:
    """Собирает приложение. Без *source* страницы загружаются через aiohttp Fetcher."""
    cfg = config or ProxyConfig()
    app = web.Application(middlewares=[cors_middleware])
    app[CONFIG_KEY] = cfg
    app[RULE_KEY] = SubstitutionRule(cfg.pattern, cfg.replacement)
    if source is not None:
        app[SOURCE_KEY] = source
    else:
        app.cleanup_ctx.append(_client_session_ctx)
    app.router.add_route("*", "/fetch", handle_fetch)
    return app


def run_server(config: ProxyConfig) -> None:
    """Блокирующий запуск сервера (используется командой ``serve``)."""
    logger.info("FaleProxy server running at http://%s:%s", config.host, config.port)
    web.run_app(create_app(config), host=config.host, port=config.port, print=None)
