import logging

from aiohttp import web

logger = logging.getLogger(__name__)


async def health(request: web.Request) -> web.Response:
    return web.Response(text="Bot is running!")


def create_app() -> web.Application:
    app = web.Application()
    app.router.add_get("/", health)
    return app


async def start_health_server(port: int) -> web.AppRunner:
    runner = web.AppRunner(create_app())
    await runner.setup()
    site = web.TCPSite(runner, "0.0.0.0", port)
    await site.start()
    logger.info(f"🌐 Server listening on port {port}")
    return runner
