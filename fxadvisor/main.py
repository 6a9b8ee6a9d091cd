"""FX Advisor — application entry point.

Builds the FastAPI app and provides the CLI entry point that wires the
services together and starts uvicorn.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fxadvisor.api.routers import router
from fxadvisor.errors import AdvisorError

app = FastAPI(title="FX Advisor API", version="0.1.0")
app.include_router(router)

logger = logging.getLogger("fxadvisor")


@app.exception_handler(AdvisorError)
async def advisor_error_handler(request: Request, exc: AdvisorError) -> JSONResponse:
    """Render taxonomy errors as ``{"message", "code", "resolution"}``."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/health")
async def health():
    return {"status": "ok"}


def build_services(config) -> None:
    """Construct the collaborators once and inject them into the routers."""
    from fxadvisor.api.routers import configure_routers
    from fxadvisor.chat.prompt import load_system_prompt
    from fxadvisor.chat.service import AdvisorService
    from fxadvisor.chat.sessions import InMemorySessionStore
    from fxadvisor.llm.openai_gateway import OpenAIGateway
    from fxadvisor.market.forex_data import ForexDataService
    from fxadvisor.market.twelvedata_client import TwelveDataClient

    advisor = AdvisorService(
        market=TwelveDataClient(config),
        llm=OpenAIGateway(config),
        sessions=InMemorySessionStore(ttl_seconds=config.session_ttl_seconds),
        system_prompt=load_system_prompt(config.system_prompt_path),
        candle_interval=config.candle_interval,
        candle_count=config.candle_count,
    )
    configure_routers(
        advisor=advisor,
        forex=ForexDataService(
            data_dir=config.data_dir,
            refresh_interval=config.forex_refresh_seconds,
        ),
        max_upload_bytes=config.max_upload_bytes,
    )


# ── CLI ──────────────────────────────────────────────────────────────────


def _run_cli() -> None:
    """Parse CLI arguments, wire services, and serve the API."""
    import argparse

    import uvicorn

    from fxadvisor.config import load_config

    parser = argparse.ArgumentParser(description="FX Advisor chatbot backend")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address")
    parser.add_argument("--port", type=int, default=None, help="Port (default: $PORT)")
    parser.add_argument("--env-file", default=None, help="Path to a .env file")
    args = parser.parse_args()

    config = load_config(args.env_file)

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    build_services(config)

    port = args.port or config.port
    logger.info("Starting FX Advisor on %s:%d", args.host, port)
    uvicorn.run(app, host=args.host, port=port, log_level=config.log_level.lower())


if __name__ == "__main__":
    _run_cli()
