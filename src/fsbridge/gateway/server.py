import os
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool
import uvicorn

from fsbridge.config.config import BridgeConfig, load_config
from fsbridge.bridge.dispatch import Dispatcher, create_dispatcher, encode_result
from fsbridge.bridge.errors import TransportError
from fsbridge.logging.diagnostic import log_transport_failure, set_log_level

# Open flags the sandboxed runtime must translate into host values.
HOST_FLAGS = ("O_WRONLY", "O_RDWR", "O_CREAT", "O_TRUNC", "O_APPEND", "O_EXCL")


def host_flags() -> dict:
    return {name: getattr(os, name) for name in HOST_FLAGS}


def create_app(
    config: Optional[BridgeConfig] = None,
    dispatcher: Optional[Dispatcher] = None,
) -> FastAPI:
    config = config or load_config()
    dispatcher = dispatcher or create_dispatcher()

    app = FastAPI(title="fsbridge")
    app.state.config = config
    app.state.dispatcher = dispatcher

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/host")
    async def host():
        return {
            "cwd": os.getcwd(),
            "flags": host_flags(),
            "operations": dispatcher.implemented(),
            "unimplemented": dispatcher.unimplemented(),
        }

    @app.api_route(f"{config.base_path}/{{op:path}}", methods=["GET", "POST", "PUT"])
    async def forward(op: str, request: Request):
        body = await request.body()
        try:
            # blocking syscall: one threadpool worker per request
            result = await run_in_threadpool(dispatcher.dispatch, op, body)
            content = encode_result(result)
        except TransportError as e:
            log_transport_failure(op, e.message)
            return PlainTextResponse(e.message, status_code=400)

        return Response(content=content, media_type="application/json")

    return app


def start_server(config: Optional[BridgeConfig] = None):
    config = config or load_config()
    set_log_level(config.log_level)
    app = create_app(config)
    print(f"\nfsbridge running on http://{config.host}:{config.port}")
    print(f"   Operations: {config.base_path}/<op>")
    print("   Endpoints: GET /host | GET /health\n")

    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())
