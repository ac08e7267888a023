# service_simulator/lifespan.py
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

import aiohttp
from fastapi import FastAPI, Request

from service_simulator.calibration import Calibration, calibrate
from service_simulator.config import ConfigurationError, Settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    앱 수명주기에 맞춰 calibration / 시작 지연 / callout 용 HTTP 세션을 준비하고 정리한다.
    create_app() 에서: FastAPI(lifespan=lifespan), app.state.settings 를 미리 넣어 둔다.
    """
    settings: Settings = app.state.settings

    config_ok = settings.check()
    logger.info("[Config] Parameters OK: %s", config_ok)
    if not config_ok:
        if settings.strict_config:
            raise ConfigurationError(
                "endpoints, endpoint_cpu, endpoint_delay and endpoint_call must have the same length "
                f"(got {len(settings.endpoints)}, {len(settings.endpoint_cpu)}, "
                f"{len(settings.endpoint_delay)}, {len(settings.endpoint_call)})"
            )
        logger.warning("[Config] Endpoint lists differ in length; serving anyway with config=false")

    # calibration 은 요청을 받기 전에 한 번만
    if settings.iterations_per_second is not None:
        app.state.calibration = Calibration(
            iterations_per_second=settings.iterations_per_second,
            window=0.0,
        )
        logger.info("[Calibration] Using configured iterations_per_second=%d", settings.iterations_per_second)
    else:
        app.state.calibration = calibrate(settings.calibration_seconds)

    if settings.init_delay > 0:
        logger.info("[Startup] Waiting init_delay=%dms before serving", settings.init_delay)
        await asyncio.sleep(settings.init_delay / 1000)

    app.state.http_session = aiohttp.ClientSession()

    try:
        yield
    finally:
        await app.state.http_session.close()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_calibration(request: Request) -> Calibration:
    """의존성 주입용. lifespan 이 안 돌았으면 에러."""
    calibration = getattr(request.app.state, "calibration", None)
    if calibration is None:
        raise RuntimeError("Calibration is not initialized. Did you attach lifespan?")
    return calibration


def get_http_session(request: Request) -> aiohttp.ClientSession:
    session = getattr(request.app.state, "http_session", None)
    if session is None:
        raise RuntimeError("HTTP session is not initialized. Did you attach lifespan?")
    return session
