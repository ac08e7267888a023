# service_simulator/routers/endpoints.py
import html
import logging
from typing import List

import aiohttp
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from service_simulator.calibration import Calibration
from service_simulator.config import EndpointDescriptor, Settings
from service_simulator.lifespan import get_calibration, get_http_session, get_settings
from service_simulator.simulation import SimulationResponse, find_endpoint, simulate

logger = logging.getLogger(__name__)

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

fallback_router = APIRouter(tags=["fallback"])


def build_router(descriptors: List[EndpointDescriptor]) -> APIRouter:
    """설정된 경로마다 라우트를 하나씩 등록한다 (정확히 일치하는 경로만)."""
    router = APIRouter(tags=["endpoints"])

    async def handle_endpoint(
        request: Request,
        settings: Settings = Depends(get_settings),
        calibration: Calibration = Depends(get_calibration),
        session: aiohttp.ClientSession = Depends(get_http_session),
    ):
        logger.info("[Request] %s --> %s", request.url, request.url.path)

        descriptor = find_endpoint(descriptors, request.url.path)
        if descriptor is None:
            return _fallback_page(request, settings)

        return await simulate(
            descriptor,
            settings=settings,
            calibration=calibration,
            session=session,
            request=request,
        )

    registered = set()
    for i, descriptor in enumerate(descriptors):
        logger.info("[Routes] %d --> %s", i, descriptor.path)
        # 같은 경로가 두 번 있으면 첫 번째 행이 이긴다
        if descriptor.path in registered:
            continue
        registered.add(descriptor.path)
        router.add_api_route(
            descriptor.path,
            handle_endpoint,
            methods=ALL_METHODS,
            response_model=SimulationResponse,
            name=f"endpoint_{i}",
        )

    return router


def _fallback_page(request: Request, settings: Settings) -> HTMLResponse:
    logger.info("[Request] '%s' --> '%s' (no endpoint configured)", request.url, request.url.path)
    logger.debug("[Config] Config values: %s", settings.model_dump())

    client = request.client
    lines = [
        "<h1>'/' or 404 page</h1>",
        f"<p>method: {html.escape(request.method)}</p>",
        f"<p>url: {html.escape(str(request.url))}</p>",
        f"<p>remote: {html.escape(f'{client.host}:{client.port}' if client else '')}</p>",
        f"<p>headers: {html.escape(str(dict(request.headers)))}</p>",
    ]
    return HTMLResponse("\n".join(lines) + "\n", status_code=200)


@fallback_router.api_route("/{full_path:path}", methods=ALL_METHODS, include_in_schema=False)
async def fallback(request: Request, settings: Settings = Depends(get_settings)) -> HTMLResponse:
    return _fallback_page(request, settings)
