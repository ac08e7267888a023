# service_simulator/simulation.py
import asyncio
import logging
import time
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

import aiohttp
from pydantic import BaseModel, ConfigDict, Field, field_serializer
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request

from service_simulator.burn import burn
from service_simulator.calibration import Calibration
from service_simulator.callouts import fanout
from service_simulator.config import EndpointDescriptor, Settings
from service_simulator.delay import reconcile

logger = logging.getLogger(__name__)


# ====== Pydantic 모델 ======
class RequestURL(BaseModel):
    scheme: str
    host: Optional[str] = None
    port: Optional[int] = None
    path: str
    query: str = ""
    fragment: str = ""


class SimulationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    service: str
    host: str = ""
    config_ok: bool = Field(alias="config")
    endpoint: str
    cpu: int
    delay: int
    callout_parameter: str = Field(alias="calloutparameter")
    callouts: List[str] = Field(default_factory=list)
    actual_delay: timedelta = Field(default=timedelta(0), alias="actualDelay")
    response_time: Optional[datetime] = Field(default=None, alias="time")
    request_method: str = Field(default="", alias="requestMethod")
    request_url: Optional[RequestURL] = Field(default=None, alias="requestURL")
    request_address: str = Field(default="", alias="requestAddr")

    @field_serializer("actual_delay")
    def _actual_delay_seconds(self, value: timedelta) -> float:
        return value.total_seconds()


# ====== 헬퍼 ======
def find_endpoint(descriptors: Sequence[EndpointDescriptor], path: str) -> Optional[EndpointDescriptor]:
    """설정 순서대로 훑어서 처음으로 정확히 일치하는 경로를 반환한다."""
    for descriptor in descriptors:
        if descriptor.path == path:
            return descriptor
    return None


def _request_url(request: Request) -> RequestURL:
    url = request.url
    return RequestURL(
        scheme=url.scheme,
        host=url.hostname,
        port=url.port,
        path=url.path,
        query=url.query,
        fragment=url.fragment,
    )


def _remote_address(request: Request) -> str:
    if request.client is None:
        return ""
    return f"{request.client.host}:{request.client.port}"


# ====== 요청 처리 ======
async def simulate(
    descriptor: EndpointDescriptor,
    *,
    settings: Settings,
    calibration: Calibration,
    session: aiohttp.ClientSession,
    request: Request,
) -> SimulationResponse:
    """
    한 요청의 처리 순서:
    callout 시작 → CPU burn → callout 대기 → 남은 지연만큼 sleep → 응답 마무리.
    """
    start = time.perf_counter()

    response = SimulationResponse(
        service=settings.name,
        config_ok=settings.check(),
        endpoint=descriptor.path,
        cpu=descriptor.cpu,
        delay=descriptor.delay,
        callout_parameter=descriptor.call,
    )

    # 1) callout 은 먼저 띄워 두고
    callout_task = asyncio.create_task(
        fanout(session, descriptor.call, timeout=settings.callout_timeout)
    )

    # 2) burn 은 워커 스레드에서 동기로 돈다 (이벤트 루프는 callout 을 계속 진행)
    iterations = await run_in_threadpool(burn, descriptor.cpu, calibration)

    # 3) 모든 callout 응답을 기다린 뒤 붙인다
    response.callouts = await callout_task

    # 4) 목표 지연까지 남았으면 더 기다린다
    slept = await reconcile(descriptor.delay, time.perf_counter() - start)

    response.response_time = datetime.now(timezone.utc)
    response.request_method = request.method
    response.request_url = _request_url(request)
    response.request_address = _remote_address(request)
    response.host = request.headers.get("host", "")
    response.actual_delay = timedelta(seconds=time.perf_counter() - start)

    logger.info(
        "[Request] %s %s done. burn_iterations=%d, slept=%.2fms, actual=%.2fms, callouts=%d",
        request.method, descriptor.path, iterations, slept * 1000,
        response.actual_delay.total_seconds() * 1000, len(response.callouts),
    )
    return response
