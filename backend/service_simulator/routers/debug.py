# service_simulator/routers/debug.py
import time

from fastapi import APIRouter, Depends, Query
from starlette.concurrency import run_in_threadpool

from service_simulator.burn import burn
from service_simulator.calibration import Calibration
from service_simulator.config import Settings
from service_simulator.lifespan import get_calibration, get_settings

router = APIRouter(prefix="/api/debug", tags=["debug"])


@router.get("/calibration")
def calibration_info(
    settings: Settings = Depends(get_settings),
    calibration: Calibration = Depends(get_calibration),
):
    """현재 calibration 값과 적용된 설정을 그대로 보여준다."""
    return {
        "iterations_per_second": calibration.iterations_per_second,
        "window": calibration.window,
        "config": settings.check(),
        "settings": settings.model_dump(),
    }


@router.get("/cpu-burn")
async def cpu_burn(
    ms: int = Query(100, ge=0, le=60_000),
    calibration: Calibration = Depends(get_calibration),
):
    """
    calibration 이 맞는지 확인용.
    ms 만큼 burn 을 돌리고 실제로 걸린 시간을 같이 돌려준다.
    """
    start = time.perf_counter()
    iterations = await run_in_threadpool(burn, ms, calibration)
    elapsed = time.perf_counter() - start

    return {
        "status": "ok",
        "target_ms": ms,
        "iterations": iterations,
        "elapsed_ms": round(elapsed * 1000, 3),
    }
