# service_simulator/delay.py
import asyncio
import logging

logger = logging.getLogger(__name__)


async def reconcile(delay_ms: int, elapsed: float) -> float:
    """
    목표 지연(delay_ms)에서 이미 흐른 시간(elapsed, 초)을 빼고 남은 만큼만 잔다.
    이미 늦었으면 바로 반환한다. 실제로 잔 시간(초)을 돌려준다.
    """
    remaining = delay_ms / 1000 - elapsed
    if remaining <= 0:
        logger.debug("[Delay] target=%dms already exceeded by %.2fms", delay_ms, -remaining * 1000)
        return 0.0

    await asyncio.sleep(remaining)
    return remaining
