# service_simulator/callouts.py
import asyncio
import logging
from typing import List, Optional

import aiohttp

logger = logging.getLogger(__name__)

SEPARATOR = "__"

CALLOUT_FAILED = "Oops, calling out failed"
CALLOUT_READ_FAILED = "Oops, failed to convert response to string"
CALLOUT_TIMED_OUT = "Oops, calling out timed out"


def split_call_spec(spec: str) -> List[str]:
    """
    커맨드라인에서 들어온 따옴표를 지우고 '__' 로 나눈다.
    빈 문자열도 대상 하나(빈 타겟)로 취급한다.
    """
    cleaned = spec.replace("'", "").replace('"', "")
    return cleaned.split(SEPARATOR)


async def _call_one(
    session: aiohttp.ClientSession,
    index: int,
    target: str,
    results: List[str],
    timeout: aiohttp.ClientTimeout,
) -> None:
    url = "http://" + target
    logger.info("[Callout] #%d --> %s", index, url)

    try:
        resp = await session.get(url, timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("[Callout] #%d timed out: %s", index, url)
        results[index] = CALLOUT_TIMED_OUT
        return
    except (aiohttp.ClientError, ValueError) as e:
        logger.warning("[Callout] #%d failed: %s (%s)", index, url, e)
        results[index] = CALLOUT_FAILED
        return

    try:
        body = await resp.read()
    except asyncio.TimeoutError:
        logger.warning("[Callout] #%d timed out while reading: %s", index, url)
        results[index] = CALLOUT_TIMED_OUT
        return
    except aiohttp.ClientError as e:
        logger.warning("[Callout] #%d body read failed: %s (%s)", index, url, e)
        results[index] = CALLOUT_READ_FAILED
        return
    finally:
        resp.release()

    text = body.decode("utf-8", errors="replace")
    logger.info("[Callout] #%d response: HTTP %d, %d bytes", index, resp.status, len(body))
    results[index] = text


async def fanout(
    session: aiohttp.ClientSession,
    spec: str,
    timeout: Optional[float] = None,
) -> List[str]:
    """
    spec 의 모든 대상에 동시에 GET 을 보내고 전부 끝날 때까지 기다린다.
    각 태스크는 자기 인덱스 칸에만 쓰므로 결과 순서는 입력 순서와 같다.
    실패는 결과 칸의 고정 문자열로만 남고 예외로 올라가지 않는다.
    """
    targets = split_call_spec(spec)
    results: List[str] = [""] * len(targets)
    client_timeout = aiohttp.ClientTimeout(total=timeout)

    await asyncio.gather(
        *(
            _call_one(session, i, target, results, client_timeout)
            for i, target in enumerate(targets)
        )
    )
    return results
