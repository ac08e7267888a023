# service_simulator/burn.py
import logging
import time

from service_simulator.calibration import Calibration

logger = logging.getLogger(__name__)


def burn(milliseconds: int, calibration: Calibration) -> int:
    """
    milliseconds 만큼 CPU 한 코어를 바쁘게 돌린다.
    반복 횟수는 calibration 으로 미리 정해지고, 중간에 양보(sleep/await)하지 않는다.
    실행한 반복 횟수를 돌려준다.
    """
    needed = calibration.iterations_for(milliseconds)

    start = time.perf_counter()
    deadline = start + milliseconds / 1000
    iteration = 0
    dont_care = False

    # calibrate() 루프와 몸체(카운터 비교 + 시간 비교 저장)가 같아야 반복당 비용이 맞는다
    while iteration < needed:
        dont_care = deadline > time.perf_counter()
        iteration += 1

    logger.debug(
        "[Burn] target=%dms iterations=%d elapsed=%.2fms still_in_window=%s",
        milliseconds, iteration, (time.perf_counter() - start) * 1000, dont_care,
    )
    return iteration
