# service_simulator/calibration.py
import logging
import sys
import time
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Calibration:
    """
    이 머신에서 1초 동안 돌 수 있는 busy-loop 반복 횟수.
    프로세스 시작 시 한 번만 측정하고 이후에는 읽기 전용.
    """
    iterations_per_second: int
    window: float = 1.0

    def iterations_for(self, milliseconds: int) -> int:
        if milliseconds <= 0 or self.iterations_per_second <= 0:
            return 0
        return (self.iterations_per_second * milliseconds) // 1000


def calibrate(window_seconds: float = 1.0) -> Calibration:
    """
    window_seconds 동안 burn 루프와 같은 몸체를 반복하면서 횟수를 센다.
    부하가 없는 상태에서 측정해야 의미가 있다.
    """
    logger.info("[Calibration] Measuring busy-loop speed for %.3fs", window_seconds)

    start = time.perf_counter()
    deadline = start + window_seconds
    iterations = 0
    running = True

    # burn() 과 같은 형태: 카운터 비교 + 시간 비교 결과 저장 + 증가
    while iterations < sys.maxsize and running:
        running = deadline > time.perf_counter()
        iterations += 1

    elapsed = time.perf_counter() - start
    per_second = int(iterations / elapsed) if elapsed > 0 else 0

    logger.info(
        "[Calibration] Done. iterations=%d, elapsed=%.3fs, iterations_per_second=%d",
        iterations, elapsed, per_second,
    )
    return Calibration(iterations_per_second=per_second, window=window_seconds)
