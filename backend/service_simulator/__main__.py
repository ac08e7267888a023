# service_simulator/__main__.py
# 예: python -m service_simulator --name Frontend --port 9090 --endpoints /read --endpoints /index \
#     --endpoint_cpu 99 --endpoint_cpu 22 --endpoint_delay 98 --endpoint_delay 202 \
#     --endpoint_call "'backend:8080/read'" --endpoint_call ""
# 리스트는 JSON 으로 한 번에 줘도 된다: --endpoint_call '["backend:8080/read", ""]'
import logging

import uvicorn

from service_simulator.config import load_settings
from service_simulator.logging_config import setup_logging
from service_simulator.main import create_app

logger = logging.getLogger("service_simulator")


def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)

    logger.info("[Main] Config values: %s", settings.model_dump())

    # 포트를 못 열면 uvicorn 이 non-zero 로 종료한다
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
