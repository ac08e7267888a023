# service_simulator/main.py
from typing import Optional

from fastapi import FastAPI

from service_simulator.config import Settings, settings as default_settings
from service_simulator.lifespan import lifespan
from service_simulator.routers import debug, endpoints


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    # lifespan=lifespan ➜ calibration / callout 세션 준비와 정리를 자동으로 수행
    app = FastAPI(title=settings.name, lifespan=lifespan)
    app.state.settings = settings

    # 라우터 등록 (catch-all 은 마지막)
    app.include_router(endpoints.build_router(settings.endpoint_descriptors()))
    app.include_router(debug.router)
    app.include_router(endpoints.fallback_router)

    return app


app = create_app()
