import asyncio

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from service_simulator.callouts import CALLOUT_FAILED
from service_simulator.config import ConfigurationError
from service_simulator.lifespan import lifespan
from service_simulator.main import create_app


def test_ping_endpoint_reports_what_it_did(ping_settings):
    with TestClient(create_app(ping_settings)) as client:
        resp = client.get("/ping?trace=1")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/json")

    body = resp.json()
    assert body["service"] == "Ping-Service"
    assert body["config"] is True
    assert body["endpoint"] == "/ping"
    assert body["cpu"] == 10
    assert body["delay"] == 50
    assert body["calloutparameter"] == ""
    assert body["callouts"] == [CALLOUT_FAILED]
    assert body["actualDelay"] >= 0.05
    assert body["time"]
    assert body["requestMethod"] == "GET"
    assert body["requestURL"]["path"] == "/ping"
    assert body["requestURL"]["query"] == "trace=1"
    assert body["host"] == "testserver"
    assert body["requestAddr"].startswith("testclient:")


def test_configured_endpoint_accepts_any_method(ping_settings):
    with TestClient(create_app(ping_settings)) as client:
        resp = client.post("/ping", json={"ignored": True})

    assert resp.status_code == 200
    assert resp.json()["requestMethod"] == "POST"


def test_unconfigured_path_gets_fallback_page(ping_settings):
    with TestClient(create_app(ping_settings)) as client:
        resp = client.get("/nope")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert "'/' or 404 page" in resp.text
    assert "/nope" in resp.text


def test_mismatched_config_still_serves_with_flag(make_settings):
    settings = make_settings(endpoints=["/a", "/b"], endpoint_cpu=[1], endpoint_delay=[0, 0], endpoint_call=["", ""])

    with TestClient(create_app(settings)) as client:
        first = client.get("/a").json()
        second = client.get("/b").json()

    assert first["config"] is False
    assert second["config"] is False
    assert second["endpoint"] == "/b"
    assert second["cpu"] == 0


def test_duplicate_paths_use_first_row(make_settings):
    settings = make_settings(
        endpoints=["/dup", "/dup"],
        endpoint_cpu=[1, 2],
        endpoint_delay=[0, 0],
        endpoint_call=["", "x__y"],
    )

    with TestClient(create_app(settings)) as client:
        body = client.get("/dup").json()

    assert body["cpu"] == 1
    assert len(body["callouts"]) == 1


def test_debug_routes_report_calibration(make_settings):
    settings = make_settings(iterations_per_second=4000)

    with TestClient(create_app(settings)) as client:
        info = client.get("/api/debug/calibration").json()
        burned = client.get("/api/debug/cpu-burn", params={"ms": 5}).json()

    assert info["iterations_per_second"] == 4000
    assert info["config"] is True
    assert info["settings"]["name"] == "Service-#ID"
    assert burned["iterations"] == 20
    assert burned["target_ms"] == 5


def test_strict_config_aborts_startup(make_settings):
    settings = make_settings(endpoints=["/a"], endpoint_cpu=[], strict_config=True)
    app = FastAPI()
    app.state.settings = settings

    async def start():
        async with lifespan(app):
            pass

    with pytest.raises(ConfigurationError):
        asyncio.run(start())


def test_lifespan_measures_calibration_when_not_pinned(make_settings):
    settings = make_settings(iterations_per_second=None, calibration_seconds=0.05)
    app = FastAPI()
    app.state.settings = settings

    async def start():
        async with lifespan(app):
            return app.state.calibration

    calibration = asyncio.run(start())

    assert calibration.window == 0.05
    assert calibration.iterations_per_second > 0
    assert app.state.http_session.closed


def test_lifespan_waits_init_delay_before_serving(make_settings):
    settings = make_settings(init_delay=50)
    app = FastAPI()
    app.state.settings = settings

    async def start():
        loop = asyncio.get_running_loop()
        began = loop.time()
        async with lifespan(app):
            return loop.time() - began

    assert asyncio.run(start()) >= 0.045
