import pytest

from service_simulator.config import Settings

SETTINGS_ENV_VARS = [
    "NAME", "INIT_DELAY", "HOST", "PORT", "CPU", "MEMORY",
    "ENDPOINTS", "ENDPOINT_CPU", "ENDPOINT_DELAY", "ENDPOINT_CALL",
    "CALLOUT_TIMEOUT", "STRICT_CONFIG", "CALIBRATION_SECONDS",
    "ITERATIONS_PER_SECOND", "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in SETTINGS_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
        monkeypatch.delenv(var.lower(), raising=False)


@pytest.fixture
def make_settings():
    def _make(**overrides):
        # pinned calibration keeps app startup instant
        overrides.setdefault("iterations_per_second", 1000)
        return Settings(_env_file=None, **overrides)

    return _make


@pytest.fixture
def ping_settings(make_settings):
    return make_settings(
        name="Ping-Service",
        endpoints=["/ping"],
        endpoint_cpu=[10],
        endpoint_delay=[50],
        endpoint_call=[""],
    )
