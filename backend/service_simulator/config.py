# service_simulator/config.py
import json
import sys
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from pydantic import Field, NonNegativeInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(RuntimeError):
    """strict_config 가 켜져 있는데 endpoint 리스트 길이가 다르면 시작할 때 발생."""


@dataclass(frozen=True)
class EndpointDescriptor:
    path: str
    cpu: int
    delay: int
    call: str


class Settings(BaseSettings):
    # .env 파일은 실행 위치 기준
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",     # 모르는 env값 들어와도 무시하고 넘어감
        frozen=True,
    )

    name: str = "Service-#ID"
    init_delay: NonNegativeInt = Field(0, description="Delay after start up [ms]")
    host: str = "0.0.0.0"
    port: int = Field(8080, ge=1, le=65535)

    # idle 수치는 보고용 (실제로 소비하지 않음)
    cpu: NonNegativeInt = Field(50, description="CPU usage in idle time [mCPU]")
    memory: NonNegativeInt = Field(64, description="Memory usage in idle time [kB]")

    # 네 리스트의 k 번째 값이 모여 endpoint 하나를 이룬다
    endpoints: List[str] = Field(default_factory=lambda: ["/index", "/health"])
    # CPU 값은 그대로 burn 시간(ms)으로 쓴다
    endpoint_cpu: List[NonNegativeInt] = Field(
        default_factory=lambda: [1, 1],
        description="CPU burn for each endpoint [ms of busy loop]",
    )
    endpoint_delay: List[NonNegativeInt] = Field(
        default_factory=lambda: [30, 0],
        description="Delay for each endpoint [ms]",
    )
    endpoint_call: List[str] = Field(
        default_factory=lambda: ["", "asd__basf"],
        description="Targets to call out to, separated by '__'",
    )

    callout_timeout: Optional[float] = Field(30.0, gt=0, description="Per callout timeout [s]")
    strict_config: bool = False

    calibration_seconds: float = Field(1.0, gt=0)
    iterations_per_second: Optional[NonNegativeInt] = None

    log_level: str = "INFO"

    def check(self) -> bool:
        n = len(self.endpoints)
        return n == len(self.endpoint_cpu) and n == len(self.endpoint_delay) and n == len(self.endpoint_call)

    def endpoint_descriptors(self) -> List[EndpointDescriptor]:
        """
        endpoints 기준으로 행을 만든다.
        길이가 안 맞는 설정이면 빠진 값은 0 / "" 로 채워서 모든 경로를 계속 서비스한다.
        """
        descriptors = []
        for k, path in enumerate(self.endpoints):
            descriptors.append(
                EndpointDescriptor(
                    path=path,
                    cpu=self.endpoint_cpu[k] if k < len(self.endpoint_cpu) else 0,
                    delay=self.endpoint_delay[k] if k < len(self.endpoint_delay) else 0,
                    call=self.endpoint_call[k] if k < len(self.endpoint_call) else "",
                )
            )
        return descriptors


LIST_FLAGS = ("endpoints", "endpoint_cpu", "endpoint_delay", "endpoint_call")


def _collapse_list_flags(argv: Sequence[str]) -> List[str]:
    """
    반복된 리스트 플래그(--endpoint_call a --endpoint_call "")를 JSON 리스트 하나로 합친다.
    CLI 파서는 반복된 빈 값을 버리기 때문에, 합쳐서 넘겨야 빈 callout 칸이 유지된다.
    값이 '[' 로 시작하면 이미 JSON 리스트로 보고 이어 붙인다.
    """
    collected: Dict[str, List[Any]] = {}
    rest: List[str] = []

    i = 0
    while i < len(argv):
        arg = argv[i]
        flag, value = arg, None
        if arg.startswith("--") and "=" in arg:
            flag, value = arg.split("=", 1)

        name = flag[2:] if flag.startswith("--") else ""
        if name.replace("-", "_") in LIST_FLAGS:
            name = name.replace("-", "_")
            if value is None:
                if i + 1 >= len(argv):
                    raise ValueError(f"--{name} expects a value")
                value = argv[i + 1]
                i += 1
            if value.lstrip().startswith("["):
                collected.setdefault(name, []).extend(json.loads(value))
            else:
                collected.setdefault(name, []).append(value)
        else:
            rest.append(arg)
        i += 1

    for name, values in collected.items():
        rest.extend([f"--{name}", json.dumps(values)])
    return rest


def load_settings(argv: Optional[Sequence[str]] = None, **kwargs: Any) -> Settings:
    """env / .env / 커맨드라인(argv, 기본은 sys.argv[1:]) 순서로 읽어서 Settings 를 만든다."""
    if argv is None:
        argv = sys.argv[1:]
    return Settings(_cli_parse_args=_collapse_list_flags(argv), **kwargs)


settings = Settings()
