"""
core/config.py - 설정 파일 로드

YAML 설정 파일에서 AWS 자격 증명과 SWF 연결 정보를 읽습니다.

지원 형식:
    # ELB 모니터 (aws_credentials_path)
    access_key_id: AKIA...
    secret_access_key: ...
    region: eu-west-1

    # SWF 모니터 (config_path)
    simple_workflow_access_key_id: AKIA...
    simple_workflow_secret_access_key: ...
    simple_workflow_endpoint: swf.eu-west-1.amazonaws.com
    simple_workflow_domain: my-domain
    stack_id: blue            # 선택

Ruby 시절의 심볼 키(":access_key_id")도 그대로 읽을 수 있습니다.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from core.exceptions import ConfigError

VERSION_FILE = Path(__file__).resolve().parent.parent / "version.txt"
DEFAULT_VERSION = "0.0.0"

# swf.<region>.amazonaws.com
_SWF_ENDPOINT_REGION = re.compile(r"swf\.([a-z0-9-]+)\.amazonaws\.com")


def get_version() -> str:
    """version.txt에서 버전 문자열 반환"""
    try:
        return VERSION_FILE.read_text(encoding="utf-8").strip() or DEFAULT_VERSION
    except OSError:
        return DEFAULT_VERSION


def load_yaml(path: str | Path) -> dict[str, Any]:
    """YAML 설정 파일 로드

    Args:
        path: 파일 경로 (~ 확장)

    Returns:
        키가 정규화된 설정 딕셔너리

    Raises:
        ConfigError: 파일이 없거나, 파싱에 실패했거나, 매핑이 아닌 경우
    """
    config_file = Path(path).expanduser()
    try:
        with config_file.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(str(config_file), "설정 파일을 읽을 수 없습니다", cause=e) from e
    except yaml.YAMLError as e:
        raise ConfigError(str(config_file), "YAML 파싱 실패", cause=e) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(str(config_file), "최상위 값은 매핑이어야 합니다")

    return {_normalize_key(k): v for k, v in data.items()}


def _normalize_key(key: Any) -> str:
    # ":access_key_id" -> "access_key_id"
    return str(key).lstrip(":")


def _require(data: dict[str, Any], key: str, source: str | Path) -> str:
    value = data.get(key)
    if value in (None, ""):
        raise ConfigError(key, f"{source}에 값이 없습니다")
    return str(value)


@dataclass(frozen=True)
class AwsCredentials:
    """ELB 모니터용 AWS 자격 증명"""

    access_key_id: str
    secret_access_key: str
    region: str

    @classmethod
    def from_file(cls, path: str | Path) -> AwsCredentials:
        data = load_yaml(path)
        return cls(
            access_key_id=_require(data, "access_key_id", path),
            secret_access_key=_require(data, "secret_access_key", path),
            region=_require(data, "region", path),
        )


@dataclass(frozen=True)
class SwfConfig:
    """SWF 모니터 설정

    Attributes:
        access_key_id: SWF 전용 access key
        secret_access_key: SWF 전용 secret key
        endpoint: SWF 엔드포인트 (스킴 생략 가능)
        domain: 조회할 SWF 도메인
        region: 리전 (없으면 엔드포인트에서 추출)
        stack_id: 현재 배포 스택 식별자 (없으면 스택 필터링 안 함)
    """

    access_key_id: str
    secret_access_key: str
    endpoint: str
    domain: str
    region: str
    stack_id: str | None = None

    @property
    def endpoint_url(self) -> str:
        if "://" in self.endpoint:
            return self.endpoint
        return f"https://{self.endpoint}"

    @classmethod
    def from_file(cls, path: str | Path) -> SwfConfig:
        data = load_yaml(path)
        endpoint = _require(data, "simple_workflow_endpoint", path)

        region = data.get("simple_workflow_region")
        if not region:
            match = _SWF_ENDPOINT_REGION.search(endpoint)
            if not match:
                raise ConfigError(
                    "simple_workflow_region",
                    f"엔드포인트 {endpoint}에서 리전을 알 수 없습니다",
                )
            region = match.group(1)

        stack_id = data.get("stack_id")
        return cls(
            access_key_id=_require(data, "simple_workflow_access_key_id", path),
            secret_access_key=_require(data, "simple_workflow_secret_access_key", path),
            endpoint=endpoint,
            domain=_require(data, "simple_workflow_domain", path),
            region=str(region),
            stack_id=str(stack_id) if stack_id not in (None, "") else None,
        )
