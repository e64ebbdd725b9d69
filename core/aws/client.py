"""
core/aws/client.py - boto3 session/client 생성 헬퍼

타임아웃이 설정된 boto3 client를 생성합니다.
재시도 정책은 botocore 기본값을 그대로 사용하고, 그 이상은 호출한 스케줄러의 몫입니다.

Example:
    from core.aws.client import create_session, get_client

    session = create_session("AKIA...", "secret", "eu-west-1")
    elb = get_client(session, "elb")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

if TYPE_CHECKING:
    import boto3

DEFAULT_CONNECT_TIMEOUT = 10  # 초
DEFAULT_READ_TIMEOUT = 30  # 초


def create_session(
    access_key_id: str,
    secret_access_key: str,
    region_name: str,
) -> boto3.Session:
    """정적 자격 증명으로 boto3 Session 생성"""
    import boto3

    return boto3.Session(
        aws_access_key_id=access_key_id,
        aws_secret_access_key=secret_access_key,
        region_name=region_name,
    )


def get_client(
    session: boto3.Session,
    service_name: str,
    region_name: str | None = None,
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT,
    read_timeout: int = DEFAULT_READ_TIMEOUT,
    **kwargs: Any,
) -> Any:
    """타임아웃이 적용된 boto3 client 생성

    Args:
        session: boto3 Session
        service_name: AWS 서비스 이름 (elb, ec2, swf 등)
        region_name: 리전 (None이면 세션 기본값)
        connect_timeout: 연결 타임아웃 (초)
        read_timeout: 읽기 타임아웃 (초)
        **kwargs: session.client()에 전달할 추가 인자 (endpoint_url 등)

    Returns:
        boto3 client
    """
    from botocore.config import Config

    config = Config(
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
    )

    # 기존 config가 있으면 병합
    if "config" in kwargs:
        existing = kwargs.pop("config")
        config = config.merge(existing)

    # boto3-stubs는 Literal 서비스명을 요구하므로 Any로 캐스팅
    return session.client(  # pyright: ignore[reportCallIssue]
        cast(Any, service_name),
        region_name=region_name,
        config=config,
        **kwargs,
    )
