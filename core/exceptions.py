"""
core/exceptions.py - 통합 예외 계층 구조

모니터 플러그인 전체에서 사용되는 예외 클래스들을 정의합니다.

예외 계층 구조:
    MonitorError (베이스)
    ├── ConfigError (설정 파일/옵션 관련)
    ├── IdentityError (SWF worker identity 형식 오류)
    └── APICallError (AWS API 호출 실패)

설정 누락은 플러그인 경계에서 에러 항목으로 변환되지만,
IdentityError와 APICallError는 리포트 사이클 전체를 중단시킵니다.
레코드 단위로 건너뛰면 집계가 조용히 줄어들기 때문입니다.

Usage:
    from core.exceptions import APICallError

    try:
        response = elb.describe_instance_health(LoadBalancerName=name)
    except ClientError as e:
        raise APICallError.from_client_error("elb", "describe_instance_health", e) from e
"""

from typing import Any, Dict, Optional

# =============================================================================
# 베이스 예외
# =============================================================================


class MonitorError(Exception):
    """모니터 플러그인 기본 예외 클래스

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (체이닝용)
        details: 추가 상세 정보
    """

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """예외 정보를 딕셔너리로 반환"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


# =============================================================================
# 설정 관련 예외
# =============================================================================


class ConfigError(MonitorError):
    """설정 관련 예외"""

    def __init__(
        self,
        key: str,
        message: str,
        cause: Optional[Exception] = None,
    ):
        full_message = f"설정 오류 [{key}]: {message}"
        super().__init__(full_message, cause)
        self.config_key = key
        self.details["config_key"] = key


# =============================================================================
# SWF identity 관련 예외
# =============================================================================


class IdentityError(MonitorError):
    """worker identity 형식 오류

    SWF가 "hostname:pid[:stack_id]" 형식이 아닌 identity를 보고한 경우.
    업스트림 데이터 무결성 문제이므로 복구하지 않고 전파합니다.
    """

    def __init__(self, identity: Optional[str], reason: str):
        super().__init__(f"Unexpected identity {identity!r}: {reason}")
        self.identity = identity
        self.reason = reason
        self.details.update({"identity": identity, "reason": reason})


# =============================================================================
# AWS API 관련 예외
# =============================================================================


class APICallError(MonitorError):
    """AWS API 호출 관련 예외

    boto3/botocore의 ClientError를 래핑하여 일관된 예외 처리를 제공합니다.
    """

    def __init__(
        self,
        service: str,
        operation: str,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        message = f"{service}.{operation}"
        if error_code:
            message = f"{message} 실패 ({error_code})"
        if error_message:
            message = f"{message}: {error_message}"

        super().__init__(message, cause)
        self.service = service
        self.operation = operation
        self.error_code = error_code
        self.error_message = error_message
        self.details.update(
            {
                "service": service,
                "operation": operation,
                "error_code": error_code,
            }
        )

    @classmethod
    def from_client_error(
        cls,
        service: str,
        operation: str,
        client_error: Exception,
    ) -> "APICallError":
        """botocore.exceptions.ClientError로부터 생성

        Args:
            service: AWS 서비스 이름
            operation: API 작업 이름
            client_error: ClientError 예외

        Returns:
            APICallError 인스턴스
        """
        error_code = None
        error_message = None

        if hasattr(client_error, "response"):
            error_info = client_error.response.get("Error", {})
            error_code = error_info.get("Code")
            error_message = error_info.get("Message")

        return cls(
            service=service,
            operation=operation,
            error_code=error_code,
            error_message=error_message,
            cause=client_error,
        )


# =============================================================================
# 예외 유틸리티 함수
# =============================================================================


def is_access_denied(error: Exception) -> bool:
    """액세스 거부 오류인지 확인"""
    access_denied_codes = (
        "AccessDenied",
        "AccessDeniedException",
        "UnauthorizedAccess",
        "UnrecognizedClientException",
    )

    if isinstance(error, APICallError):
        return error.error_code in access_denied_codes

    if hasattr(error, "response"):
        error_code = error.response.get("Error", {}).get("Code", "")
        return error_code in access_denied_codes

    return False


def format_error_for_user(error: Exception) -> str:
    """사용자에게 표시할 에러 메시지 포맷팅

    Args:
        error: 예외

    Returns:
        사용자 친화적인 에러 메시지
    """
    if isinstance(error, MonitorError):
        return str(error)

    if hasattr(error, "response"):
        error_info = error.response.get("Error", {})
        code = error_info.get("Code", "UnknownError")
        message = error_info.get("Message", str(error))

        friendly_messages = {
            "AccessDenied": "권한이 없습니다. IAM 정책을 확인하세요.",
            "ExpiredToken": "인증 토큰이 만료되었습니다. 자격 증명을 갱신하세요.",
            "InvalidClientTokenId": "잘못된 자격 증명입니다.",
            "LoadBalancerNotFound": "로드밸런서를 찾을 수 없습니다.",
        }

        return friendly_messages.get(code, f"{code}: {message}")

    return str(error)
