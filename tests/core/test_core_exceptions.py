"""
tests/core/test_core_exceptions.py - core/exceptions.py 테스트
"""

from conftest import create_mock_client_error

from core.exceptions import (
    APICallError,
    ConfigError,
    IdentityError,
    MonitorError,
    format_error_for_user,
    is_access_denied,
)


class TestMonitorError:
    """MonitorError 베이스 테스트"""

    def test_str_with_cause(self):
        error = MonitorError("실패", cause=ValueError("bad"))
        assert str(error) == "실패: bad"

    def test_to_dict(self):
        error = ConfigError("region", "값이 없습니다")

        data = error.to_dict()

        assert data["error_type"] == "ConfigError"
        assert data["details"] == {"config_key": "region"}
        assert data["cause"] is None

    def test_hierarchy(self):
        assert issubclass(ConfigError, MonitorError)
        assert issubclass(IdentityError, MonitorError)
        assert issubclass(APICallError, MonitorError)


class TestIdentityError:
    """IdentityError 테스트"""

    def test_message(self):
        error = IdentityError("host-only", "cannot split by ':'")

        assert "host-only" in str(error)
        assert error.details["reason"] == "cannot split by ':'"


class TestAPICallError:
    """APICallError 테스트"""

    def test_from_client_error(self):
        client_error = create_mock_client_error("LoadBalancerNotFound", "There is no ACTIVE Load Balancer named 'x'")

        error = APICallError.from_client_error("elb", "describe_instance_health", client_error)

        assert error.error_code == "LoadBalancerNotFound"
        assert error.cause is client_error
        assert "elb.describe_instance_health" in error.message

    def test_is_access_denied(self):
        assert is_access_denied(APICallError("swf", "x", error_code="AccessDeniedException"))
        assert is_access_denied(create_mock_client_error("AccessDenied"))
        assert not is_access_denied(create_mock_client_error("Throttling"))
        assert not is_access_denied(ValueError("x"))


class TestFormatErrorForUser:
    """format_error_for_user() 테스트"""

    def test_monitor_error(self):
        assert format_error_for_user(ConfigError("k", "m")) == "설정 오류 [k]: m"

    def test_known_client_error(self):
        assert format_error_for_user(create_mock_client_error("AccessDenied")) == "권한이 없습니다. IAM 정책을 확인하세요."

    def test_unknown_client_error(self):
        assert format_error_for_user(create_mock_client_error("Weird", "oops")) == "Weird: oops"
