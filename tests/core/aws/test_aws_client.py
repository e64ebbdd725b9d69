"""
tests/core/aws/test_aws_client.py - core/aws/client.py 테스트
"""

from unittest.mock import MagicMock, patch

from core.aws import create_session, get_client


class TestCreateSession:
    """create_session() 테스트"""

    def test_static_credentials(self):
        with patch("boto3.Session") as session_class:
            create_session("AKIA", "secret", "eu-west-1")

        session_class.assert_called_once_with(
            aws_access_key_id="AKIA",
            aws_secret_access_key="secret",
            region_name="eu-west-1",
        )


class TestGetClient:
    """get_client() 테스트"""

    def test_timeouts(self):
        session = MagicMock()

        get_client(session, "elb", region_name="eu-west-1", connect_timeout=3, read_timeout=7)

        args, kwargs = session.client.call_args
        assert args == ("elb",)
        assert kwargs["region_name"] == "eu-west-1"
        assert kwargs["config"].connect_timeout == 3
        assert kwargs["config"].read_timeout == 7

    def test_extra_kwargs(self):
        session = MagicMock()

        get_client(session, "swf", endpoint_url="https://swf.eu-west-1.amazonaws.com")

        assert session.client.call_args.kwargs["endpoint_url"] == "https://swf.eu-west-1.amazonaws.com"
