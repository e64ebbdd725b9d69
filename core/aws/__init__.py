"""
core/aws - boto3 세션/클라이언트 생성

Usage:
    from core.aws import create_session, get_client

    session = create_session(access_key_id, secret_access_key, region)
    elb = get_client(session, "elb")
"""

from .client import create_session, get_client

__all__ = ["create_session", "get_client"]
