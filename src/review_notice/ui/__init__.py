"""
User interface and API module.

Provides REST APIs for hosts that evaluate and answer notices over HTTP.
"""

__all__ = ["notice_api", "http_server"]
