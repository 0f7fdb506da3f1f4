"""Side-effect sinks"""
from .base import AlertRequest, AlertSink, DisplaySink, StatusSnapshot
from .console import AlertContent, LoggingAlertSink, LoggingDisplaySink, build_alert_content
from .manager import DisplayHub
from .webhook import WebhookAlertSink

__all__ = [
    "AlertContent",
    "AlertRequest",
    "AlertSink",
    "DisplayHub",
    "DisplaySink",
    "LoggingAlertSink",
    "LoggingDisplaySink",
    "StatusSnapshot",
    "WebhookAlertSink",
    "build_alert_content",
]
