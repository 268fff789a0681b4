"""
Request-scoped logging:
- X-Request-ID is taken from the client or generated, echoed back, and
  attached to every log record emitted while the request is handled
- one access line per request (method, path, status, latency_ms)
"""
import logging
import secrets
import time

from flask import g, has_request_context, request

log = logging.getLogger("api.access")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"


class RequestIdFilter(logging.Filter):
    def filter(self, record):
        request_id = "-"
        if has_request_context():
            request_id = getattr(g, "request_id", "-")
        record.request_id = request_id
        return True


def configure_logging(level: str = "INFO") -> None:
    """Install one stream handler on the root logger (idempotent)."""
    root = logging.getLogger()
    root.setLevel(level.upper())
    for handler in root.handlers:
        if getattr(handler, "_request_id_handler", False):
            return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIdFilter())
    handler._request_id_handler = True
    root.addHandler(handler)


def register_request_hooks(app):
    @app.before_request
    def assign_request_id():
        g.request_id = request.headers.get("X-Request-ID") or secrets.token_hex(16)
        g.request_started = time.perf_counter()

    @app.after_request
    def log_request(response):
        started = getattr(g, "request_started", None)
        latency_ms = int((time.perf_counter() - started) * 1000) if started else -1
        response.headers["X-Request-ID"] = getattr(g, "request_id", "")
        log.info(
            "%s %s %s %dms", request.method, request.path, response.status_code, latency_ms
        )
        return response
