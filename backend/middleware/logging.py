"""Request and response logging middleware

Logs every HTTP request and response with duration, status code and client
IP. In DEBUG mode request/response bodies are logged too, with credentials
masked and long generated text truncated.
"""
import time
import json
from starlette.types import ASGIApp, Scope, Receive, Send, Message
from starlette.datastructures import Headers

from backend.utils.logger import get_logger
from backend.utils.log_helpers import SENSITIVE_KEYS, sanitize_log_dict, truncate_text
from backend.config import settings

logger = get_logger(__name__)


def _format_body(raw: bytes) -> str:
    """Render a captured body for the debug log"""
    text = raw.decode("utf-8", errors="replace")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return truncate_text(text, 1000)
    return json.dumps(sanitize_log_dict(payload), indent=2, ensure_ascii=False)


class LoggingMiddleware:
    """Pure ASGI middleware for logging HTTP requests and responses

    Does not wrap responses like BaseHTTPMiddleware, so FileResponse for the
    client page streams unchanged.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = f"req_{int(time.time() * 1000)}"
        method = scope["method"]
        path = scope["path"]
        client_ip = scope.get("client", ["unknown"])[0] if scope.get("client") else "unknown"
        headers = Headers(scope=scope)
        debug = settings.log_level == "DEBUG"

        logger.info(
            f"API Request | {method} {path} | "
            f"client_ip={client_ip} | request_id={request_id}"
        )

        if debug:
            filtered_headers = {k: v for k, v in headers.items() if k.lower() not in SENSITIVE_KEYS}
            logger.debug(f"Request headers | request_id={request_id} | headers={filtered_headers}")

        # Buffer the request body so it can be logged, then replay it downstream
        if debug and method in ["POST", "PUT", "PATCH"]:
            messages = []
            while True:
                message = await receive()
                messages.append(message)
                if message["type"] != "http.request" or not message.get("more_body", False):
                    break

            request_body = b"".join(m.get("body", b"") for m in messages if m["type"] == "http.request")
            if request_body:
                logger.debug(
                    f"Request body | request_id={request_id} | "
                    f"content_type={headers.get('content-type', 'unknown')} | "
                    f"body={_format_body(request_body)}"
                )

            original_receive = receive
            replay = iter(messages)

            async def receive_replay() -> Message:
                try:
                    return next(replay)
                except StopIteration:
                    return await original_receive()

            receive = receive_replay

        start_time = time.time()
        status_code = 500
        content_type = ""
        response_body = b""

        async def send_with_logging(message: Message) -> None:
            nonlocal status_code, content_type, response_body

            if message["type"] == "http.response.start":
                status_code = message["status"]
                headers_list = list(message.get("headers", []))
                for name, value in headers_list:
                    if name.lower() == b"content-type":
                        content_type = value.decode("utf-8", errors="ignore")
                headers_list.append((b"x-request-id", request_id.encode()))
                headers_list.append((b"x-process-time", f"{time.time() - start_time:.3f}".encode()))
                message["headers"] = headers_list
                await send(message)

            elif message["type"] == "http.response.body":
                is_json = content_type.startswith("application/json")
                if debug and is_json:
                    response_body += message.get("body", b"")

                await send(message)

                if not message.get("more_body", False):
                    duration = time.time() - start_time
                    logger.info(
                        f"API Response | {method} {path} | "
                        f"status={status_code} | duration={duration:.3f}s | "
                        f"request_id={request_id}"
                    )
                    if debug and response_body:
                        logger.debug(
                            f"Response body | request_id={request_id} | "
                            f"status={status_code} | body={_format_body(response_body)}"
                        )
            else:
                await send(message)

        try:
            await self.app(scope, receive, send_with_logging)
        except Exception as e:
            duration = time.time() - start_time
            logger.error(
                f"API Error | {method} {path} | "
                f"error={type(e).__name__} | message={str(e)} | "
                f"duration={duration:.3f}s | request_id={request_id}"
            )
            raise
