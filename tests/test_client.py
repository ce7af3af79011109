"""
Tests for the chat completion client. The network is replaced by a fake opener.

Run with:
    pytest tests/test_client.py -v
"""

import http.server
import io
import json
import socket
import threading
import urllib.error

import pytest

from aicommits.llm import (
    APIError,
    AuthMode,
    DEFAULT_URL,
    HostUnreachableError,
    LLMError,
    OpenAIClient,
    RequestTimeoutError,
    deduplicate_messages,
    generate_commit_message,
    sanitize_message,
)

from conftest import FakeResponse

AZURE_ENDPOINT = "https://demo.openai.azure.com/openai/deployments/dev/chat/completions?api-version=2024-08-01-preview"


def _config(**overrides):
    config = {
        'USE_AZURE': False,
        'AZURE_OPENAI_KEY': '',
        'AZURE_OPENAI_ENDPOINT': '',
        'OPENAI_KEY': 'sk-abc',
        'locale': 'en',
        'generate': 1,
        'type': '',
        'proxy': None,
        'model': 'gpt-3.5-turbo',
        'timeout': 10000,
        'max-length': 50,
    }
    config.update(overrides)
    return config


def _completion(*contents, usage=None):
    body = {
        "model": "gpt-3.5-turbo-0125",
        "choices": [{"index": i, "message": {"role": "assistant", "content": c}} for i, c in enumerate(contents)],
    }
    if usage is not None:
        body["usage"] = {"total_tokens": usage}
    return FakeResponse(json.dumps(body))


def _http_error(status, reason, body=b""):
    return urllib.error.HTTPError(DEFAULT_URL, status, reason, {}, io.BytesIO(body))


class StalledBody:
    """Error body whose read times out."""

    def read(self, *args):
        raise socket.timeout("timed out")

    def close(self):
        pass


# ---------------------------------------------------------------------------
# Sanitizing
# ---------------------------------------------------------------------------

class TestSanitizeMessage:

    @pytest.mark.parametrize("raw, expected", [
        ("  Add login endpoint  ", "Add login endpoint"),
        ("Add login endpoint.", "Add login endpoint"),
        ("Add login\nendpoint", "Add loginendpoint"),
        ("Fix crash\r\n", "Fix crash"),
        ("Bump version to 1.2.", "Bump version to 1.2"),
        ("Wait...", "Wait..."),
    ])
    def test_sanitize(self, raw, expected):
        assert sanitize_message(raw) == expected

    def test_period_after_punctuation_kept(self):
        assert sanitize_message("Bump to v2!.") == "Bump to v2!."

    def test_deduplicate_keeps_first_seen_order(self):
        assert deduplicate_messages(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]


# ---------------------------------------------------------------------------
# Request building
# ---------------------------------------------------------------------------

class TestRequest:

    def test_direct_mode_request(self, fake_opener):
        opener = fake_opener(_completion("Add tests"))
        generate_commit_message(_config(), "diff --git a/x b/x")

        req, timeout = opener.requests[0]
        assert req.full_url == DEFAULT_URL
        assert req.get_method() == "POST"
        assert req.get_header("Authorization") == "Bearer sk-abc"
        assert req.get_header("Api-key") is None
        assert req.get_header("Content-type") == "application/json"
        assert req.get_header("Content-length") == str(len(req.data))
        assert timeout == 10.0

    def test_gateway_mode_request(self, fake_opener):
        opener = fake_opener(_completion("Add tests"))
        config = _config(USE_AZURE=True, OPENAI_KEY='', AZURE_OPENAI_KEY='azure-key',
                         AZURE_OPENAI_ENDPOINT=AZURE_ENDPOINT)
        generate_commit_message(config, "diff")

        req, _ = opener.requests[0]
        assert req.full_url == AZURE_ENDPOINT
        assert req.get_header("Api-key") == "azure-key"
        assert req.get_header("Authorization") is None

    def test_client_mode(self):
        assert OpenAIClient(_config()).mode is AuthMode.DIRECT
        assert OpenAIClient(_config(USE_AZURE=True)).mode is AuthMode.GATEWAY

    def test_payload(self, fake_opener):
        opener = fake_opener(_completion("Add tests"))
        generate_commit_message(_config(generate=3, locale="de", type="conventional"), "the diff")

        payload = json.loads(opener.requests[0][0].data)
        assert payload["model"] == "gpt-3.5-turbo"
        assert payload["n"] == 3
        assert payload["stream"] is False
        assert payload["temperature"] == 0.7
        assert payload["top_p"] == 1
        assert payload["frequency_penalty"] == 0
        assert payload["presence_penalty"] == 0
        assert payload["max_tokens"] == 200
        system, user = payload["messages"]
        assert system["role"] == "system"
        assert "Message language: de" in system["content"]
        assert "<type>(<optional scope>)" in system["content"]
        assert user == {"role": "user", "content": "the diff"}

    def test_no_proxy_ignores_environment(self, fake_opener, monkeypatch):
        monkeypatch.setenv("HTTPS_PROXY", "http://env-proxy:3128")
        opener = fake_opener(_completion("Add tests"))
        generate_commit_message(_config(), "diff")
        assert opener.proxies == {}

    def test_configured_proxy(self, fake_opener):
        opener = fake_opener(_completion("Add tests"))
        generate_commit_message(_config(proxy="http://localhost:8080"), "diff")
        assert opener.proxies == {"http": "http://localhost:8080", "https": "http://localhost:8080"}


# ---------------------------------------------------------------------------
# Response handling
# ---------------------------------------------------------------------------

class TestResponse:

    def test_returns_sanitized_candidates(self, fake_opener):
        fake_opener(_completion("  Add login endpoint.\n", "Fix token refresh"))
        assert generate_commit_message(_config(), "diff") == ["Add login endpoint", "Fix token refresh"]

    def test_duplicates_collapse(self, fake_opener):
        fake_opener(_completion("Add tests.", "Add tests", "Fix bug"))
        assert generate_commit_message(_config(), "diff") == ["Add tests", "Fix bug"]

    def test_empty_choices_skipped(self, fake_opener):
        fake_opener(_completion("", None, "Fix bug"))
        assert generate_commit_message(_config(), "diff") == ["Fix bug"]

    def test_no_choices(self, fake_opener):
        fake_opener(FakeResponse(json.dumps({"choices": []})))
        assert generate_commit_message(_config(), "diff") == []

    def test_response_metadata(self, fake_opener):
        fake_opener(_completion("Add tests", usage=42))
        response = OpenAIClient(_config()).generate("diff")
        assert response.tokens_used == 42
        assert response.model == "gpt-3.5-turbo-0125"

    def test_invalid_json(self, fake_opener):
        fake_opener(FakeResponse("<html>not json</html>"))
        with pytest.raises(LLMError, match="Invalid response"):
            generate_commit_message(_config(), "diff")

    def test_body_not_an_object(self, fake_opener):
        fake_opener(FakeResponse("[]"))
        with pytest.raises(LLMError, match="Invalid response"):
            generate_commit_message(_config(), "diff")

    def test_content_not_text(self, fake_opener):
        fake_opener(_completion(["Add", "tests"]))
        with pytest.raises(LLMError, match="Invalid response"):
            generate_commit_message(_config(), "diff")

    def test_choices_not_a_list(self, fake_opener):
        fake_opener(FakeResponse(json.dumps({"choices": "Add tests"})))
        with pytest.raises(LLMError, match="Invalid response"):
            generate_commit_message(_config(), "diff")


# ---------------------------------------------------------------------------
# Error classification
# ---------------------------------------------------------------------------

class TestErrors:

    def test_timeout_while_connecting(self, fake_opener):
        fake_opener(urllib.error.URLError(socket.timeout("timed out")))
        with pytest.raises(RequestTimeoutError) as exc_info:
            generate_commit_message(_config(timeout=2000), "diff")
        assert exc_info.value.timeout == 2000
        assert "request took over 2000ms" in str(exc_info.value)
        assert "`timeout` config" in str(exc_info.value)

    def test_timeout_while_reading(self, fake_opener):
        fake_opener(socket.timeout("timed out"))
        with pytest.raises(RequestTimeoutError, match="10000ms"):
            generate_commit_message(_config(), "diff")

    def test_host_not_found(self, fake_opener):
        fake_opener(urllib.error.URLError(socket.gaierror(-2, "Name or service not known")))
        with pytest.raises(HostUnreachableError) as exc_info:
            generate_commit_message(_config(), "diff")
        assert exc_info.value.host == "api.openai.com"
        assert exc_info.value.syscall == "getaddrinfo"
        assert "Error connecting to api.openai.com (getaddrinfo)" in str(exc_info.value)

    def test_host_not_found_names_proxy(self, fake_opener):
        fake_opener(urllib.error.URLError(socket.gaierror(-2, "Name or service not known")))
        with pytest.raises(HostUnreachableError) as exc_info:
            generate_commit_message(_config(proxy="http://corp-proxy.internal:3128"), "diff")
        assert exc_info.value.host == "corp-proxy.internal"

    def test_other_transport_errors_propagate_unchanged(self, fake_opener):
        error = urllib.error.URLError(ConnectionRefusedError(111, "Connection refused"))
        fake_opener(error)
        with pytest.raises(urllib.error.URLError) as exc_info:
            generate_commit_message(_config(), "diff")
        assert exc_info.value is error

    def test_api_error(self, fake_opener):
        fake_opener(_http_error(401, "Unauthorized", b'{"error": "invalid key"}'))
        with pytest.raises(APIError) as exc_info:
            generate_commit_message(_config(), "diff")
        error = exc_info.value
        assert error.status == 401
        assert error.reason == "Unauthorized"
        assert error.body == '{"error": "invalid key"}'
        assert str(error).startswith("API Error: 401 - Unauthorized")
        assert "invalid key" in str(error)
        assert "status.openai.com" not in str(error)

    def test_server_error_suggests_status_page(self, fake_opener):
        fake_opener(_http_error(500, "Internal Server Error"))
        with pytest.raises(APIError, match="Check the API status: https://status.openai.com"):
            generate_commit_message(_config(), "diff")

    def test_non_2xx_without_http_error(self, fake_opener):
        fake_opener(FakeResponse("moved", status=302, reason="Found"))
        with pytest.raises(APIError, match="API Error: 302 - Found"):
            generate_commit_message(_config(), "diff")

    def test_timeout_while_reading_error_body(self, fake_opener):
        fake_opener(urllib.error.HTTPError(DEFAULT_URL, 502, "Bad Gateway", {}, StalledBody()))
        with pytest.raises(RequestTimeoutError, match="10000ms"):
            generate_commit_message(_config(), "diff")


# ---------------------------------------------------------------------------
# Redirects (local HTTP server)
# ---------------------------------------------------------------------------

class RedirectingHandler(http.server.BaseHTTPRequestHandler):
    """POST answers 302 to /elsewhere; GET /elsewhere would hand out a completion."""

    def do_POST(self):
        self.server.seen.append(("POST", self.path, self.headers.get("api-key")))
        self.rfile.read(int(self.headers.get("Content-Length", 0)))
        self.send_response(302)
        self.send_header("Location", "/elsewhere")
        self.send_header("Content-Length", "0")
        self.end_headers()

    def do_GET(self):
        self.server.seen.append(("GET", self.path, self.headers.get("api-key")))
        body = json.dumps({"choices": [{"message": {"content": "Redirected"}}]}).encode()
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def redirecting_server():
    server = http.server.HTTPServer(("127.0.0.1", 0), RedirectingHandler)
    server.seen = []
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()
    thread.join()


class TestRedirects:

    def test_redirect_is_an_api_error(self, redirecting_server):
        port = redirecting_server.server_address[1]
        config = _config(
            USE_AZURE=True,
            AZURE_OPENAI_KEY="azure-key",
            AZURE_OPENAI_ENDPOINT=f"http://127.0.0.1:{port}/chat",
        )

        with pytest.raises(APIError) as exc_info:
            generate_commit_message(config, "diff")

        assert exc_info.value.status == 302
        assert redirecting_server.seen == [("POST", "/chat", "azure-key")]
