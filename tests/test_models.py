"""Unit tests for request envelope construction."""

from reqlens.models import RequestEnvelope


class TestFromEnviron:

    def test_cgi_environ(self):
        environ = {
            "HTTP_USER_AGENT": "Mozilla/5.0 (X11; Linux x86_64) Firefox/121.0",
            "HTTP_CLIENT_IP": "198.51.100.1",
            "HTTP_X_FORWARDED_FOR": "203.0.113.7",
            "REMOTE_ADDR": "10.0.0.1",
            "HTTP_REFERER": "https://example.org/",
            "REQUEST_METHOD": "POST",
            "REQUEST_TIME": "1700000000",
            "HTTP_ACCEPT_LANGUAGE": "de-DE",
            "REQUEST_URI": "/form",
            "HTTP_HOST": "app.example.org",
            "HTTPS": "on",
        }

        envelope = RequestEnvelope.from_environ(environ)

        assert envelope.user_agent.startswith("Mozilla/5.0")
        assert envelope.client_ip == "198.51.100.1"
        assert envelope.forwarded_for == "203.0.113.7"
        assert envelope.remote_addr == "10.0.0.1"
        assert envelope.referer == "https://example.org/"
        assert envelope.method == "POST"
        assert envelope.request_time == 1700000000
        assert envelope.accept_language == "de-DE"
        assert envelope.uri == "/form"
        assert envelope.host == "app.example.org"
        assert envelope.https is True

    def test_wsgi_environ(self):
        environ = {
            "REQUEST_METHOD": "GET",
            "SCRIPT_NAME": "/app",
            "PATH_INFO": "/page",
            "QUERY_STRING": "a=1",
            "wsgi.url_scheme": "https",
            "REMOTE_ADDR": "203.0.113.7",
        }

        envelope = RequestEnvelope.from_environ(environ)

        assert envelope.uri == "/app/page?a=1"
        assert envelope.https is True
        assert envelope.request_time is None

    def test_https_off(self):
        assert RequestEnvelope.from_environ({"HTTPS": "off"}).https is False
        assert RequestEnvelope.from_environ({}).https is False

    def test_bad_request_time(self):
        assert RequestEnvelope.from_environ({"REQUEST_TIME": "soon"}).request_time is None

    def test_overrides_win(self):
        envelope = RequestEnvelope.from_environ(
            {"HTTP_USER_AGENT": "curl/8.4.0", "REMOTE_ADDR": "10.0.0.1"},
            user_agent="Opera/9.80",
            remote_addr=None,
        )

        assert envelope.user_agent == "Opera/9.80"
        assert envelope.remote_addr == "10.0.0.1"


class TestFromHeaders:

    def test_header_case_ignored(self):
        envelope = RequestEnvelope.from_headers(
            {"User-Agent": "Opera/9.80", "X-FORWARDED-FOR": "203.0.113.7", "host": "a.example"},
            remote_addr="10.0.0.1",
            method="GET",
        )

        assert envelope.user_agent == "Opera/9.80"
        assert envelope.forwarded_for == "203.0.113.7"
        assert envelope.host == "a.example"
        assert envelope.remote_addr == "10.0.0.1"
        assert envelope.method == "GET"
