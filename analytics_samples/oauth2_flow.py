"""
OAuth 2.0 authorization code flow with a local callback server.

The user consents in the browser, Google redirects to the flow's redirect URI
(http://127.0.0.1:<port>/oauth2callback?code=<code>), the local server listening
on that URI's port captures the code and shuts down, and the code is exchanged
for tokens.
"""
import time
import logging
import webbrowser
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any, Dict, Optional, Tuple
from urllib.parse import parse_qs, urlparse

from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow

logger = logging.getLogger(__name__)

SCOPES = ['https://www.googleapis.com/auth/analytics.readonly']
CALLBACK_PATH = '/oauth2callback'
DEFAULT_HOST = '127.0.0.1'
DEFAULT_PORT = 3000
DEFAULT_TIMEOUT = 300
SUCCESS_MESSAGE = 'Authentication successful! Please return to the console.'


class AuthorizationError(Exception):
    """The OAuth callback did not deliver an authorization code."""


class OAuthCallbackHandler(BaseHTTPRequestHandler):
    """
    Handles requests to the local callback server.

    The only request we act on is the redirect URI's path (/oauth2callback?code=<code>);
    everything else (favicon requests and the like) is logged and ignored.
    """

    def do_GET(self):
        parsed = urlparse(self.path)
        if parsed.path != self.server.callback_path:
            logger.info(f'Doing nothing with request URL {self.path}')
            self._respond(404, 'Not found')
            return

        query = parse_qs(parsed.query)
        code = query.get('code', [None])[0]
        if code:
            logger.info('Authorization code received')
            self._respond(200, SUCCESS_MESSAGE)
            self.server.authorization_code = code
        else:
            error = query.get('error', ['missing authorization code'])[0]
            logger.error(f'Authorization failed: {error}')
            self._respond(400, f'Authentication failed: {error}')
            self.server.authorization_error = error

    def _respond(self, status: int, message: str):
        body = message.encode('utf-8')
        self.send_response(status)
        self.send_header('Content-Type', 'text/plain; charset=utf-8')
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        logger.debug(format % args)


class CallbackServer(HTTPServer):
    """HTTP server that remembers the outcome of the OAuth callback."""

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT,
                 callback_path: str = CALLBACK_PATH):
        super().__init__((host, port), OAuthCallbackHandler)
        self.callback_path = callback_path
        self.authorization_code: Optional[str] = None
        self.authorization_error: Optional[str] = None

    @property
    def callback_received(self) -> bool:
        return self.authorization_code is not None or self.authorization_error is not None


def wait_for_authorization_code(server: CallbackServer, timeout: Optional[float] = DEFAULT_TIMEOUT) -> str:
    """
    Serve requests one by one until the OAuth callback arrives, then close the server.

    Args:
        server: The listening callback server.
        timeout: Seconds to wait for the callback; None waits indefinitely.
    Returns:
        The authorization code.
    Raises:
        AuthorizationError: the callback carried an error instead of a code,
                            or no callback arrived within the timeout.
    """
    deadline = None if timeout is None else time.monotonic() + timeout
    try:
        while not server.callback_received:
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise AuthorizationError(f'No OAuth callback received within {timeout} seconds')
                server.timeout = remaining
            server.handle_request()
    finally:
        server.server_close()

    if server.authorization_error is not None:
        raise AuthorizationError(server.authorization_error)
    return server.authorization_code


def redirect_uri_for(keys: Dict[str, Any], port: Optional[int] = None) -> str:
    """
    Pick the redirect URI the consent page sends the browser to.

    Desktop ('installed') clients accept any loopback port, so the URI is built
    from the requested port. Web clients must use their registered URI as is;
    a port that does not match it is rejected.
    """
    if 'web' not in keys:
        return f'http://{DEFAULT_HOST}:{port or DEFAULT_PORT}{CALLBACK_PATH}'

    redirect_uri = keys['web']['redirect_uris'][0]
    registered_port = urlparse(redirect_uri).port or 80
    if port and port != registered_port:
        raise ValueError(
            f'Port {port} does not match the registered redirect URI {redirect_uri}; '
            f'register http://{DEFAULT_HOST}:{port}{CALLBACK_PATH} or omit the port'
        )
    return redirect_uri


def callback_address(redirect_uri: str) -> Tuple[int, str]:
    """Port and path the local server must serve for a redirect URI."""
    parsed = urlparse(redirect_uri)
    return parsed.port or 80, parsed.path or '/'


def build_flow(keys: Dict[str, Any], port: Optional[int] = None) -> Flow:
    """Create the OAuth flow from a client config."""
    return Flow.from_client_config(keys, scopes=SCOPES, redirect_uri=redirect_uri_for(keys, port))


def authorization_url(flow: Flow) -> str:
    # prompt=consent forces the consent screen even if access was granted before,
    # so a refresh token is always returned.
    url, _ = flow.authorization_url(access_type='offline', prompt='consent')
    return url


def get_authenticated_credentials(keys: Dict[str, Any], port: Optional[int] = None,
                                  open_browser: bool = True,
                                  timeout: Optional[float] = DEFAULT_TIMEOUT) -> Credentials:
    """
    Run the consent workflow and return user credentials for the Analytics APIs.

    Args:
        keys: OAuth client config as loaded by config.load_oauth2_keys.
        port: Local port for the callback server. Defaults to the registered
              redirect URI's port for web clients, or 3000 for desktop clients.
        open_browser: Open the consent page in the default browser.
        timeout: Seconds to wait for the browser callback.
    """
    flow = build_flow(keys, port)
    url = authorization_url(flow)

    server_port, callback_path = callback_address(flow.redirect_uri)
    server = CallbackServer(DEFAULT_HOST, server_port, callback_path)
    if open_browser:
        webbrowser.open(url, new=1)
    logger.info(f'Waiting for browser response from: {url}')

    code = wait_for_authorization_code(server, timeout=timeout)

    flow.fetch_token(code=code)
    logger.info('Tokens acquired.')
    return flow.credentials
