"""
Fetching manifest documents from artifact registries
"""

from urllib.parse import urljoin, urlparse

import requests

from sourcefinder.common.errors import FetchError, FetchErrorType
from sourcefinder.common.models import select_registry_credential

DEFAULT_TIMEOUT = 10  # seconds
DEFAULT_USER_AGENT = "sourcefinder/0.1"
DEFAULT_MAX_REDIRECTS = 5

REDIRECT_STATUSES = {301, 302, 303, 307, 308}
AUTH_FAILURE_STATUSES = {401, 403}


class RequestsTransport:
    """
    Blocking HTTP transport backed by a requests Session

    Redirects are never followed here; callers decide whether and where to
    re-issue a request. Any object exposing the same get() signature can be
    injected in place of this class
    """

    def __init__(self, session=None, timeout=DEFAULT_TIMEOUT, user_agent=DEFAULT_USER_AGENT):
        """
        Args:
            session (requests.Session): Optional session to reuse connections
            timeout (float): Per-request timeout in seconds
            user_agent (str): User-Agent header value
        """
        self.session = session or requests.Session()
        self.timeout = timeout
        self.user_agent = user_agent

    def get(self, url, headers=None, auth=None, params=None):
        """
        Perform a single GET request

        Args:
            url (str): Request URL
            headers (dict): Extra request headers
            auth (tuple): Optional (username, password) for HTTP Basic auth
            params (dict): Optional query parameters

        Returns:
            requests.Response

        Raises:
            FetchError: On timeouts, connection failures and other transport errors
        """
        request_headers = {"User-Agent": self.user_agent}
        request_headers.update(headers or {})
        try:
            return self.session.get(
                url,
                headers=request_headers,
                auth=auth,
                params=params,
                timeout=self.timeout,
                allow_redirects=False,
            )
        except requests.exceptions.Timeout as e:
            raise FetchError(FetchErrorType.TIMEOUT, f"Timed out fetching {url}: {e}", url=url) from e
        except requests.exceptions.ConnectionError as e:
            raise FetchError(FetchErrorType.CONNECTION, f"Could not connect to fetch {url}: {e}", url=url) from e
        except requests.exceptions.RequestException as e:
            raise FetchError(FetchErrorType.TRANSPORT, f"Request for {url} failed: {e}", url=url) from e


def is_success(response):
    return 200 <= response.status_code < 300


def _redirect_target(response, url):
    if response.status_code not in REDIRECT_STATUSES:
        return None
    location = response.headers.get("Location") or response.headers.get("location")
    if not location:
        return None
    return urljoin(url, location)


class DocumentFetcher:
    """
    Fetches raw manifest documents, handling redirects and registry credentials

    A missing document is an expected outcome and is reported as None;
    transport failures propagate as FetchError
    """

    def __init__(self, transport, credentials=(), max_redirects=DEFAULT_MAX_REDIRECTS, logger=None):
        """
        Args:
            transport (RequestsTransport): Object performing single GET requests
            credentials (tuple): Parsed credentials; registry ones are used here
            max_redirects (int): Maximum redirect hops per attempt
            logger (Logger): Optional logger instance
        """
        self.transport = transport
        self.credentials = tuple(credentials or ())
        self.max_redirects = max_redirects
        self.logger = logger

    def fetch(self, url, base_url):
        """
        Fetch a document from a registry

        The first attempt is anonymous; when it does not succeed and a
        credential with basic-auth fields matches base_url, one authenticated
        retry is made

        Args:
            url (str): Document URL
            base_url (str): Registry base URL, used to select a credential

        Returns:
            bytes or None: Document body, or None if the registry has no such document

        Raises:
            FetchError: On transport failure, or when the authenticated retry is rejected or
                answered with a server error
        """
        logger = self.logger
        response = self._get_following_redirects(url, auth=None)
        if response is not None and is_success(response):
            return response.content

        credential = select_registry_credential(self.credentials, base_url)
        auth = credential.basic_auth if credential else None
        if auth is None:
            self._log_miss(url, response)
            return None

        logger and logger.debug(f"Retrying {url} with credentials for {credential.url}")
        response = self._get_following_redirects(url, auth=auth)
        if response is not None and is_success(response):
            return response.content
        if response is not None and response.status_code in AUTH_FAILURE_STATUSES:
            raise FetchError(
                FetchErrorType.AUTHENTICATION,
                f"Registry rejected credentials for {url} (HTTP {response.status_code})",
                url=url,
            )
        if response is not None and response.status_code >= 500:
            raise FetchError(
                FetchErrorType.TRANSPORT,
                f"Registry failed on authenticated request for {url} (HTTP {response.status_code})",
                url=url,
            )
        self._log_miss(url, response)
        return None

    def _get_following_redirects(self, url, auth):
        """
        Issue a GET and follow up to max_redirects redirects

        Basic auth is only sent to the host of the original request

        Returns:
            The final response, or None if the redirect limit was exceeded
        """
        origin_host = urlparse(url).netloc
        current = url
        for _ in range(self.max_redirects + 1):
            same_host = urlparse(current).netloc == origin_host
            response = self.transport.get(current, auth=auth if same_host else None)
            target = _redirect_target(response, current)
            if target is None:
                return response
            self.logger and self.logger.debug(f"Following redirect {current} -> {target}")
            current = target
        self.logger and self.logger.warning(f"Too many redirects fetching {url} (limit {self.max_redirects})")
        return None

    def _log_miss(self, url, response):
        if response is None:
            return
        if response.status_code == 404:
            self.logger and self.logger.debug(f"Manifest not found (404): {url}")
        else:
            self.logger and self.logger.debug(f"No manifest at {url} (HTTP {response.status_code})")
