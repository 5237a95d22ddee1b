"""HTTP client with retries for the plant backend's REST interface."""
import time
import logging
import requests

logger = logging.getLogger("biogasmonitor.http")


class APIError(Exception):
    """API request error with status code and response body."""
    def __init__(self, message, status_code=None, response_body=None, source=None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body
        self.source = source


class HTTPClient:
    """HTTP client with retry logic. Every failure surfaces as APIError."""

    RETRYABLE_STATUS = {429, 500, 502, 503, 504}
    NON_RETRYABLE_STATUS = {400, 401, 403, 404, 406}

    def __init__(self, base_url, api_key=None, timeout=30, max_retries=3, backoff_cap=60):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_cap = backoff_cap
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": "BiogasMonitor/1.0",
            "Accept": "application/json",
        })
        if api_key:
            self.session.headers.update({
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
            })

    def get(self, path="", params=None):
        """Make a GET request with retry."""
        return self._request("GET", path, params)

    def _backoff(self, attempt):
        return min(2 ** attempt * 2, self.backoff_cap)

    def _retry_wait(self, retry_after, attempt):
        """Seconds to wait before the next attempt, never more than backoff_cap.

        Only the delta-seconds form of Retry-After is honoured; an HTTP-date
        or garbage value falls back to exponential backoff.
        """
        try:
            wait = float(retry_after)
        except (TypeError, ValueError):
            return self._backoff(attempt)
        if not 0 <= wait < float("inf"):
            return self._backoff(attempt)
        return min(wait, self.backoff_cap)

    def _request(self, method, path, params=None):
        url = f"{self.base_url}/{path.lstrip('/')}" if path else self.base_url

        last_error = None
        for attempt in range(self.max_retries + 1):
            try:
                start = time.time()
                resp = self.session.request(method, url, params=params, timeout=self.timeout)
                latency = int((time.time() - start) * 1000)
                logger.debug(f"{method} {url} → {resp.status_code} ({latency}ms)")

                if resp.status_code == 200:
                    try:
                        return resp.json()
                    except ValueError:
                        raise APIError(f"Invalid JSON from {url}", status_code=200,
                                       response_body=resp.text, source=url)

                if resp.status_code in self.NON_RETRYABLE_STATUS:
                    raise APIError(
                        f"HTTP {resp.status_code} from {url}",
                        status_code=resp.status_code,
                        response_body=resp.text,
                        source=url,
                    )

                if resp.status_code in self.RETRYABLE_STATUS:
                    wait = self._retry_wait(resp.headers.get("Retry-After"), attempt)
                    logger.warning(f"Retryable {resp.status_code} from {url}, waiting {wait:.1f}s (attempt {attempt + 1})")
                    last_error = APIError(f"HTTP {resp.status_code} from {url}",
                                          status_code=resp.status_code, source=url)
                    if attempt < self.max_retries:
                        time.sleep(wait)
                    continue

                raise APIError(f"Unexpected HTTP {resp.status_code} from {url}",
                               status_code=resp.status_code, source=url)

            except requests.exceptions.RequestException as e:
                logger.warning(f"Request error for {url}: {e} (attempt {attempt + 1})")
                last_error = APIError(f"Request to {url} failed: {e}", source=url)
                if attempt < self.max_retries:
                    time.sleep(self._backoff(attempt))

        raise last_error or APIError(f"Max retries exceeded for {url}", source=url)
