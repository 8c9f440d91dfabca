"""
Upstream HTTP Plumbing

Thin wrapper over ``requests`` that turns every outbound GET into a Probe.
Credential and rate-limit rejections become FATAL probes; every other
failure (timeout, connection error, non-200 status, undecodable body)
becomes an EMPTY probe so that callers can keep escalating.

Each call goes through ``requests.get`` with its own headers, so no session
state is shared between request threads.
"""

import logging

import requests

from airsense.models import Probe, UpstreamFailure
from airsense.models.probe import is_fatal_status

logger = logging.getLogger(__name__)


DEFAULT_TIMEOUT_SECONDS = 6


def as_dict(value):
    """``value`` if it is a JSON object, otherwise an empty dict."""
    return value if isinstance(value, dict) else {}


class JsonApiClient:
    """Base class for JSON-over-HTTP upstream clients.

    ``http`` is anything with a ``requests.get`` signature; it defaults to
    the ``requests`` module itself.
    """

    source = 'upstream'
    auth_message = 'Invalid {source} API key.'
    rate_limit_message = 'Rate limited by {source}. Try again soon.'

    def __init__(self, base_url, timeout=DEFAULT_TIMEOUT_SECONDS, http=None, headers=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.http = http if http is not None else requests
        self.headers = dict(headers or {})

    def get_json(self, path, params=None):
        url = f'{self.base_url}{path}'
        try:
            resp = self.http.get(url, params=params, headers=self.headers, timeout=self.timeout)
        except requests.exceptions.Timeout:
            logger.debug('%s request timed out: %s', self.source, url)
            return Probe.empty('Request timed out')
        except requests.exceptions.RequestException as e:
            logger.debug('%s request failed: %s (%s)', self.source, url, e)
            return Probe.empty(str(e))

        if is_fatal_status(resp.status_code):
            failure = UpstreamFailure.from_status(
                self.source, resp.status_code,
                auth_message=self.auth_message,
                rate_limit_message=self.rate_limit_message,
            )
            logger.warning('%s rejected %s with %s', self.source, url, resp.status_code)
            return Probe.fatal(failure)

        if resp.status_code != 200:
            logger.debug('%s error %s for %s', self.source, resp.status_code, url)
            return Probe.empty(f'{self.source} error {resp.status_code}')

        try:
            return Probe.ok(resp.json())
        except ValueError:
            logger.debug('%s returned a malformed payload for %s', self.source, url)
            return Probe.empty('Malformed payload')

    def get_results(self, path, params=None):
        """GET a paged endpoint and unwrap its ``results`` array.

        An absent, non-list or empty ``results`` array is an EMPTY probe.
        """
        probe = self.get_json(path, params)
        if not probe.is_ok:
            return probe
        payload = probe.value
        results = payload.get('results') if isinstance(payload, dict) else None
        if not isinstance(results, list) or not results:
            return Probe.empty('No results')
        return Probe.ok(results)
