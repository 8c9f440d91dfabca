"""
Upstream Probe Results

Every call to a third-party source returns a Probe tagged as OK, EMPTY or
FATAL. EMPTY covers anything recoverable (timeouts, 5xx, malformed or empty
payloads) and lets escalation continue. FATAL is reserved for credential and
rate-limit rejections, which abort the current request.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


AUTH_STATUS_CODES = (401, 403)
RATE_LIMIT_STATUS_CODE = 429


class ProbeStatus(Enum):
    OK = 'ok'
    EMPTY = 'empty'
    FATAL = 'fatal'


@dataclass(frozen=True)
class UpstreamFailure:
    """A rejection from an upstream source that must not be masked as 'no data'."""
    source: str
    status_code: int
    message: str

    @property
    def is_auth(self):
        return self.status_code in AUTH_STATUS_CODES

    @property
    def is_rate_limit(self):
        return self.status_code == RATE_LIMIT_STATUS_CODE

    @classmethod
    def from_status(cls, source, status_code,
                    auth_message='Invalid {source} API key.',
                    rate_limit_message='Rate limited by {source}. Try again soon.'):
        template = rate_limit_message if status_code == RATE_LIMIT_STATUS_CODE else auth_message
        return cls(source=source, status_code=status_code,
                   message=template.format(source=source, status=status_code))


def is_fatal_status(status_code):
    return status_code in AUTH_STATUS_CODES or status_code == RATE_LIMIT_STATUS_CODE


@dataclass(frozen=True)
class Probe:
    status: ProbeStatus
    value: Any = None
    reason: Optional[str] = None
    failure: Optional[UpstreamFailure] = None

    @classmethod
    def ok(cls, value):
        return cls(ProbeStatus.OK, value=value)

    @classmethod
    def empty(cls, reason=None):
        return cls(ProbeStatus.EMPTY, reason=reason)

    @classmethod
    def fatal(cls, failure):
        return cls(ProbeStatus.FATAL, failure=failure)

    @property
    def is_ok(self):
        return self.status is ProbeStatus.OK

    @property
    def is_empty(self):
        return self.status is ProbeStatus.EMPTY

    @property
    def is_fatal(self):
        return self.status is ProbeStatus.FATAL
