# This file is part of oci-vnic. See LICENSE file for license information.
"""Single-shot HTTP reads of the instance metadata service."""

import logging
from typing import Any, Mapping, Optional
from urllib.parse import urlparse, urlunparse

import requests
from requests import exceptions

from ocivnic import version

LOG = logging.getLogger(__name__)

REDACTED = "REDACTED"


def _cleanurl(url):
    """Default the scheme to http and accept 'host/path' without one."""
    scheme, netloc, path, params, query, fragment = urlparse(
        url, scheme="http"
    )
    if path and not netloc:
        # '169.254.169.254' parses as a path
        netloc, path = path, ""
    return urlunparse((scheme, netloc, path, params, query, fragment))


def user_agent():
    return "oci-vnic/%s" % version.version_string()


class UrlResponse:
    """Read-only view of a requests.Response."""

    def __init__(self, response: requests.Response):
        self._response = response

    @property
    def contents(self) -> bytes:
        return self._response.content or b""

    def __str__(self):
        return self._response.text


class UrlError(IOError):
    """A url could not be read.

    code and headers are those of the error response, None and {} when no
    response was received.
    """

    def __init__(
        self,
        cause: Any,
        code: Optional[int] = None,
        headers: Optional[Mapping] = None,
        url: Optional[str] = None,
    ):
        IOError.__init__(self, str(cause))
        self.cause = cause
        self.code = code
        self.headers: Mapping = headers if headers is not None else {}
        self.url = url


def _redact_headers(headers, headers_redact):
    return {
        key: REDACTED if key in headers_redact and value else value
        for key, value in headers.items()
    }


def readurl(
    url, *, timeout=None, headers=None, headers_redact=None
) -> UrlResponse:
    """GET url once; retries are up to the caller.

    :param timeout: seconds to wait for the connection and for the response,
        which must be greater than 0. None waits forever.
    :param headers: headers to send, a User-Agent is added if missing.
    :param headers_redact: names of headers whose values are replaced by
        REDACTED in the debug log.
    :raises UrlError: on any transport error, an invalid timeout or a 4xx
        or 5xx response.
    """
    url = _cleanurl(url)
    headers = dict(headers or {})
    headers.setdefault("User-Agent", user_agent())
    req_args = {"url": url, "method": "GET", "headers": headers}
    if timeout is not None:
        req_args["timeout"] = timeout

    LOG.debug(
        "open '%s' with %s configuration",
        url,
        dict(
            req_args, headers=_redact_headers(headers, headers_redact or ())
        ),
    )
    try:
        response = requests.Session().request(**req_args)
        response.raise_for_status()
    except exceptions.HTTPError as e:
        raise UrlError(
            e,
            code=e.response.status_code,
            headers=e.response.headers,
            url=url,
        ) from e
    except exceptions.RequestException as e:
        raise UrlError(e, url=url) from e
    except ValueError as e:
        # urllib3 refuses timeouts of 0 or less before connecting
        raise UrlError(e, url=url) from e

    LOG.debug(
        "Read from %s (%s, %sb)",
        url,
        response.status_code,
        len(response.content),
    )
    return UrlResponse(response)
