# fetchers.py - dereferencing links into JSON documents
#
# Copyright 2016 Stephen Mizell and contributors.
#
# This file is part of Graphable-JSON.
#
# Graphable-JSON is distributed under both the GNU Affero General Public
# License version 3 and under the 3-clause BSD license. For more
# information, see LICENSE.AGPL and LICENSE.BSD.
"""Link fetchers turn a URL into a decoded JSON document.

The resolver does not know how links are dereferenced. It is given a
fetcher, which is any object with a ``fetch(url)`` method (or any plain
callable taking a URL) that returns the decoded JSON document found at
that URL and raises :exc:`.LinkUnreachable` on failure.

This module provides fetchers for the common cases:

- :class:`RequestsFetcher` makes HTTP requests with the `requests`_
  library,
- :class:`FlaskAppFetcher` makes requests against an in-process
  :class:`flask.Flask` application through its test client,
- :class:`MappingFetcher` looks up documents in a dictionary,
- :class:`CachingFetcher` wraps another fetcher with a cache keyed on
  the URL.

.. _requests: http://docs.python-requests.org

"""
import logging
import threading

from flask import json
import requests

from .exceptions import LinkUnreachable

#: The Accept header sent by the HTTP fetchers in this module.
ACCEPT = 'application/json'

#: The default number of seconds to wait for an HTTP response.
DEFAULT_TIMEOUT = 10

logger = logging.getLogger(__name__)


class LinkFetcher(object):
    """Base class for link fetchers.

    Subclasses must override :meth:`fetch`.

    """

    def fetch(self, url):
        """Returns the decoded JSON document found at `url`.

        Raises :exc:`.LinkUnreachable` if the document cannot be
        retrieved or decoded.

        """
        raise NotImplementedError

    def __call__(self, url):
        return self.fetch(url)


class CallableFetcher(LinkFetcher):
    """Adapts a plain callable into a :class:`LinkFetcher`.

    Any exception raised by `func` other than :exc:`.LinkUnreachable` is
    converted into a :exc:`.LinkUnreachable` whose ``cause`` attribute is
    the original exception.

    """

    def __init__(self, func):
        self.func = func

    def fetch(self, url):
        try:
            return self.func(url)
        except LinkUnreachable:
            raise
        except Exception as exception:
            raise LinkUnreachable(url, cause=exception)


def as_fetcher(fetcher):
    """Returns `fetcher` as an instance of :class:`LinkFetcher`.

    `fetcher` may be ``None``, an instance of :class:`LinkFetcher`, any
    object with a ``fetch`` method, or a callable taking a URL.

    """
    if fetcher is None or isinstance(fetcher, CallableFetcher):
        return fetcher
    if hasattr(fetcher, 'fetch'):
        return CallableFetcher(fetcher.fetch)
    if callable(fetcher):
        return CallableFetcher(fetcher)
    msg = 'fetcher must be callable or have a fetch() method, not {0!r}'
    raise TypeError(msg.format(fetcher))


class RequestsFetcher(LinkFetcher):
    """Fetches links by making :http:method:`get` requests with the
    `requests` library.

    `session` is an optional :class:`requests.Session`; if not
    specified, a new session is created. `timeout` is the number of
    seconds to wait for a response. `headers` is an optional dictionary
    of additional request headers (for example, an ``Authorization``
    header).

    Responses with a status code other than 2xx, transport errors, and
    bodies that are not valid JSON all raise :exc:`.LinkUnreachable`.

    """

    def __init__(self, session=None, timeout=DEFAULT_TIMEOUT, headers=None):
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.headers = {'Accept': ACCEPT}
        if headers:
            self.headers.update(headers)

    @classmethod
    def from_config(cls, config, session=None):
        """Creates a fetcher from a Flask-style configuration mapping.

        The ``GRAPHABLE_JSON_TIMEOUT`` and ``GRAPHABLE_JSON_HEADERS``
        keys are recognized; missing keys take their default values.

        """
        timeout = config.get('GRAPHABLE_JSON_TIMEOUT', DEFAULT_TIMEOUT)
        headers = config.get('GRAPHABLE_JSON_HEADERS')
        return cls(session=session, timeout=timeout, headers=headers)

    def fetch(self, url):
        logger.debug('GET %s', url)
        try:
            response = self.session.get(url, headers=self.headers,
                                        timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as exception:
            status = exception.response.status_code
            reason = 'status {0}'.format(status)
            raise LinkUnreachable(url, cause=exception, reason=reason)
        # Newer versions of requests raise a subclass of ValueError when
        # the body is not valid JSON.
        except (requests.RequestException, ValueError) as exception:
            raise LinkUnreachable(url, cause=exception)


class FlaskAppFetcher(LinkFetcher):
    """Fetches links from an in-process Flask application.

    `app` is the :class:`flask.Flask` application that serves the linked
    documents. Requests are made through a new test client for each
    fetch, so no network connection is involved and concurrent fetches
    do not share client state. Absolute URLs are accepted; their host
    must match the application's ``SERVER_NAME``, if it has one.

    """

    def __init__(self, app, headers=None):
        self.app = app
        self.headers = {'Accept': ACCEPT}
        if headers:
            self.headers.update(headers)

    def fetch(self, url):
        logger.debug('GET %s (application %s)', url, self.app.name)
        response = self.app.test_client().get(url, headers=self.headers)
        if not 200 <= response.status_code < 300:
            reason = 'status {0}'.format(response.status_code)
            raise LinkUnreachable(url, reason=reason)
        try:
            return json.loads(response.get_data(as_text=True))
        except ValueError as exception:
            raise LinkUnreachable(url, cause=exception)


class MappingFetcher(LinkFetcher):
    """Fetches links by looking up URLs in a dictionary.

    `mapping` maps URL strings to JSON documents. A URL missing from the
    mapping raises :exc:`.LinkUnreachable`.

    The list of URLs fetched so far, in the order they were requested,
    is available as :attr:`requests`.

    """

    def __init__(self, mapping=None):
        self.mapping = dict(mapping or {})
        self.requests = []
        self._lock = threading.Lock()

    def fetch(self, url):
        with self._lock:
            self.requests.append(url)
        try:
            return self.mapping[url]
        except KeyError:
            raise LinkUnreachable(url, reason='not found')


class CachingFetcher(LinkFetcher):
    """Wraps another fetcher with a cache of fetched documents keyed on
    the URL.

    The resolver never caches on its own. Use this class to share fetched
    documents across several resolutions, and call :meth:`invalidate`
    whenever a resource is known to have changed.

    Failures are not cached.

    """

    def __init__(self, fetcher):
        self.fetcher = as_fetcher(fetcher)
        self._cache = {}
        self._lock = threading.Lock()

    def fetch(self, url):
        with self._lock:
            if url in self._cache:
                return self._cache[url]
        document = self.fetcher.fetch(url)
        with self._lock:
            self._cache[url] = document
        return document

    def invalidate(self, url=None):
        """Removes `url` from the cache, or clears the entire cache if
        `url` is ``None``.

        """
        with self._lock:
            if url is None:
                self._cache.clear()
            else:
                self._cache.pop(url, None)

    def __contains__(self, url):
        return url in self._cache
