# resolver.py - resolving relationships into streams of values
#
# Copyright 2016 Stephen Mizell and contributors.
#
# This file is part of Graphable-JSON.
#
# Graphable-JSON is distributed under both the GNU Affero General Public
# License version 3 and under the 3-clause BSD license. For more
# information, see LICENSE.AGPL and LICENSE.BSD.
"""Resolves a named relationship of a JSON object into a stream of values.

The main class in this module, :class:`RelationshipResolver`, hides the
physical representation of a relationship from the client. Whether the
value of ``address`` is embedded in the document, linked with
``address_url``, spread over an array of links, or wrapped in a
paginated collection, the client sees the same stream of values::

    >>> resolver = RelationshipResolver(fetcher=RequestsFetcher())
    >>> for address in resolver.resolve(person, 'address'):
    ...     print(address['city'])

Streams are lazy. Links are fetched only when the consumer reaches the
corresponding element, and the ``next`` page of a collection is fetched
only when the consumer iterates past the last member of the current
page. Sibling links in an array of links are fetched concurrently, but
always yielded in array order.

"""
from collections import deque
from concurrent.futures import Future
from concurrent.futures import ThreadPoolExecutor
import logging
import threading

from .collection import COLLECTION_PROFILE
from .collection import ITEM
from .collection import NEXT
from .collection import Page
from .collection import check_collection
from .collection import is_collection
from .exceptions import LinkUnreachable
from .exceptions import MalformedCollection
from .exceptions import MultipleExceptions
from .exceptions import RelationshipNotFound
from .fetchers import as_fetcher
from .keys import find_key
from .values import Many
from .values import normalize

#: The default maximum number of links fetched concurrently from a single
#: array of links.
DEFAULT_MAX_WORKERS = 4

#: The string configuration values which mean "true".
TRUE_STRINGS = ('1', 'true', 'yes', 'on')

logger = logging.getLogger(__name__)


class ResolvedStream(object):
    """A lazy, restartable stream of the values of one relationship.

    Each iteration over this object resolves the relationship anew, so
    links are fetched again unless the fetcher caches them. The errors
    recorded during the most recent iteration are available as
    :attr:`errors`.

    Instances of this class are created by
    :meth:`RelationshipResolver.resolve`; do not instantiate it
    directly.

    """

    def __init__(self, resolver, node, name, version=None, expand=True):
        self.resolver = resolver
        self.node = node
        self.name = name
        self.version = version
        self.expand = expand

        #: The list of :exc:`.LinkUnreachable` and
        #: :exc:`.MalformedCollection` exceptions for links and
        #: collections that were skipped during the most recent
        #: iteration.
        #:
        #: This is only ever non-empty when the resolver is not strict.
        self.errors = []

    def __iter__(self):
        traversal = _Traversal(self.resolver, self.expand)
        self.errors = traversal.errors
        return traversal.run(self.node, self.name, self.version)

    def first(self, default=None):
        """Returns the first value of the stream, or `default` if the
        stream is empty.

        Only the links needed to produce the first value are fetched.

        """
        for value in self:
            return value
        return default

    def to_list(self):
        """Returns a list of all values in the stream.

        This consumes the whole stream, following every ``next`` link.

        """
        return list(self)

    def raise_for_errors(self):
        """Raises the errors recorded during the most recent iteration,
        if any.

        A single error is raised as is; several errors are raised
        together as :exc:`.MultipleExceptions`.

        """
        if len(self.errors) == 1:
            raise self.errors[0]
        if self.errors:
            raise MultipleExceptions(self.errors)

    def __repr__(self):
        if self.version is None:
            return '<ResolvedStream {0!r}>'.format(self.name)
        return '<ResolvedStream {0!r} version {1!r}>'.format(self.name,
                                                            self.version)


class RelationshipResolver(object):
    """Resolves relationships of JSON objects into streams of values.

    `fetcher` is used to dereference links. It may be an instance of
    :class:`~graphable_json.fetchers.LinkFetcher`, any object with a
    ``fetch(url)`` method, or a callable taking a URL. If no fetcher is
    given, every link is unreachable.

    `max_workers` is the maximum number of links of a single array of
    links that are fetched concurrently. If it is 1, links are fetched
    one at a time, exactly when they are needed.

    If `strict` is ``False`` (the default), an unreachable link is
    skipped: the stream continues with the following values and the
    error is recorded in :attr:`ResolvedStream.errors`. If `strict` is
    ``True``, :exc:`.LinkUnreachable` is raised when the consumer
    reaches the unreachable element. A malformed collection is treated
    the same way: a non-strict resolver skips the rest of that
    collection and records the :exc:`.MalformedCollection`, while a
    strict one raises it. In both cases values already yielded remain
    valid.

    `profile` is the profile URI that marks an object as a collection.

    """

    def __init__(self, fetcher=None, max_workers=DEFAULT_MAX_WORKERS,
                 strict=False, profile=COLLECTION_PROFILE):
        if max_workers < 1:
            raise ValueError('max_workers must be at least 1')
        self.fetcher = as_fetcher(fetcher)
        self.max_workers = max_workers
        self.strict = strict
        self.profile = profile

    @classmethod
    def from_config(cls, config, fetcher=None):
        """Creates a resolver from a Flask-style configuration mapping,
        such as :attr:`flask.Flask.config`.

        The recognized keys are ``GRAPHABLE_JSON_MAX_WORKERS``,
        ``GRAPHABLE_JSON_STRICT``, and
        ``GRAPHABLE_JSON_COLLECTION_PROFILE``. Missing keys take their
        default values. Values may be strings, as when the configuration
        is read from the environment; ``GRAPHABLE_JSON_STRICT`` is then
        true only for ``'1'``, ``'true'``, ``'yes'``, or ``'on'``, in
        any case.

        """
        max_workers = config.get('GRAPHABLE_JSON_MAX_WORKERS',
                                 DEFAULT_MAX_WORKERS)
        strict = config.get('GRAPHABLE_JSON_STRICT', False)
        if isinstance(strict, str):
            strict = strict.strip().lower() in TRUE_STRINGS
        profile = config.get('GRAPHABLE_JSON_COLLECTION_PROFILE',
                             COLLECTION_PROFILE)
        return cls(fetcher=fetcher, max_workers=int(max_workers),
                   strict=bool(strict), profile=profile)

    def _check_exists(self, node, name, version):
        key, _ = find_key(node, name, version)
        if key is None and version is not None:
            raise RelationshipNotFound(name, version)

    def resolve(self, node, name, version=None):
        """Returns the :class:`ResolvedStream` of values of the
        relationship `name` of the JSON object `node`.

        If `version` is given, only the properties suffixed with that
        version are considered, and :exc:`.RelationshipNotFound` is
        raised immediately if there are none. Without a version, only
        the unsuffixed properties are considered, and a missing
        relationship simply yields an empty stream.

        """
        self._check_exists(node, name, version)
        return ResolvedStream(self, node, name, version)

    def values(self, node, name, version=None):
        """Returns the stream of values of the relationship `name`, with
        links followed but collections left unexpanded.

        This is the raw material for :class:`.Page`; most clients want
        :meth:`resolve` instead.

        """
        self._check_exists(node, name, version)
        return ResolvedStream(self, node, name, version, expand=False)

    def page(self, node, name, version=None):
        """Returns the first value of the relationship `name` as a
        :class:`.Page`, or ``None`` if the relationship is empty or its
        first value is not a collection.

        """
        first = self.values(node, name, version).first()
        if not is_collection(first, self.profile):
            return None
        return Page(first, self)

    def fetch(self, url, position=None):
        """Dereferences `url` using the fetcher of this resolver.

        `position` is the index of the link within its array of links,
        if any, and is recorded in the raised exception.

        """
        if self.fetcher is None:
            raise LinkUnreachable(url, position=position,
                                  reason='no link fetcher configured')
        logger.debug('fetching %s', url)
        try:
            return self.fetcher.fetch(url)
        except LinkUnreachable as exception:
            if position is None:
                raise
            raise exception.at_position(position)


class _Traversal(object):
    """The state of one iteration over a :class:`ResolvedStream`.

    The traversal is an explicit stack of iterators rather than a
    recursion: the top iterator produces ``(url, value)`` pairs, where
    `url` is the link the value was fetched from (or ``None`` for an
    embedded value), and any collection it produces is replaced by a new
    iterator over that collection's members and following pages.

    Each distinct URL is fetched at most once per traversal; a URL
    appearing again, in the same array of links or on a later page,
    yields the document fetched the first time.

    """

    def __init__(self, resolver, expand=True):
        self.resolver = resolver
        self.expand = expand
        self.errors = []
        #: Maps each URL requested so far to the :class:`Future` holding
        #: its document.
        self.documents = {}
        self.lock = threading.Lock()

    def run(self, node, name, version):
        profile = self.resolver.profile
        stack = [self.values(node, name, version)]
        try:
            while stack:
                try:
                    url, value = next(stack[-1])
                except StopIteration:
                    stack.pop()
                    continue
                except MalformedCollection as exception:
                    # Only the expansion of the malformed node stops.
                    stack.pop()
                    self.failed(exception, 'malformed collection')
                    continue
                if self.expand and is_collection(value, profile):
                    stack.append(self.expand_collection(value, url))
                else:
                    yield value
        finally:
            # Closing the pending iterators cancels outstanding fetches.
            while stack:
                stack.pop().close()

    def values(self, node, name, version=None, skip_urls=()):
        """Yields ``(url, value)`` pairs for the values of the
        relationship `name` of `node`, with links followed but
        collections not yet expanded.

        Links to any of the URLs in `skip_urls` are not followed.

        """
        key, is_link = find_key(node, name, version)
        if key is None:
            return
        value = normalize(node[key])
        if not is_link:
            for element in value:
                yield None, element
            return
        positional = isinstance(value, Many)
        urls = []
        for position, url in enumerate(value):
            if url is None:
                continue
            if isinstance(url, str) and url in skip_urls:
                logger.warning('not following "%s" link to %s again',
                               name, url)
                continue
            urls.append((position if positional else None, url))
        for pair in self.fetch_all(urls):
            yield pair

    def expand_collection(self, node, url=None):
        """Yields ``(url, value)`` pairs for the members of the
        collection `node`, then for the members of each following page.

        `url` is the URL the collection was fetched from, if any. Each
        ``next`` link is followed only after the last member of the
        current page has been consumed, and a page already visited in
        this chain of pages is never visited again.

        """
        profile = self.resolver.profile
        visited = set([url]) if url is not None else set()
        while node is not None:
            check_collection(node)
            for pair in self.values(node, ITEM):
                yield pair
            pages = self.values(node, NEXT, skip_urls=visited)
            try:
                url, node = next(pages, (None, None))
            finally:
                pages.close()
            if node is None:
                break
            if not is_collection(node, profile):
                raise MalformedCollection(node, detail='"next" page is not'
                                          ' a collection')
            if url is not None:
                visited.add(url)
            logger.debug('continuing collection on next page %s', url)

    def failed(self, exception, what='unreachable link'):
        """Handles the unreachable link or malformed collection described
        by `exception` according to the strictness of the resolver.

        """
        if self.resolver.strict:
            raise exception
        logger.warning('skipping %s: %s', what, exception)
        self.errors.append(exception)

    def fetch_one(self, position, url):
        if not isinstance(url, str):
            raise LinkUnreachable(repr(url), position=position,
                                  reason='not a URL string')
        with self.lock:
            future = self.documents.get(url)
            first = future is None
            if first:
                future = self.documents[url] = Future()
        if first:
            try:
                future.set_result(self.resolver.fetch(url))
            except Exception as exception:
                future.set_exception(exception)
        else:
            logger.debug('reusing document fetched from %s', url)
        try:
            return url, future.result()
        except LinkUnreachable as exception:
            if position is None:
                raise
            raise exception.at_position(position)

    def fetch_all(self, urls):
        """Yields ``(url, document)`` pairs for each of the
        ``(position, url)`` pairs in `urls`, in order.

        At most ``max_workers`` fetches are in flight at any time, and
        nothing is fetched before the consumer asks for the first
        document. If the consumer stops early, fetches that have not
        started yet are cancelled.

        """
        max_workers = min(self.resolver.max_workers, len(urls))
        if max_workers <= 1:
            for position, url in urls:
                try:
                    yield self.fetch_one(position, url)
                except LinkUnreachable as exception:
                    self.failed(exception)
            return
        executor = ThreadPoolExecutor(max_workers=max_workers)
        pending = deque()
        remaining = iter(urls)
        try:
            while True:
                # Keep the window of in-flight fetches full.
                while len(pending) < max_workers:
                    try:
                        position, url = next(remaining)
                    except StopIteration:
                        break
                    pending.append(executor.submit(self.fetch_one, position,
                                                   url))
                if not pending:
                    break
                future = pending.popleft()
                try:
                    pair = future.result()
                except LinkUnreachable as exception:
                    self.failed(exception)
                    continue
                yield pair
        finally:
            for future in pending:
                future.cancel()
            executor.shutdown(wait=False)


def resolve(node, name, version=None, fetcher=None, **kw):
    """Returns the :class:`ResolvedStream` of values of the relationship
    `name` of the JSON object `node`.

    This is a shortcut for::

        RelationshipResolver(fetcher, **kw).resolve(node, name, version)

    """
    return RelationshipResolver(fetcher, **kw).resolve(node, name, version)
