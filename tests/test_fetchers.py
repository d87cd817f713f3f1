# test_fetchers.py - unit tests for link fetchers
#
# Copyright 2016 Stephen Mizell and contributors.
#
# This file is part of Graphable-JSON.
#
# Graphable-JSON is distributed under both the GNU Affero General Public
# License version 3 and under the 3-clause BSD license. For more
# information, see LICENSE.AGPL and LICENSE.BSD.
"""Unit tests for the :mod:`graphable_json.fetchers` module."""
from flask import Flask
import pytest
import requests

from graphable_json import CachingFetcher
from graphable_json import FlaskAppFetcher
from graphable_json import LinkFetcher
from graphable_json import LinkUnreachable
from graphable_json import MappingFetcher
from graphable_json import RelationshipResolver
from graphable_json import RequestsFetcher
from graphable_json.fetchers import CallableFetcher
from graphable_json.fetchers import as_fetcher

from .helpers import FlaskTestBase
from .helpers import url


def make_response(status, body, link='http://x/'):
    """Returns a :class:`requests.Response` with the given status code
    and body, as if it had been received over the network.

    """
    response = requests.Response()
    response.status_code = status
    response._content = body.encode('utf-8')
    response.url = link
    response.reason = 'Reason'
    return response


class StubSession(object):
    """Stands in for a :class:`requests.Session`, answering requests from
    a dictionary mapping URLs to responses or exceptions.

    """

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def get(self, link, headers=None, timeout=None):
        self.calls.append((link, headers, timeout))
        result = self.responses[link]
        if isinstance(result, Exception):
            raise result
        return result


class TestRequestsFetcher(object):
    """Unit tests for :class:`graphable_json.RequestsFetcher`."""

    def test_fetch(self):
        session = StubSession({'http://x/a': make_response(200, '{"a": 1}')})
        fetcher = RequestsFetcher(session=session, timeout=3,
                                  headers={'Authorization': 'Bearer t'})
        assert fetcher.fetch('http://x/a') == {'a': 1}
        link, headers, timeout = session.calls[0]
        assert link == 'http://x/a'
        assert headers == {'Accept': 'application/json',
                           'Authorization': 'Bearer t'}
        assert timeout == 3

    def test_error_status(self):
        session = StubSession({'http://x/a': make_response(404, '{}')})
        fetcher = RequestsFetcher(session=session)
        with pytest.raises(LinkUnreachable) as excinfo:
            fetcher.fetch('http://x/a')
        assert excinfo.value.reason == 'status 404'
        assert isinstance(excinfo.value.cause, requests.HTTPError)

    def test_invalid_json(self):
        session = StubSession({'http://x/a': make_response(200, '<html>')})
        fetcher = RequestsFetcher(session=session)
        with pytest.raises(LinkUnreachable) as excinfo:
            fetcher.fetch('http://x/a')
        assert excinfo.value.url == 'http://x/a'

    def test_transport_error(self):
        error = requests.ConnectionError('connection refused')
        session = StubSession({'http://x/a': error})
        fetcher = RequestsFetcher(session=session)
        with pytest.raises(LinkUnreachable) as excinfo:
            fetcher.fetch('http://x/a')
        assert excinfo.value.cause is error

    def test_default_session(self):
        fetcher = RequestsFetcher()
        assert isinstance(fetcher.session, requests.Session)

    def test_from_config(self):
        config = {'GRAPHABLE_JSON_TIMEOUT': 1.5,
                  'GRAPHABLE_JSON_HEADERS': {'X-Client': 'test'}}
        fetcher = RequestsFetcher.from_config(config)
        assert fetcher.timeout == 1.5
        assert fetcher.headers['X-Client'] == 'test'
        assert RequestsFetcher.from_config({}).timeout == 10

    def test_with_resolver(self):
        """Tests that the resolver follows links through the requests
        fetcher.

        """
        session = StubSession({
            'http://x/1': make_response(200, '{"id": 1}'),
            'http://x/2': make_response(500, '{}'),
        })
        resolver = RelationshipResolver(RequestsFetcher(session=session))
        document = {'people_url': ['http://x/1', 'http://x/2']}
        stream = resolver.resolve(document, 'people')
        assert list(stream) == [{'id': 1}]
        assert stream.errors[0].reason == 'status 500'
        assert stream.errors[0].position == 1


class TestFlaskAppFetcher(FlaskTestBase):
    """Unit tests for :class:`graphable_json.FlaskAppFetcher`."""

    def test_fetch(self):
        person_url = self.serve('people/1', {'name': 'Jeffrey'})
        assert self.fetcher.fetch(person_url) == {'name': 'Jeffrey'}
        assert self.hits == ['people/1']

    def test_relative_url(self):
        self.serve('people/1', {'name': 'Jeffrey'})
        assert self.fetcher.fetch('/people/1') == {'name': 'Jeffrey'}

    def test_not_found(self):
        with pytest.raises(LinkUnreachable) as excinfo:
            self.fetcher.fetch(url('people/2'))
        assert excinfo.value.reason == 'status 404'

    def test_headers(self):
        fetcher = FlaskAppFetcher(self.flaskapp, headers={'X-Client': 'test'})
        headers = fetcher.fetch(url('echo-headers'))
        assert headers['Accept'] == 'application/json'
        assert headers['X-Client'] == 'test'

    def test_invalid_json(self):
        app = Flask(__name__)

        @app.route('/text')
        def text():
            return 'not JSON'

        fetcher = FlaskAppFetcher(app)
        with pytest.raises(LinkUnreachable) as excinfo:
            fetcher.fetch('/text')
        assert isinstance(excinfo.value.cause, ValueError)


class TestMappingFetcher(object):
    """Unit tests for :class:`graphable_json.MappingFetcher`."""

    def test_fetch(self):
        fetcher = MappingFetcher({'http://x/a': [1, 2]})
        assert fetcher.fetch('http://x/a') == [1, 2]
        assert fetcher('http://x/a') == [1, 2]
        assert fetcher.requests == ['http://x/a', 'http://x/a']

    def test_missing(self):
        fetcher = MappingFetcher()
        with pytest.raises(LinkUnreachable) as excinfo:
            fetcher.fetch('http://x/a')
        assert excinfo.value.reason == 'not found'
        assert fetcher.requests == ['http://x/a']


class TestCachingFetcher(object):
    """Unit tests for :class:`graphable_json.CachingFetcher`."""

    def setup_method(self):
        self.inner = MappingFetcher({'http://x/a': 'a', 'http://x/b': 'b'})
        self.fetcher = CachingFetcher(self.inner)

    def test_cached(self):
        assert self.fetcher.fetch('http://x/a') == 'a'
        assert self.fetcher.fetch('http://x/a') == 'a'
        assert self.inner.requests == ['http://x/a']
        assert 'http://x/a' in self.fetcher

    def test_invalidate_one(self):
        self.fetcher.fetch('http://x/a')
        self.fetcher.fetch('http://x/b')
        self.fetcher.invalidate('http://x/a')
        assert 'http://x/a' not in self.fetcher
        assert 'http://x/b' in self.fetcher
        self.fetcher.fetch('http://x/a')
        assert self.inner.requests == ['http://x/a', 'http://x/b',
                                       'http://x/a']

    def test_invalidate_all(self):
        self.fetcher.fetch('http://x/a')
        self.fetcher.invalidate()
        assert 'http://x/a' not in self.fetcher

    def test_failures_not_cached(self):
        with pytest.raises(LinkUnreachable):
            self.fetcher.fetch('http://x/c')
        self.inner.mapping['http://x/c'] = 'c'
        assert self.fetcher.fetch('http://x/c') == 'c'

    def test_across_resolutions(self):
        """Tests that a caching fetcher shared between resolutions
        fetches each link only once.

        """
        resolver = RelationshipResolver(self.fetcher)
        document = {'letter_url': 'http://x/a'}
        assert list(resolver.resolve(document, 'letter')) == ['a']
        assert list(resolver.resolve(document, 'letter')) == ['a']
        assert self.inner.requests == ['http://x/a']


class TestAsFetcher(object):
    """Unit tests for the :func:`graphable_json.fetchers.as_fetcher`
    function.

    """

    def test_none(self):
        assert as_fetcher(None) is None

    def test_callable(self):
        fetcher = as_fetcher(lambda link: {'url': link})
        assert isinstance(fetcher, LinkFetcher)
        assert fetcher.fetch('http://x/a') == {'url': 'http://x/a'}

    def test_object_with_fetch(self):
        class Fetcher(object):
            def fetch(self, link):
                raise KeyError(link)

        fetcher = as_fetcher(Fetcher())
        with pytest.raises(LinkUnreachable) as excinfo:
            fetcher.fetch('http://x/a')
        assert isinstance(excinfo.value.cause, KeyError)

    def test_already_wrapped(self):
        fetcher = CallableFetcher(lambda link: link)
        assert as_fetcher(fetcher) is fetcher

    def test_invalid(self):
        with pytest.raises(TypeError):
            as_fetcher('http://x/a')

    def test_base_class(self):
        with pytest.raises(NotImplementedError):
            LinkFetcher().fetch('http://x/a')
