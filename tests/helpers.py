# helpers.py - helper functions for unit tests
#
# Copyright 2016 Stephen Mizell and contributors.
#
# This file is part of Graphable-JSON.
#
# Graphable-JSON is distributed under both the GNU Affero General Public
# License version 3 and under the 3-clause BSD license. For more
# information, see LICENSE.AGPL and LICENSE.BSD.
"""Helper functions for unit tests."""
from flask import Flask
from flask import abort
from flask import json
from flask import request

from graphable_json import FlaskAppFetcher
from graphable_json import RelationshipResolver

dumps = json.dumps

#: The base URL of the documents served by :class:`FlaskTestBase`.
BASE_URL = 'http://localhost'


def url(path):
    """Returns the absolute URL of the document served at `path`."""
    return '{0}/{1}'.format(BASE_URL, path.lstrip('/'))


class FlaskTestBase(object):
    """Base class for tests which dereference links against a Flask
    application.

    The application serves every document in the dictionary
    ``self.documents``, keyed by path (for example ``'people/1'``), and
    responds with :http:statuscode:`404` for any other path. The paths
    requested so far, in order, are recorded in ``self.hits``.

    The Flask application is accessible at ``self.flaskapp``, the link
    fetcher at ``self.fetcher``, and a resolver using that fetcher at
    ``self.resolver``.

    """

    def setup_method(self):
        """Creates the Flask application, the fetcher, and the
        resolver.

        """
        app = Flask(__name__)
        app.config['DEBUG'] = True
        app.config['TESTING'] = True
        app.config['SERVER_NAME'] = 'localhost'
        app.logger.disabled = True
        self.flaskapp = app
        self.documents = {}
        self.hits = []

        @app.route('/<path:path>')
        def serve(path):
            self.hits.append(path)
            if path not in self.documents:
                abort(404)
            return app.response_class(dumps(self.documents[path]),
                                      mimetype='application/json')

        @app.route('/echo-headers')
        def echo_headers():
            return app.response_class(dumps(dict(request.headers)),
                                      mimetype='application/json')

        self.fetcher = FlaskAppFetcher(app)
        self.resolver = RelationshipResolver(fetcher=self.fetcher,
                                             max_workers=1)

    def serve(self, path, document):
        """Serves `document` at `path` and returns its absolute URL."""
        self.documents[path] = document
        return url(path)
