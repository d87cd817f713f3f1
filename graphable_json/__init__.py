# __init__.py - indicates that this directory is a Python package
#
# Copyright 2016 Stephen Mizell and contributors.
#
# This file is part of Graphable-JSON.
#
# Graphable-JSON is distributed under both the GNU Affero General Public
# License version 3 and under the 3-clause BSD license. For more
# information, see LICENSE.AGPL and LICENSE.BSD.
"""Provides a client-side resolver for Graphable JSON documents.

In Graphable JSON every property of a resource is a relationship whose
value is a stream of values. The :class:`RelationshipResolver` class
turns a property into that stream, following links, expanding paginated
collections, and selecting versions as needed.

"""
# The following names are available as part of the public API for
# Graphable-JSON. End users of this package can import these names by doing
# ``from graphable_json import RelationshipResolver``, for example.
from .collection import COLLECTION_PROFILE
from .collection import Page
from .collection import is_collection
from .documents import Paginated
from .documents import collection
from .documents import link
from .documents import versioned
from .exceptions import GraphableJSONException
from .exceptions import LinkUnreachable
from .exceptions import MalformedCollection
from .exceptions import MultipleExceptions
from .exceptions import RelationshipNotFound
from .fetchers import CachingFetcher
from .fetchers import FlaskAppFetcher
from .fetchers import LinkFetcher
from .fetchers import MappingFetcher
from .fetchers import RequestsFetcher
from .keys import candidate_keys
from .keys import relationship_names
from .keys import versions
from .resolver import RelationshipResolver
from .resolver import ResolvedStream
from .resolver import resolve

#: The current version of this package.
#:
#: This should be the same as the version specified in the :file:`setup.py`
#: file.
__version__ = '0.1.0-dev'

__all__ = [
    'CachingFetcher',
    'candidate_keys',
    'collection',
    'COLLECTION_PROFILE',
    'FlaskAppFetcher',
    'GraphableJSONException',
    'is_collection',
    'link',
    'LinkFetcher',
    'LinkUnreachable',
    'MalformedCollection',
    'MappingFetcher',
    'MultipleExceptions',
    'Page',
    'Paginated',
    'RelationshipNotFound',
    'RelationshipResolver',
    'relationship_names',
    'RequestsFetcher',
    'ResolvedStream',
    'resolve',
    'versioned',
    'versions',
]
