# collection.py - recognizing and paging through collection objects
#
# Copyright 2016 Stephen Mizell and contributors.
#
# This file is part of Graphable-JSON.
#
# Graphable-JSON is distributed under both the GNU Affero General Public
# License version 3 and under the 3-clause BSD license. For more
# information, see LICENSE.AGPL and LICENSE.BSD.
"""Collection objects.

A collection is any JSON object whose ``profile`` relationship names the
collection profile URI. Its members are given by the ``item``
relationship, and it may link to adjacent pages with the ``next`` and
``prev`` relationships. Recognition is purely structural: where the
object appears in a document does not matter.

Usually collections are expanded transparently by the resolver. The
:class:`Page` class is for clients that want to walk the pages
themselves, in particular backwards via ``prev``.

"""
from .exceptions import MalformedCollection
from .keys import find_key
from .values import normalize

#: The profile URI that marks a JSON object as a collection.
COLLECTION_PROFILE = 'https://github.com/smizell/graphablejson/wiki/Collection'

#: The relationship naming the profile of an object.
PROFILE = 'profile'

#: The relationship naming the members of a collection.
ITEM = 'item'

#: The relationship naming the following page of a collection.
NEXT = 'next'

#: The relationship naming the preceding page of a collection.
PREV = 'prev'


def is_collection(node, profile=COLLECTION_PROFILE):
    """Returns ``True`` if and only if `node` is a JSON object whose
    ``profile`` relationship contains exactly `profile`.

    The ``profile`` relationship may be given either as a literal value
    (``"profile": "<uri>"``) or in link form (``"profile_url": "<uri>"``),
    and either as a single value or as an array. The profile URI is an
    identifier, so it is compared but never fetched.

    """
    if not isinstance(node, dict):
        return False
    key, _ = find_key(node, PROFILE)
    if key is None:
        return False
    return any(value == profile for value in normalize(node[key]))


def check_collection(node):
    """Raises :exc:`.MalformedCollection` unless the collection object
    `node` has an ``item`` relationship, literal or linked.

    An ``item`` property that is present but ``null`` is allowed; it
    denotes an empty page.

    """
    key, _ = find_key(node, ITEM)
    if key is None:
        raise MalformedCollection(node)


class Page(object):
    """A read-only view of one page of a collection.

    `node` is the collection object and `resolver` is the
    :class:`~graphable_json.resolver.RelationshipResolver` used to
    resolve its relationships (and to fetch adjacent pages).

    Raises :exc:`.MalformedCollection` if `node` is not a collection or
    has no ``item`` relationship.

    """

    def __init__(self, node, resolver):
        if not is_collection(node, resolver.profile):
            raise MalformedCollection(node, detail='object is not a'
                                      ' collection')
        check_collection(node)
        self.node = node
        self.resolver = resolver

    def items(self):
        """Returns the stream of members of this page only.

        Members that are themselves collections are expanded, but this
        page's ``next`` link is not followed.

        """
        return self.resolver.resolve(self.node, ITEM)

    @property
    def has_next(self):
        """Whether this page has a ``next`` relationship."""
        return find_key(self.node, NEXT)[0] is not None

    @property
    def has_prev(self):
        """Whether this page has a ``prev`` relationship."""
        return find_key(self.node, PREV)[0] is not None

    def _adjacent(self, name):
        stream = self.resolver.values(self.node, name)
        for node in stream:
            return Page(node, self.resolver)
        stream.raise_for_errors()
        return None

    def next_page(self):
        """Returns the following :class:`Page`, or ``None`` if this is
        the last page.

        """
        return self._adjacent(NEXT)

    def prev_page(self):
        """Returns the preceding :class:`Page`, or ``None`` if this is
        the first page.

        """
        return self._adjacent(PREV)

    def pages(self, reverse=False):
        """Yields this page and then each following page, fetching each
        one only when it is needed.

        If `reverse` is ``True``, the traversal follows ``prev`` instead.

        """
        page = self
        while page is not None:
            yield page
            page = page.prev_page() if reverse else page.next_page()

    def __repr__(self):
        return '<Page next={0} prev={1}>'.format(self.has_next, self.has_prev)
