# documents.py - building Graphable JSON documents
#
# Copyright 2016 Stephen Mizell and contributors.
#
# This file is part of Graphable-JSON.
#
# Graphable-JSON is distributed under both the GNU Affero General Public
# License version 3 and under the 3-clause BSD license. For more
# information, see LICENSE.AGPL and LICENSE.BSD.
"""Helpers for producing Graphable JSON.

A server can change the physical representation of a relationship
without breaking tolerant clients: a property may become a link, an
array may become a paginated collection, and a property may gain a
versioned sibling. The functions in this module build those
representations::

    >>> link('address', 'http://example.com/address/1')
    {'address_url': 'http://example.com/address/1'}
    >>> versioned('address', 'v2', {'street': '1 Main St'})
    {'address__v2': {'street': '1 Main St'}}

"""
from .collection import COLLECTION_PROFILE
from .collection import ITEM
from .collection import NEXT
from .collection import PREV
from .collection import PROFILE
from .keys import LINK_SUFFIXES
from .keys import base_key

#: Maps link styles to the corresponding key suffix.
LINK_STYLES = dict(zip(('snake', 'camel'), LINK_SUFFIXES))


def link_key(name, version=None, style='snake'):
    """Returns the key of the link form of the relationship `name`.

    `style` is either ``'snake'`` (``name_url``) or ``'camel'``
    (``nameUrl``).

    """
    try:
        suffix = LINK_STYLES[style]
    except KeyError:
        raise ValueError('unknown link style "{0}"'.format(style))
    return base_key(name, version) + suffix


def link(name, url_or_urls, version=None, style='snake'):
    """Returns a one-element dictionary linking the relationship `name`
    to a URL or a list of URLs.

    The result is meant to be merged into a resource object.

    """
    if isinstance(url_or_urls, tuple):
        url_or_urls = list(url_or_urls)
    return {link_key(name, version, style): url_or_urls}


def versioned(name, version, value):
    """Returns a one-element dictionary holding `value` as version
    `version` of the relationship `name`.

    """
    if version is None:
        raise ValueError('version must not be None')
    return {base_key(name, version): value}


def collection(items, next_=None, prev=None, link_items=False,
               profile=COLLECTION_PROFILE):
    """Returns a collection object whose members are `items`.

    `next_` and `prev` are the URLs of the adjacent pages, if any. If
    `link_items` is ``True``, `items` are URLs and the members are given
    as an array of links (``item_url``) instead of embedded values.

    """
    document = {PROFILE: profile}
    if link_items:
        document.update(link(ITEM, list(items)))
    else:
        document[ITEM] = list(items)
    if next_ is not None:
        document.update(link(NEXT, next_))
    if prev is not None:
        document.update(link(PREV, prev))
    return document


class Paginated(object):
    """Splits a list of items into pages of a collection.

    `items` is the full list of members. `page_size` is the maximum
    number of members per page; it must be positive. `url_for_page` is
    a function that takes a page number and returns the URL of that
    page. Page numbers start at 1.

    For example::

        >>> pages = Paginated(['a', 'b', 'c'], page_size=2,
        ...                   url_for_page='/letters?page={0}'.format)
        >>> pages.num_pages
        2
        >>> pages.page(1)['next_url']
        '/letters?page=2'
        >>> pages.page(2)['item']
        ['c']

    An empty list of items has a single, empty page.

    """

    def __init__(self, items, page_size, url_for_page, link_items=False):
        if page_size < 1:
            raise ValueError('page_size must be positive')
        self.items = list(items)
        self.page_size = page_size
        self.url_for_page = url_for_page
        self.link_items = link_items

    @property
    def num_pages(self):
        """The total number of pages, which is at least one."""
        return max(1, -(-len(self.items) // self.page_size))

    def page(self, number):
        """Returns the collection object for the page numbered `number`.

        Raises :exc:`IndexError` if there is no such page.

        """
        if not 1 <= number <= self.num_pages:
            raise IndexError('no page {0}'.format(number))
        start = (number - 1) * self.page_size
        items = self.items[start:start + self.page_size]
        next_ = None
        prev = None
        if number < self.num_pages:
            next_ = self.url_for_page(number + 1)
        if number > 1:
            prev = self.url_for_page(number - 1)
        return collection(items, next_=next_, prev=prev,
                          link_items=self.link_items)

    def first_url(self):
        """Returns the URL of the first page."""
        return self.url_for_page(1)

    def __iter__(self):
        for number in range(1, self.num_pages + 1):
            yield self.page(number)
