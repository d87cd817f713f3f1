# keys.py - property key naming conventions
#
# Copyright 2016 Stephen Mizell and contributors.
#
# This file is part of Graphable-JSON.
#
# Graphable-JSON is distributed under both the GNU Affero General Public
# License version 3 and under the 3-clause BSD license. For more
# information, see LICENSE.AGPL and LICENSE.BSD.
"""Naming conventions that map a relationship name to the physical keys
of a JSON object.

A relationship named ``address`` may appear in a document under any of
the following keys::

    address             literal value
    address_url         link (snake case)
    addressUrl          link (camel case)
    address__v2         literal value of version "v2"
    address__v2_url     link to version "v2"
    address__v2Url      link to version "v2"

All knowledge of these conventions lives in this module. The resolver
only ever asks for the ordered list of keys to probe.

"""
from collections import namedtuple

#: The suffixes that turn a property into a link, in the order in which
#: they are probed.
LINK_SUFFIXES = ('_url', 'Url')

#: The separator between a relationship name and a version token.
VERSION_SEPARATOR = '__'

#: The parts of a physical property key.
#:
#: `name` is the relationship name, `version` is the version token or
#: ``None``, and `is_link` is whether the key holds one or more URLs.
PropertyKey = namedtuple('PropertyKey', ['name', 'version', 'is_link'])


def _check(name, version):
    if not name:
        raise ValueError('relationship name must be a non-empty string')
    if version is not None:
        if not version:
            raise ValueError('version must be a non-empty string or None')
        if VERSION_SEPARATOR in version:
            msg = 'version must not contain "{0}"'.format(VERSION_SEPARATOR)
            raise ValueError(msg)


def base_key(name, version=None):
    """Returns the key holding the literal value of the relationship
    `name` at the given `version`.

        >>> base_key('address')
        'address'
        >>> base_key('address', 'v2')
        'address__v2'

    """
    _check(name, version)
    if version is None:
        return name
    return '{0}{1}{2}'.format(name, VERSION_SEPARATOR, version)


def link_keys(name, version=None):
    """Returns a tuple of the keys that may hold a link for the
    relationship `name` at the given `version`.

        >>> link_keys('address', 'v2')
        ('address__v2_url', 'address__v2Url')

    """
    base = base_key(name, version)
    return tuple(base + suffix for suffix in LINK_SUFFIXES)


def candidate_keys(name, version=None):
    """Returns the list of keys to probe for the relationship `name` at
    the given `version`, in priority order.

    The literal key always comes first, followed by its link forms. An
    unversioned request never yields a versioned key and vice versa.

    """
    return [base_key(name, version)] + list(link_keys(name, version))


def find_key(node, name, version=None):
    """Returns a pair ``(key, is_link)`` naming the first of the
    :func:`candidate_keys` present in the JSON object `node`.

    If none is present, or if `node` is not a JSON object at all, this
    function returns ``(None, False)``.

    """
    keys = candidate_keys(name, version)
    if not isinstance(node, dict):
        return None, False
    for i, key in enumerate(keys):
        if key in node:
            return key, i > 0
    return None, False


def parse_key(key):
    """Splits the physical property `key` into a :data:`PropertyKey`.

        >>> parse_key('address__v2Url')
        PropertyKey(name='address', version='v2', is_link=True)
        >>> parse_key('email')
        PropertyKey(name='email', version=None, is_link=False)

    A bare suffix such as ``'_url'`` is treated as an ordinary name.

    """
    is_link = False
    for suffix in LINK_SUFFIXES:
        if key.endswith(suffix) and len(key) > len(suffix):
            key = key[:-len(suffix)]
            is_link = True
            break
    name, separator, version = key.rpartition(VERSION_SEPARATOR)
    if not separator or not name or not version:
        return PropertyKey(key, None, is_link)
    return PropertyKey(name, version, is_link)


def relationship_names(node):
    """Returns the sorted list of relationship names offered by the JSON
    object `node`, regardless of version or representation.

    """
    if not isinstance(node, dict):
        return []
    return sorted(set(parse_key(key).name for key in node))


def versions(node, name):
    """Returns the sorted list of explicit versions of the relationship
    `name` present in the JSON object `node`.

    The unversioned property is not listed; it is always requested by
    passing no version at all.

    """
    if not isinstance(node, dict):
        return []
    found = set()
    for key in node:
        parsed = parse_key(key)
        if parsed.name == name and parsed.version is not None:
            found.add(parsed.version)
    return sorted(found)
