# exceptions.py - exceptions raised while resolving relationships
#
# Copyright 2016 Stephen Mizell and contributors.
#
# This file is part of Graphable-JSON.
#
# Graphable-JSON is distributed under both the GNU Affero General Public
# License version 3 and under the 3-clause BSD license. For more
# information, see LICENSE.AGPL and LICENSE.BSD.
"""Exceptions that arise from resolving a relationship of a Graphable
JSON document.

Absent and ``null`` properties are never errors; they resolve to an empty
stream. The exceptions in this module cover the remaining failure cases:
an explicitly requested version that does not exist, a link that cannot be
dereferenced, and an object that claims to be a collection but is not
usable as one.

"""


class GraphableJSONException(Exception):
    """Base class for all exceptions raised by this package.

    `detail` is an optional string describing the problem in more
    detail. It is incorporated in the return value of :meth:`.message`
    and in the string representation of the exception.

    """

    #: The short description of the problem used by :meth:`message`.
    #:
    #: Subclasses should override this class attribute.
    base_message = 'Failed to resolve relationship'

    def __init__(self, detail=None, *args, **kw):
        super(GraphableJSONException, self).__init__(*args, **kw)

        #: A string describing the problem in more detail.
        self.detail = detail

    def message(self):
        """Returns a more detailed description of the problem as a
        string.

        """
        if self.detail is not None:
            return '{0}: {1}'.format(self.base_message, self.detail)
        return self.base_message

    def __str__(self):
        return self.message()


class RelationshipNotFound(GraphableJSONException):
    """Raised when a specific version of a relationship is requested but
    neither the versioned key nor any of its link forms is present.

    `name` is the requested relationship name and `version` the
    requested version. Both are stored as instance attributes.

    An unversioned request never raises this exception; it resolves to
    an empty stream instead.

    """
    base_message = 'Relationship not found'

    def __init__(self, name, version=None, *args, **kw):
        self.name = name
        self.version = version
        if version is None:
            detail = 'no property for relationship "{0}"'.format(name)
        else:
            detail = ('no property for version "{0}" of relationship'
                      ' "{1}"').format(version, name)
        super(RelationshipNotFound, self).__init__(detail, *args, **kw)


class LinkUnreachable(GraphableJSONException):
    """Raised when a link cannot be dereferenced.

    `url` is the URL that failed. `position` is the index of the failed
    element within the array of links it came from, or ``None`` if the
    link was a single URL. `cause` is the underlying exception, if any
    (a transport error or a JSON decoding error, for example).

    """
    base_message = 'Link unreachable'

    def __init__(self, url, cause=None, position=None, reason=None, *args,
                 **kw):
        self.url = url
        self.cause = cause
        self.position = position
        self.reason = reason
        detail = '"{0}"'.format(url)
        if position is not None:
            detail = '{0} at position {1}'.format(detail, position)
        if reason is not None:
            detail = '{0} ({1})'.format(detail, reason)
        elif cause is not None:
            detail = '{0} ({1})'.format(detail, cause)
        super(LinkUnreachable, self).__init__(detail, *args, **kw)

    def at_position(self, position):
        """Returns a copy of this exception attributed to the element at
        index `position` of an array of links.

        """
        return LinkUnreachable(self.url, cause=self.cause,
                               position=position, reason=self.reason)


class MalformedCollection(GraphableJSONException):
    """Raised when an object carries the collection profile but does not
    provide an ``item`` relationship.

    `node` is the (problematic) collection object.

    """
    base_message = 'Malformed collection'

    def __init__(self, node=None, detail=None, *args, **kw):
        self.node = node
        if detail is None:
            detail = 'collection has no "item" relationship'
        super(MalformedCollection, self).__init__(detail, *args, **kw)


class MultipleExceptions(GraphableJSONException):
    """Raised when there are multiple problems resolving a single
    stream, as when several links in an array of links are unreachable.

    `exceptions` is a non-empty sequence of other exceptions that have
    been raised in the code.

    """
    base_message = 'Multiple errors while resolving relationship'

    def __init__(self, exceptions, *args, **kw):
        #: Sequence of other exceptions that have been raised in the code.
        self.exceptions = list(exceptions)
        detail = '; '.join(str(exception) for exception in self.exceptions)
        super(MultipleExceptions, self).__init__(detail, *args, **kw)
