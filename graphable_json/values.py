# values.py - normalization of property values
#
# Copyright 2016 Stephen Mizell and contributors.
#
# This file is part of Graphable-JSON.
#
# Graphable-JSON is distributed under both the GNU Affero General Public
# License version 3 and under the 3-clause BSD license. For more
# information, see LICENSE.AGPL and LICENSE.BSD.
"""Normalizes the value of a JSON property into one of three shapes.

Every property value is exactly one of absent, ``null``, a scalar, an
object, or an array. The :func:`normalize` function collapses these into
:class:`Empty`, :class:`Single`, or :class:`Many`, so that the code that
follows links and expands collections never has to inspect raw JSON
shapes itself.

"""


class Value(object):
    """Base class for a normalized property value.

    Each subclass is iterable over its elements, in source order.

    """

    __slots__ = ()

    #: The elements of this value, as a tuple.
    elements = ()

    def __iter__(self):
        return iter(self.elements)

    def __len__(self):
        return len(self.elements)

    def __eq__(self, other):
        return (type(self) is type(other)
                and self.elements == other.elements)

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash((type(self).__name__, len(self.elements)))


class Empty(Value):
    """An absent or ``null`` property value."""

    __slots__ = ()

    def __repr__(self):
        return 'Empty()'


class Single(Value):
    """A scalar or object property value."""

    __slots__ = ('value', )

    def __init__(self, value):
        self.value = value

    @property
    def elements(self):
        return (self.value, )

    def __repr__(self):
        return 'Single({0!r})'.format(self.value)


class Many(Value):
    """An array property value.

    `values` is any iterable; it is copied into a tuple so that later
    changes to the source list are not observed.

    """

    __slots__ = ('values', )

    def __init__(self, values):
        self.values = tuple(values)

    @property
    def elements(self):
        return self.values

    def __repr__(self):
        return 'Many({0!r})'.format(list(self.values))


#: The shared instance representing an absent or ``null`` value.
EMPTY = Empty()


def normalize(value):
    """Returns the normalized form of the JSON property value `value`.

    ``None`` (an absent key or a JSON ``null``) becomes :data:`EMPTY`, a
    list becomes :class:`Many`, and anything else becomes
    :class:`Single`::

        >>> normalize(None)
        Empty()
        >>> normalize('a@x.com')
        Single('a@x.com')
        >>> normalize(['a@x.com', 'b@x.com'])
        Many(['a@x.com', 'b@x.com'])

    An empty array normalizes to an empty :class:`Many`, which iterates
    exactly like :data:`EMPTY`.

    """
    if value is None:
        return EMPTY
    if isinstance(value, (list, tuple)):
        return Many(value)
    return Single(value)
