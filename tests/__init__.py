# __init__.py - indicates that this directory is a Python package
#
# Copyright 2016 Stephen Mizell and contributors.
#
# This file is part of Graphable-JSON.
#
# Graphable-JSON is distributed under both the GNU Affero General Public
# License version 3 and under the 3-clause BSD license. For more
# information, see LICENSE.AGPL and LICENSE.BSD.
"""Unit tests for Graphable-JSON.

The :mod:`test_resolver` module contains explicit tests for the
behavior a conforming client must exhibit: empty streams for absent and
``null`` properties, link transparency, collection transparency,
pagination, and versioning. The remaining modules test the building
blocks individually.

Run the full test suite from the command-line using ``pytest``.

"""
