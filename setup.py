# setup.py - packaging and distribution configuration for Graphable-JSON
#
# Copyright 2016 Stephen Mizell and contributors.
#
# This file is part of Graphable-JSON.
#
# Graphable-JSON is distributed under both the GNU Affero General Public
# License version 3 and under the 3-clause BSD license. For more
# information, see LICENSE.AGPL and LICENSE.BSD.
"""Graphable-JSON is a client library for `Graphable JSON`_ documents,
in which API resources are graphs of relationships rather than fixed
structures.

A client asks for a relationship by name and receives a lazy stream of
values, regardless of whether the server embedded the values, linked to
them, paginated them in a collection, or versioned them. Links are
fetched with `requests`_ or, for in-process applications, through a
`Flask`_ test client.

.. _Graphable JSON: https://github.com/smizell/graphablejson
.. _requests: http://docs.python-requests.org
.. _Flask: http://flask.pocoo.org

"""
import codecs
import os.path
import re
from setuptools import setup, find_packages

#: A regular expression capturing the version number from Python code.
VERSION_RE = r"^__version__ = ['\"]([^'\"]*)['\"]"

#: The installation requirements for Graphable-JSON.
REQUIREMENTS = ['flask>=1.0', 'requests>=2.0']

#: The requirements for running the unit tests.
TEST_REQUIREMENTS = ['pytest']

#: The absolute path to this file.
HERE = os.path.abspath(os.path.dirname(__file__))


def read(*parts):
    """Reads the entire contents of the file whose path is given as `parts`."""
    with codecs.open(os.path.join(HERE, *parts), 'r') as f:
        return f.read()


def find_version(*file_path):
    """Returns the version number appearing in the file in the given file
    path.

    Each positional argument indicates a member of the path.

    """
    version_file = read(*file_path)
    version_match = re.search(VERSION_RE, version_file, re.MULTILINE)
    if version_match:
        return version_match.group(1)
    raise RuntimeError('Unable to find version string.')


setup(
    author='Stephen Mizell',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Environment :: Web Environment',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        ('License :: OSI Approved :: '
         'GNU Affero General Public License v3 or later (AGPLv3+)'),
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Internet :: WWW/HTTP',
        'Topic :: Software Development :: Libraries :: Python Modules'
    ],
    description=('Client-side relationship resolver for Graphable JSON'
                 ' documents'),
    extras_require={'test': TEST_REQUIREMENTS},
    install_requires=REQUIREMENTS,
    include_package_data=True,
    keywords=['JSON', 'hypermedia', 'API', 'REST'],
    license='GNU AGPLv3+ or BSD',
    long_description=__doc__,
    name='Graphable-JSON',
    platforms='any',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.6',
    url='https://github.com/smizell/graphablejson',
    version=find_version('graphable_json', '__init__.py'),
    zip_safe=False
)
