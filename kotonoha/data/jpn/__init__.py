# -*- coding: utf-8 -*-

# Copyright 2019 Julian Betz
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
# 
#      http://www.apache.org/licenses/LICENSE-2.0
# 
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
# WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""Parsers for the Japanese corpora.

Every parser is a pure function from one record text to one typed record (see
:mod:`kotonoha.data.records`) that raises
:class:`~kotonoha.errors.MalformedRecord` for records it cannot parse.

"""


from xml.etree import ElementTree

from ...errors import MalformedRecord


XML_LANG = '{http://www.w3.org/XML/1998/namespace}lang'
"""Qualified name of the ``xml:lang`` attribute."""


def element_text(element):
    """Return the stripped text of an element, ``None`` if missing or empty."""
    if element is None:
        return None
    text = ''.join(element.itertext()).strip()
    return text if text else None


def texts(parent, tag):
    """Return the non-empty texts of all children of ``parent`` named ``tag``."""
    return [text for text in (element_text(child)
                              for child in parent.findall(tag))
            if text is not None]


def unique(values):
    """Remove duplicates from ``values``, retaining the first occurrences."""
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


def safe_int(text):
    """Parse an integer, returning ``None`` instead of failing."""
    if text is None:
        return None
    try:
        return int(str(text).strip())
    except ValueError:
        return None


def parse_xml(text, tag):
    """Parse a record text into an element named ``tag``.

    :raises MalformedRecord: If the text is not well-formed XML or its root
        element is not ``tag``.

    """
    try:
        root = ElementTree.fromstring(text)
    except ElementTree.ParseError as error:
        raise MalformedRecord('Invalid XML (%s)' % (error,), text) from error
    if root.tag != tag:
        raise MalformedRecord('Expected <%s>, found <%s>' % (tag, root.tag),
                              text)
    return root
