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


"""Serialization of list-valued record attributes into text columns."""


import json


def list_as_tuple_hook(x):
    return {key: tuple(value)
            if isinstance(value, list)
            else value
            for key, value in x.items()}


def freeze(value):
    """Recursively convert lists into tuples."""
    if isinstance(value, list):
        return tuple(freeze(v) for v in value)
    return value


def to_column(value):
    """Encode a record attribute for storage in a text column.

    :param value: ``None``, or a (possibly nested) tuple or dictionary of
        JSON-serializable values.  Named tuples are stored as plain arrays.

    :return: ``None`` if ``value`` is ``None``, its JSON representation
        otherwise.  Non-ASCII characters are stored verbatim.

    """
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=False)


def from_column(text, factory=None):
    """Decode a text column written by :func:`to_column`.

    :param str text: The column value, possibly ``None``.

    :param factory: If given, a callable that every element of the decoded
        array is unpacked into, e.g. a named tuple class.

    :return: ``None`` for ``None``, a dictionary with tuple values for JSON
        objects, a tuple otherwise.

    """
    if text is None:
        return None
    value = json.loads(text, object_hook=list_as_tuple_hook)
    if isinstance(value, dict):
        return value
    value = freeze(value)
    if factory is not None:
        value = tuple(factory(*element) for element in value)
    return value
