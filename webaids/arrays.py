# Copyright (c) 2011-2015 Rackspace US, Inc.
# All Rights Reserved.
#    Licensed under the Apache License, Version 2.0 (the "License"); you may
#    not use this file except in compliance with the License. You may obtain
#    a copy of the License at
#
#         http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
#    WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
#    License for the specific language governing permissions and limitations
#    under the License.

"""Helpers for lists of records and ordered (associative) dicts.

Records are plain dicts. Functions that take "values" accept either a list
or a dict, in which case the dict's values are used.
"""

import random


def _values(values):
    """Return a list of the values in a list or dict."""
    if isinstance(values, dict):
        return list(values.values())
    return list(values)


def _records(records):
    """Iterate over records given as a list or as a dict of records."""
    if isinstance(records, dict):
        return iter(records.values())
    return iter(records)


def splice_assoc(mapping, key, replacement=None):
    """Splice items into a dict by targeting a key instead of an offset.

    Returns a new dict where `key` is replaced, in place, by the items in
    `replacement`. Keys before `key` win over replacement keys, and
    replacement keys win over keys after it. If `key` is not found the
    original `mapping` is returned.

        splice_assoc({'a': 1, 'b': 2, 'c': 3}, 'b', {'x': 9})
        -> {'a': 1, 'x': 9, 'c': 3}
    """
    if key not in mapping:
        return mapping
    spliced = {}
    after = False
    for current, value in mapping.items():
        if current == key:
            for new_key, new_value in (replacement or {}).items():
                spliced.setdefault(new_key, new_value)
            after = True
        elif after:
            spliced.setdefault(current, value)
        else:
            spliced[current] = value
    return spliced


def random_values(values, number=1):
    """Randomly pick `number` values.

    The picked values keep their original relative order. Asking for fewer
    than one value, or more values than exist, returns an empty list.
    """
    values = _values(values)
    if number < 1 or number > len(values):
        return []
    picked = sorted(random.sample(range(len(values)), number))
    return [values[index] for index in picked]


def random_assoc(mapping, number=1):
    """Return a dict of `number` randomly picked keys and their values."""
    keys = list(mapping)
    number = max(0, min(number, len(keys)))
    return {key: mapping[key] for key in random.sample(keys, number)}


def random_item(values):
    """Return a random value, or None if there are no values."""
    values = _values(values)
    if not values:
        return None
    return random.choice(values)


def index(records, key):
    """Create a lookup dict from records keyed by the value of `key`.

    Duplicate key values are not accounted for: the last record wins. Use it
    where index values are unique (ids, usernames, emails, etc.). Records
    without `key` are left out of the index.

        index([{'id': 1, 'name': 'Kevin'}, {'id': 2, 'name': 'Pete'}], 'id')
        -> {1: {'id': 1, 'name': 'Kevin'}, 2: {'id': 2, 'name': 'Pete'}}
    """
    indexed = {}
    for record in _records(records):
        if key not in record:
            continue
        indexed[record[key]] = record
    return indexed


def index_callback(records, callback):
    """Create a lookup dict from records keyed by `callback(record)`.

    Same as :func:`index`, except the key is computed, which allows for
    normalization (lowercased emails, for example).
    """
    return {callback(record): record for record in _records(records)}


def group(records, key):
    """Group records into lists keyed by the value of `key`.

        group([
            {'name': 'Kevin', 'lang': 'php'},
            {'name': 'Pete', 'lang': 'ruby'},
            {'name': 'Greg', 'lang': 'php'},
        ], 'lang')

    returns

        {
            'php': [{'name': 'Kevin', 'lang': 'php'},
                    {'name': 'Greg', 'lang': 'php'}],
            'ruby': [{'name': 'Pete', 'lang': 'ruby'}],
        }

    Records without `key` are left out.
    """
    grouped = {}
    for record in _records(records):
        if key not in record:
            continue
        grouped.setdefault(record[key], []).append(record)
    return grouped


def group_callback(records, callback):
    """Group records into lists keyed by `callback(record)`."""
    grouped = {}
    for record in _records(records):
        grouped.setdefault(callback(record), []).append(record)
    return grouped


def trans(lookup, data):
    """Rename the keys of `data` using `lookup` (old name -> new name).

    Only keys found in both `lookup` and `data` are returned.

        trans({'foo': 'bar'}, {'foo': 'foozle', 'wizzle': 'wazzle'})
        -> {'bar': 'foozle'}
    """
    return {to: data[source] for source, to in lookup.items()
            if source in data}


def to_csv(row, delimiter=',', enclosure='"'):
    """Render a sequence of values as a single CSV line (no line ending).

    A field is enclosed when it holds the delimiter, the enclosure, a
    backslash, a space, a tab or a line break. Enclosures inside it are
    doubled.

        to_csv(['a', 1, 'b c']) -> 'a,1,"b c"'
    """
    special = set(delimiter + enclosure + '\\ \t\r\n')
    fields = []
    for value in _values(row):
        field = '' if value is None else str(value)
        if special.intersection(field):
            field = '%s%s%s' % (enclosure,
                                field.replace(enclosure, enclosure * 2),
                                enclosure)
        fields.append(field)
    return delimiter.join(fields)
