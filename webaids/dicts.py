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

"""Helpers for flattening and re-nesting `dict` records."""

SCALARS = (str, bytes, int, float, complex, bool, type(None))


def _children(value):
    """Return (key, child) pairs for a container, or None for a leaf."""
    if isinstance(value, SCALARS):
        return None
    if isinstance(value, dict):
        return value.items()
    if isinstance(value, (list, tuple)):
        return enumerate(value)
    if hasattr(value, '__dict__'):
        return vars(value).items()
    return None


def flatten(record, prepend='', delimiter='.'):
    """Flatten a nested record down to a single level dict.

    Handles nested dicts, lists/tuples (keyed by position) and plain objects
    (keyed by attribute name).

        flatten({
            'foo': {'foozle': 'barzle', 'wizzle': 'wuzzle'},
            'bar': {'apple': 'red',
                    'orange': {'size': 'medium', 'shape': 'round'}},
        })

    returns

        {
            'foo.foozle': 'barzle',
            'foo.wizzle': 'wuzzle',
            'bar.apple': 'red',
            'bar.orange.size': 'medium',
            'bar.orange.shape': 'round',
        }

    :param record: the record to flatten
    :keyword prepend: a key prefix to add to all values
    :keyword delimiter: the separator placed between nested keys
    """
    results = {}
    for key, value in _children(record) or ():
        path = '%s%s' % (prepend, key)
        if _children(value) is None:
            results[path] = value
        else:
            results.update(flatten(value, prepend=path + delimiter,
                                   delimiter=delimiter))
    return results


def unflatten(flat, delimiter='.'):
    """Re-nest a flattened dict by splitting keys on `delimiter`.

    List positions come back as string keys ('0', '1', ...).
    """
    nested = {}
    for path, value in flat.items():
        write_path(nested, str(path), value, separator=delimiter)
    return nested


def write_path(target, path, value, separator='/'):
    """Write a value deep into a dict building any intermediate keys.

    :param target: a dict to write data to
    :param path: a key or path to a key (path is delimited by `separator`)
    :param value: the value to write to the key
    :keyword separator: the separator used in the path (ex. Could be "." for a
        json/mongodb type of value)
    """
    parts = path.split(separator)
    current = target
    for part in parts[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    current[parts[-1]] = value
