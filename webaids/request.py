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

"""Request and query string helpers.

Useful for things like pagination links, where the current query string
should be reused without one or two of its params:

    import bottle
    from webaids import request

    @bottle.get('/widgets')
    def widgets():
        base = request.current_query_without(['page'])
        ...
"""

import html
import logging
import re
from urllib import parse

import bottle

LOG = logging.getLogger(__name__)

ABSOLUTE_URL = re.compile(r'^https?://', re.IGNORECASE)
# only terminated entities; `&para=1` is a param, not a pilcrow
ENTITY = re.compile(r'&(?:#\d+|#x[0-9a-f]+|[a-z][a-z0-9]*);', re.IGNORECASE)


def _decode_entities(value):
    """Decode HTML entities (&amp; -> &) left in a query string."""
    return ENTITY.sub(lambda match: html.unescape(match.group(0)), value)


def _param_name(key):
    """Return the base name of a param (`ids[]` and `ids[0]` -> `ids`)."""
    return key.split('[', 1)[0]


def query_without(query, keys):
    """Return `query` without the params named in `keys`.

    :param query: a query string ('a=1&b=2' or '?a=1&b=2') or an absolute
        http(s) URL. HTML entities are decoded first (&amp; -> &).
    :param keys: sequence of param names to remove. Array style params
        (`ids[]=1`) are removed by their base name (`ids`).
    :returns: the query string (or URL) without the params. The remaining
        params keep their order. A leading `?` is not included.
    """
    if isinstance(keys, str):
        keys = [keys]
    unset = set(keys)
    query = _decode_entities(query or '')
    if not ABSOLUTE_URL.match(query):
        query = '?' + query.strip('?')
    parts = parse.urlsplit(query)
    if not parts.query:
        return query.strip('?')
    pairs = parse.parse_qsl(parts.query.strip('&'), keep_blank_values=True)
    kept = [(key, value) for key, value in pairs
            if key not in unset and _param_name(key) not in unset]
    LOG.debug("Removed %d param(s) from query %r", len(pairs) - len(kept),
              parts.query)
    rebuilt = parse.urlunsplit(parts._replace(query=parse.urlencode(kept)))
    return rebuilt.strip('?')


def current_query_without(keys, request=None):
    """Return the current request's query string without `keys`.

    :keyword request: a bottle request; defaults to the thread-local
        `bottle.request`.
    """
    if request is None:
        request = bottle.request
    return query_without(request.query_string, keys).strip('?')
