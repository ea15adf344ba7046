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

"""String and number helpers.

Parsers and formatters here are meant for user-supplied values (form input,
CMS content) and never raise for odd input: unrecognized values come back
unformatted, or as `None` where nothing could be extracted.

Number parsing returns strings so that values survive a round trip through
a form or template untouched. No attempt at internationalization is made.
"""

import decimal
import logging
import re
from urllib import parse
from xml.etree import ElementTree

LOG = logging.getLogger(__name__)

CENT = decimal.Decimal('0.01')
# everything but digits and the final decimal point
NUMBER_JUNK = re.compile(r'[^\d.]|\.(?=.*\.)', re.DOTALL)
PHONE_JUNK = re.compile(r'[^\dx]')
WORD_DELIMITERS = re.compile(r'[\s_\-]+')
CASE_BOUNDARY = re.compile(r'(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])')
PROTOCOL_PREFIX = re.compile(r'^(https?://|//)', re.IGNORECASE)
BARE_AMPERSAND = re.compile(
    r'&(?!#\d+;|#[xX][0-9a-fA-F]+;|[A-Za-z][A-Za-z0-9]*;)')
IMG_SRC = re.compile(
    r'<img\s+(?:[^>]*\s+)?src=([\'"])((?:(?!\1).)*)\1[^>]*>', re.IGNORECASE)
IMG_TAG = re.compile(r'<img\s+([^>]*)>', re.IGNORECASE)
SELF_CLOSING = re.compile(r'\s*/\s*$')

PROTOCOLS = {
    'http': 'http://',
    'https': 'https://',
    'secure': 'https://',
    '//': '//',
    'relative': '//',
}


def replace_last(search, replace, subject):
    """Replace the last occurrence of `search` in `subject`."""
    head, found, tail = subject.rpartition(search)
    if not found:
        return subject
    return head + replace + tail


def last_segment(value, delimiter='/'):
    """Return the last segment of a delimited string.

        last_segment('foo.bar.baz', '.') -> 'baz'

    Leading and trailing delimiters are ignored. A string with no delimiter
    is returned as is.
    """
    trimmed = value.strip(delimiter)
    if delimiter not in trimmed:
        return value
    return trimmed.rsplit(delimiter, 1)[1]


def escape(value):
    """Escape HTML special characters without double escaping entities."""
    if value is None:
        return ''
    value = BARE_AMPERSAND.sub('&amp;', str(value))
    return (value.replace('<', '&lt;')
            .replace('>', '&gt;')
            .replace('"', '&quot;')
            .replace("'", '&#039;'))


def _strip_number(value):
    """Strip junk and extra 'left' zeros from a user supplied number."""
    if value is None:
        return ''
    return NUMBER_JUNK.sub('', str(value)).lstrip('0')


def _to_cents(stripped):
    """Round a stripped number string to cents (half up)."""
    if not stripped.strip('.'):
        return decimal.Decimal('0.00')
    context = decimal.Context(prec=len(stripped) + 3)
    return decimal.Decimal(stripped).quantize(
        CENT, rounding=decimal.ROUND_HALF_UP, context=context)


def parse_number(value):
    """Parse a user supplied number of commas, extra decimals, etc.

    Leading zeros are stripped so the result can't be read as an octal or
    hex literal downstream.

        parse_number('$1,234.5') -> '1234.5'
        parse_number('abc') -> '0'
    """
    stripped = _strip_number(value)
    if not stripped.strip('.'):
        return '0'
    return stripped


def parse_currency(value):
    """Parse a user supplied currency value into a 2 decimal string.

        parse_currency('$1,234.5') -> '1234.50'
        parse_currency('') -> '0.00'
    """
    return '{:f}'.format(_to_cents(_strip_number(value)))


def format_currency(value):
    """Format a value as a US currency string.

        format_currency('1234.5') -> '$1,234.50'
    """
    return '$' + '{:,.2f}'.format(_to_cents(parse_number(value)))


def format_phone(number):
    """Format a number as a US style phone number.

    Anything other than digits and 'x' (for extensions) is removed first.
    10 characters become (123) 456-7890 and 11 become +1 (234) 567-8901.
    Any other length is returned stripped but unformatted.
    """
    number = PHONE_JUNK.sub('', str(number))
    if len(number) == 10:
        return '(%s) %s-%s' % (number[:3], number[3:6], number[6:])
    elif len(number) == 11:
        # TODO(sam): allow country codes longer than one digit
        return '+%s (%s) %s-%s' % (number[:1], number[1:4], number[4:7],
                                   number[7:])
    return number


def httpify(url, kind='http'):
    """Prefix `url` with a protocol unless it is already an absolute URL.

    :keyword kind: 'http' (default), 'https' or 'secure', '//' or 'relative'
    """
    url = str(url)
    try:
        parts = parse.urlsplit(url)
    except ValueError:
        parts = None
    if parts and parts.scheme and parts.netloc:
        return url
    return PROTOCOLS.get(kind, 'http://') + url


def dehttpify(url):
    """Strip 'http://', 'https://' or '//' off the start of a URL."""
    return PROTOCOL_PREFIX.sub('', url)


def words(value):
    """Split a string into words for case conversion.

    Words are delimited by whitespace, hyphens, underscores and case
    changes (fooBar, HTMLParser).
    """
    found = []
    for chunk in WORD_DELIMITERS.split(str(value)):
        found.extend(word for word in CASE_BOUNDARY.split(chunk) if word)
    return found


def studly_case(value):
    """Convert a string to StudlyCase."""
    return ''.join(word[:1].upper() + word[1:] for word in words(value))


def camel_case(value):
    """Convert a string to camelCase."""
    studly = studly_case(value)
    return studly[:1].lower() + studly[1:]


def snake_case(value, delimiter='_'):
    """Convert a string to snake_case."""
    return delimiter.join(word.lower() for word in words(value))


def kebab_case(value):
    """Convert a string to kebab-case."""
    return snake_case(value, delimiter='-')


def strip_endings(value):
    """Remove line endings, turning a string into a one-liner."""
    return value.replace('\n', '').replace('\r', '')


def normalize_endings(value, to='\n'):
    """Convert all line endings to `to`."""
    value = value.replace('\r\n', '\n')
    if to != '\n':
        value = value.replace('\n', to)
    return value


def dewidow(text, min_words=3):
    """Prevent a widow by joining the last two words with &nbsp;.

    Only applied when `text` has at least `min_words` words.
    """
    parts = text.split(' ')
    if len(parts) >= min_words:
        last = parts.pop()
        parts[-1] = '%s&nbsp;%s' % (parts[-1], last)
    return ' '.join(parts)


def first_img(markup):
    """Return the src of the first <img> in `markup`, or None."""
    if not markup:
        return None
    match = IMG_SRC.search(markup)
    if match and match.group(2):
        return match.group(2)
    return None


def first_img_attrs(markup):
    """Return the attributes of the first <img> in `markup` as a dict.

    Returns None when there is no <img>, it has no attributes, or the
    attributes can't be parsed (unquoted values, bare entities, etc.).
    """
    if not markup:
        return None
    match = IMG_TAG.search(markup)
    if not match or not match.group(1).strip():
        return None
    attrs = SELF_CLOSING.sub('', match.group(1))
    try:
        element = ElementTree.fromstring('<img %s />' % attrs)
    except ElementTree.ParseError as exc:
        LOG.debug("Unable to parse <img> attributes %r: %s", attrs, exc)
        return None
    return dict(element.attrib) or None
