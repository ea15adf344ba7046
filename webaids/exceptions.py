# Copyright (c) 2011-2015 Rackspace US, Inc.
#
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
"""Webaids exceptions.

Most helpers in this package fall back to a harmless value (an empty dict,
`None`, the unformatted input) rather than raising. Exceptions are reserved
for programming and configuration mistakes.
"""

__all__ = (
    'WebaidsException',
    'WebaidsConfigError',
)


class WebaidsException(Exception):

    """Base exception for all exceptions raised by the webaids package."""


class WebaidsConfigError(WebaidsException):

    """Errors raised by webaids/config.

    Raised when an option cannot be named or when a value found in a
    config source is rejected by the option's type.
    """

    def __init__(self, message, option=None, source=None):
        """Customize Exception Constructor."""
        super(WebaidsConfigError, self).__init__(message)
        self.option = option
        self.source = source

    def __str__(self):
        """Include the source of the bad value, if known."""
        msg = super(WebaidsConfigError, self).__str__()
        if self.source:
            msg = '%s (from %s)' % (msg, self.source)
        return msg
