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

"""Debug and notification helpers.

The dump helpers are for development only; `dump_and_die` ends the process.
"""

import email.message
import html
import logging
import pprint
import smtplib
import sys

LOG = logging.getLogger(__name__)

PRE_STYLE = 'border: 2px solid red; background: #fff; padding: 1em;'


def _format(values):
    """Pretty format each value with its type."""
    return '\n'.join('%s: %s' % (type(value).__name__, pprint.pformat(value))
                     for value in values)


def dump(*values, stream=None):
    """Write each value (and its type) to `stream` (default stdout)."""
    stream = stream or sys.stdout
    stream.write(_format(values) + '\n')


def dump_and_die(*values, stream=None):
    """Dump values then exit."""
    dump(*values, stream=stream)
    sys.exit()


def debug_html(*values):
    """Return dumped values in a highly visible <pre> block."""
    return '<pre style="%s">%s</pre>' % (PRE_STYLE,
                                         html.escape(_format(values)))


def debug(*values, stream=None):
    """Write dumped values as HTML to `stream` (default stdout)."""
    stream = stream or sys.stdout
    stream.write(debug_html(*values))


def alert_webmaster(conf, subject, message):
    """Email a plain text alert to the configured `email_error` address.

    The alert is sent from the same address, through the SMTP server set by
    `smtp_host` and `smtp_port`. Line breaks in `subject` are collapsed to
    single spaces.

    :returns: True if the message was handed to the mail server
    """
    address = conf.get('email_error')
    if not address:
        LOG.warning("No email_error address configured. Alert %r not sent.",
                    subject)
        return False
    host = conf.get('smtp_host') or 'localhost'
    port = conf.get('smtp_port') or 25
    try:
        msg = email.message.EmailMessage()
        msg['To'] = address
        msg['From'] = address
        msg['Subject'] = ' '.join(str(subject).split())
        msg.set_content(message)
        with smtplib.SMTP(host, port) as smtp:
            smtp.send_message(msg)
    except (smtplib.SMTPException, OSError, ValueError) as exc:
        LOG.error("Unable to send alert %r to %s via %s:%s: %s", subject,
                  address, host, port, exc)
        return False
    LOG.debug("Alert %r sent to %s", subject, address)
    return True
