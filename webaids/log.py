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
#
"""Logging Boilerplate.

Named `log` so as not to conflict with stdlib logging.

Usage with config:

    from webaids import config
    from webaids import log

    conf = config.load(options=config.OPTIONS + log.OPTIONS)
    log.configure(conf)

Usage in module:

    from webaids import log  # instead of `import logging`

    LOG = log.getLogger(__name__)

Helpers in this package never raise for the conditions they treat as normal
(missing manifest, unreadable icon, mail transport down). Those are logged
here instead, so turn on --verbose (or run with APP_ENV=development) to see
them.
"""
import logging
import logging.config
import os
import sys

from webaids import config

OPTIONS = [
    config.Option("--logconfig",
                  env="LOG_CONFIG",
                  help="Optional logging configuration file"),
    config.Option("-d", "--debug",
                  default=False,
                  action="store_true",
                  env="APP_DEBUG",
                  help="turn on debug output; log lines include source "
                  "file path and line numbers"),
    config.Option("-v", "--verbose",
                  default=False,
                  action="store_true",
                  help="turn up logging to DEBUG (default is INFO)"),
    config.Option("-q", "--quiet",
                  default=False,
                  action="store_true",
                  help="turn down logging to WARN (default is INFO)"),
]

getLogger = logging.getLogger  # pylint: disable=C0103


def log_level(conf):
    """Get the logging level from a config.

    --debug or --verbose: logging.DEBUG
    --quiet: logging.WARNING
    app_env of 'development': logging.DEBUG
    default is logging.INFO
    """
    if conf.get('debug') is True or conf.get('verbose') is True:
        return logging.DEBUG
    elif conf.get('quiet') is True:
        return logging.WARNING
    elif conf.get('app_env') == 'development':
        return logging.DEBUG
    return logging.INFO


def configure(conf):
    """Configure logging based on log config file.

    Turn on console logging if no logging files found.

    :param conf: a :class:`webaids.config.Config` (or any mapping)
    """
    logconfig = conf.get('logconfig')
    if logconfig and os.path.isfile(logconfig):
        logging.config.fileConfig(logconfig,
                                  disable_existing_loggers=False)
    else:
        init_console_logging(conf)


def _get_formatter(conf):
    """Get formatter based on configuration."""
    if conf.get('debug') is True:
        return DebugFormatter('%(pathname)s:%(lineno)d: %(levelname)-8s '
                              '%(message)s')
    elif conf.get('verbose') is True:
        return logging.Formatter(
            '%(name)-30s: %(levelname)-8s %(message)s')
    elif conf.get('quiet') is True:
        return logging.Formatter('%(message)s')
    return logging.Formatter(logging.BASIC_FORMAT)


def init_console_logging(conf):
    """Log to console (stderr)."""
    console = find_console_handler(logging.getLogger())
    if not console:
        console = logging.StreamHandler()
    logging_level = log_level(conf)
    console.setLevel(logging_level)
    console.setFormatter(_get_formatter(conf))
    logging.getLogger().addHandler(console)
    logging.getLogger().setLevel(logging_level)
    return console


class DebugFormatter(logging.Formatter):

    """Log formatter.

    Outputs any 'data' values passed in the 'extra' parameter if provided.
    """

    def format(self, record):
        """Print out any 'extra' data provided in logs."""
        if hasattr(record, 'data'):
            return "%s. DEBUG DATA=%s" % (
                logging.Formatter.format(self, record),
                record.__dict__['data'])
        return logging.Formatter.format(self, record)


def find_console_handler(logger):
    """Return a stream handler writing to stderr, if it exists."""
    for handler in logger.handlers:
        if (isinstance(handler, logging.StreamHandler) and
                handler.stream == sys.stderr):
            return handler
