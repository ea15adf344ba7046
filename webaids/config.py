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
# pylint: disable=W0212

r"""Configuration Parser.

Parses ini files, environment variables and command-line arguments into a
single dict-like object. Build it once when the application starts and pass
it to the helpers that need it (asset urls, webmaster alerts, logging).

Example usage:

    from webaids import assets
    from webaids import config

    conf = config.load()
    resolver = assets.AssetResolver(conf)
    resolver.asset('css/site.css')

Example environment:

    $ export ASSETS_URI=/assets
    $ export APP_ENV=production
    $ export CDN_URL=https://cdn.example.com
    $ export APP_REVISION=a1b2c3

Values read from ini files and the environment go through `env_value`
first, so `CDN_URL=(null)` unsets the CDN and `APP_REVISION="42"` is read
as `42`.

Options accept a list of environment variable names for aliases:

    config.Option('--assets-uri', env=('ASSETS_URI', 'ASSET_URI'))

The first variable that is present wins.
"""
import argparse
import collections.abc
import configparser
import copy
import logging
import os
import sys

from webaids import exceptions

LOG = logging.getLogger(__name__)

#: Source precedence, lowest first.
SOURCES = ('defaults', 'ini-file', 'environment', 'command-line')


def env_value(value):
    """Coerce a raw environment string.

    Supports boolean, empty and null markers, with or without parentheses,
    and strips one pair of surrounding double quotes.

        env_value('true') -> True
        env_value('(false)') -> False
        env_value('empty') -> ''
        env_value('null') -> None
        env_value('"quoted"') -> 'quoted'
    """
    if not isinstance(value, str):
        return value
    lowered = value.lower()
    if lowered in ('true', '(true)'):
        return True
    if lowered in ('false', '(false)'):
        return False
    if lowered in ('empty', '(empty)'):
        return ''
    if lowered in ('null', '(null)'):
        return None
    if len(value) > 1 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


class Option(object):

    """Holds a configuration option and the names and locations for it.

    Instantiate options using the same arguments as you would for an
    add_argument call in argparse. Two additional kwargs are available:

        env: the name of the environment variable to use for this option,
             or a sequence of names (aliases) checked in order
        ini_section: the ini file section to look this value up from
    """

    def __init__(self, *args, **kwargs):
        """Initialize options."""
        self.args = args or []
        self.kwargs = kwargs or {}
        if self.name is None:
            raise exceptions.WebaidsConfigError(
                "Option needs at least one name: %s" % (args,))

    def __copy__(self):
        """Implement copy."""
        return type(self)(*copy.copy(self.args), **copy.copy(self.kwargs))

    def __repr__(self):
        """Customize repr to show option args and kwargs."""
        args = ', '.join(self.args)
        kwrgs = ', '.join(['%s=%s' % (k, v) for k, v in self.kwargs.items()])
        rpr = 'Option(%s' % args
        if kwrgs:
            rpr = '%s, %s' % (rpr, kwrgs)
        return '%s)' % rpr

    def add_argument(self, parser, permissive=False, **override_kwargs):
        """Add an option to an argparse parser.

        :keyword permissive: when true, build a parser that does not validate
            required arguments.
        """
        kwargs = copy.copy(self.kwargs)
        env_vars = self.env_vars
        if env_vars and 'help' in kwargs:
            kwargs['help'] = "%s (or set %s)" % (kwargs['help'],
                                                 ' or '.join(env_vars))
        if permissive:
            kwargs.pop('required', None)
        kwargs.pop('env', None)
        kwargs.pop('ini_section', None)
        kwargs.update(override_kwargs)
        return parser.add_argument(*self.args, **kwargs)

    @property
    def env_vars(self):
        """Environment variable names for this option, in lookup order."""
        env = self.kwargs.get('env')
        if not env:
            return []
        if isinstance(env, str):
            return [env]
        return list(env)

    @property
    def type(self):
        """The type of the option.

        Should be a callable to parse options.
        """
        return self.kwargs.get("type", str)

    @property
    def name(self):
        """The name of the option as determined from the args."""
        for arg in self.args:
            if arg.startswith("--"):
                return arg[2:].replace("-", "_")
            elif arg.startswith("-"):
                continue
            else:
                return arg.replace("-", "_")

    @property
    def dest(self):
        """The destination name of the option as determined from the args."""
        if 'dest' in self.kwargs:
            return self.kwargs['dest']
        return self.name

    @property
    def default(self):
        """The default for the option."""
        return self.kwargs.get("default")

    def convert(self, value, source=None):
        """Run a raw string `value` through `env_value` and the option type.

        Markers like `true` or `null` are resolved by `env_value` and are not
        passed to the type.
        """
        value = env_value(value)
        if not isinstance(value, str):
            return value
        try:
            return self.type(value)
        except (TypeError, ValueError) as exc:
            raise exceptions.WebaidsConfigError(
                "Invalid value %r for '%s': %s" % (value, self.name, exc),
                option=self, source=source)


class Config(collections.abc.MutableMapping):

    """Parses configuration sources."""

    def __init__(self, options=None, ini_paths=None, prog=None):
        """Initialize with list of options.

        :param ini_paths: optional paths to ini files to look up values from
        :param prog: program name; used as the default ini section
        """
        self._ini_paths = list(ini_paths or [])
        self._options = list(options or [])
        self._values = {option.dest: option.default
                        for option in self._options}
        self._prog = prog
        self.sources = {}
        self.ini_config = None

    @classmethod
    def init(cls, *args, **kwargs):
        """Initialize the config like as you would a regular dict."""
        instance = cls()
        instance._values.update(dict(*args, **kwargs))
        return instance

    @property
    def prog(self):
        """Program name."""
        if not self._prog:
            self._prog = os.path.basename(sys.argv[0]) or 'webaids'
        return self._prog

    @prog.setter
    def prog(self, value):
        """Set program name."""
        self._prog = value

    @property
    def options(self):
        """Options this config knows about."""
        return list(self._options)

    def __getitem__(self, key):
        """Get item from config."""
        return self._values[key]

    def __setitem__(self, key, value):
        """Set item in config."""
        self._values[key] = value

    def __delitem__(self, key):
        """Delete item from config."""
        del self._values[key]

    def __iter__(self):
        """Iterate config."""
        return iter(self._values)

    def __len__(self):
        """Check number of config options."""
        return len(self._values)

    def __getattr__(self, attr):
        """Get attribute."""
        if attr.startswith('_'):
            raise AttributeError(attr)
        if attr in self._values:
            return self._values[attr]
        raise AttributeError("'config' object has no attribute '%s'" % attr)

    def build_parser(self, options, permissive=False, **override_kwargs):
        """Construct an argparser from supplied options.

        :keyword override_kwargs: keyword arguments to override when calling
            parser constructor.
        :keyword permissive: when true, build a parser that does not validate
            required arguments.
        """
        kwargs = {
            'prog': self.prog,
            'formatter_class': argparse.ArgumentDefaultsHelpFormatter,
            'fromfile_prefix_chars': '@',
        }
        kwargs.update(override_kwargs)
        parser = argparse.ArgumentParser(**kwargs)
        for option in options or []:
            option.add_argument(parser, permissive=permissive)
        return parser

    def parse_cli(self, argv=None, permissive=False):
        """Parse command-line arguments into values.

        Only arguments that were actually supplied are returned.

        :keyword permissive: when true, does not validate required or extra
            arguments.
        """
        if argv is None:
            argv = sys.argv
        options = []
        for option in self._options:
            kwargs = option.kwargs.copy()
            kwargs['default'] = argparse.SUPPRESS
            options.append(Option(*option.args, **kwargs))
        parser = self.build_parser(options, permissive=True)
        parsed, extras = parser.parse_known_args(argv[1:])
        if extras and not permissive:
            raise SystemExit("Unrecognized arguments: %s"
                             % ', '.join(extras))
        return vars(parsed)

    def parse_env(self, env=None):
        """Parse environment variables.

        Options without an explicit `env` are looked up as
        <PROG>_<OPTION_NAME>.
        """
        env = os.environ if env is None else env
        namespace = self.prog.upper().replace('-', '_')
        results = {}
        for option in self._options:
            names = option.env_vars or [
                "%s_%s" % (namespace, option.name.upper())]
            for env_var in names:
                if env_var in env:
                    results[option.dest] = option.convert(env[env_var],
                                                          source=env_var)
                    break
        return results

    def get_defaults(self):
        """Return dict of defaults."""
        return {option.dest: option.default for option in self._options}

    def parse_ini(self, paths=None, namespace=None):
        """Parse config files and return configuration options.

        Expects a list of files in ini format. Missing files are skipped.

        :param paths: list of paths to files to parse. If not supplied, uses
            the ini_paths value supplied on initialization.
        """
        namespace = namespace or self.prog
        results = {}
        self.ini_config = configparser.ConfigParser(interpolation=None)
        read = self.ini_config.read(paths or self._ini_paths)
        LOG.debug("Read ini files: %s", read)
        parser_errors = (configparser.NoOptionError,
                         configparser.NoSectionError)
        for option in self._options:
            sections = [option.kwargs.get('ini_section'), namespace]
            for section in [s for s in sections if s]:
                try:
                    value = self.ini_config.get(section, option.name)
                except parser_errors as err:
                    LOG.debug('Error parsing ini file: %r -- Continuing.',
                              err)
                    continue
                results[option.dest] = option.convert(
                    value, source='[%s] %s' % (section, option.name))
                break
        return results

    def load_options(self, argv=None, env=None):
        """Find settings from all sources.

        Records which source each value came from in `self.sources`.
        """
        layers = zip(SOURCES, (
            self.get_defaults(),
            self.parse_ini(),
            self.parse_env(env=env),
            self.parse_cli(argv=argv, permissive=True),
        ))
        results = {}
        for source, values in layers:
            for key, value in values.items():
                results[key] = value
                self.sources[key] = source
        return results

    def parse(self, argv=None, env=None):
        """Find settings from all sources and validate them."""
        results = self.load_options(argv=argv, env=env)
        for option in self._options:
            if option.kwargs.get('required'):
                if results.get(option.dest) is None:
                    raise SystemExit("'%s' is required. See --help "
                                     "for more info." % option.name)
        self._values = results
        return self

    def __repr__(self):
        """Display configured values when representing instance."""
        return "<Config %s>" % ', '.join([
            '%s=%s' % (k, v) for k, v in self.items()])


def normalized_path(value):
    """Normalize and expand a shorthand or relative path."""
    if not value:
        return
    norm = os.path.normpath(value)
    norm = os.path.abspath(os.path.expanduser(norm))
    return norm


OPTIONS = [
    Option('--assets-uri',
           default='',
           env=('ASSETS_URI', 'ASSET_URI'),
           help="base path prefix for asset urls"),
    Option('--cdn-url',
           env='CDN_URL',
           help="CDN host used for asset urls in production"),
    Option('--app-env',
           env='APP_ENV',
           help="environment name; 'production' enables the CDN and "
                "'development' serves uncompiled assets"),
    Option('--app-revision',
           env='APP_REVISION',
           help="default cache-busting token appended to asset urls"),
    Option('--public-path',
           default='',
           env='PUBLIC_PATH',
           type=normalized_path,
           help="filesystem root of the public web directory"),
    Option('--email-error',
           env='EMAIL_ERROR',
           help="recipient (and sender) of webmaster alerts"),
    Option('--smtp-host',
           default='localhost',
           env='SMTP_HOST',
           help="SMTP server used to send webmaster alerts"),
    Option('--smtp-port',
           default=25,
           type=int,
           env='SMTP_PORT',
           help="SMTP server port"),
]


def load(argv=None, env=None, ini_paths=None, options=None, prog='webaids'):
    """Build and parse a Config from ini files, environment and argv.

    `argv` defaults to just the program name so that the host application's
    own command line is not consumed.
    """
    if argv is None:
        argv = [prog]
    conf = Config(options=options if options is not None else OPTIONS,
                  ini_paths=ini_paths, prog=prog)
    return conf.parse(argv=argv, env=env)
