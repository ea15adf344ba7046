# pylint: disable=C0103,C0111,R0903,R0904,W0212,W0232

# Copyright 2013-2015 Rackspace US, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for webaids.config."""

import copy
import os
import sys
import tempfile
import textwrap
import unittest

import mock

from webaids import config
from webaids import exceptions


class TestParsers(unittest.TestCase):

    def test_normalized_path(self):
        self.assertIsNone(config.normalized_path(''))
        self.assertEqual(config.normalized_path('/tmp/../tmp/x'), '/tmp/x')
        self.assertTrue(os.path.isabs(config.normalized_path('x')))

    def test_env_value(self):
        cases = [
            ('true', True),
            ('(TRUE)', True),
            ('false', False),
            ('(false)', False),
            ('empty', ''),
            ('(empty)', ''),
            ('null', None),
            ('(Null)', None),
            ('"quoted"', 'quoted'),
            ('"', '"'),
            ('plain', 'plain'),
            (10, 10),
        ]
        for value, expected in cases:
            self.assertEqual(config.env_value(value), expected,
                             msg=repr(value))


class TestOption(unittest.TestCase):

    def test_names(self):
        opt = config.Option('-a', '--assets-uri')
        self.assertEqual(opt.name, 'assets_uri')
        self.assertEqual(opt.dest, 'assets_uri')
        opt = config.Option('--cdn', dest='cdn_url')
        self.assertEqual(opt.dest, 'cdn_url')

    def test_no_name(self):
        with self.assertRaises(exceptions.WebaidsConfigError):
            config.Option('-a')

    def test_env_vars(self):
        self.assertEqual(config.Option('--x').env_vars, [])
        self.assertEqual(config.Option('--x', env='X').env_vars, ['X'])
        self.assertEqual(config.Option('--x', env=('X', 'Y')).env_vars,
                         ['X', 'Y'])

    def test_copy(self):
        opt = config.Option('--one', default=1, env='ONE')
        other = copy.copy(opt)
        self.assertIsNot(opt.kwargs, other.kwargs)
        self.assertEqual(repr(opt), repr(other))

    def test_convert(self):
        opt = config.Option('--port', type=int)
        self.assertEqual(opt.convert('25'), 25)
        self.assertIsNone(opt.convert('null'))
        with self.assertRaises(exceptions.WebaidsConfigError) as context:
            opt.convert('abc', source='PORT')
        self.assertIn('PORT', str(context.exception))


class TestConfig(unittest.TestCase):

    def get_tempfile(self, content):
        fp = tempfile.NamedTemporaryFile(mode='w', suffix='.ini',
                                         delete=False)
        self.addCleanup(os.remove, fp.name)
        fp.write(textwrap.dedent(content))
        fp.close()
        return fp.name

    def test_instantiation(self):
        empty = config.Config(options=[])
        self.assertIsInstance(empty, config.Config)
        self.assertEqual(dict(empty), {})

    def test_init(self):
        cfg = config.Config.init({'a': 1}, b=2)
        self.assertEqual(cfg.a, 1)
        self.assertEqual(cfg['b'], 2)
        self.assertEqual(cfg.get('missing'), None)
        with self.assertRaises(AttributeError):
            cfg.missing  # pylint: disable=W0104

    def test_defaults(self):
        cfg = config.Config(options=[
            config.Option('--one', default=1),
            config.Option('--a', default='a'),
            config.Option('--none'),
        ])
        cfg.parse(['prog'], env={})
        self.assertEqual(cfg.one, 1)
        self.assertEqual(cfg.a, 'a')
        self.assertIsNone(cfg.none)
        self.assertEqual(cfg.sources['one'], 'defaults')

    def test_cli(self):
        cfg = config.Config(options=[
            config.Option('--one', default=1, type=int),
            config.Option('--flag', default=False, action='store_true'),
        ])
        cfg.parse(['prog', '--one', '5', '--flag'], env={})
        self.assertEqual(cfg.one, 5)
        self.assertIs(cfg.flag, True)
        self.assertEqual(cfg.sources['one'], 'command-line')

    def test_cli_only_returns_supplied(self):
        cfg = config.Config(options=[config.Option('--one', default=1)])
        self.assertEqual(cfg.parse_cli(['prog']), {})

    def test_cli_strict(self):
        cfg = config.Config(options=[config.Option('--one', default=1)])
        with self.assertRaises(SystemExit):
            cfg.parse_cli(['prog', '--foo'])
        self.assertEqual(cfg.parse_cli(['prog', '--foo'], permissive=True),
                         {})

    def test_env(self):
        cfg = config.Config(options=[
            config.Option('--assets-uri', env=('ASSETS_URI', 'ASSET_URI')),
            config.Option('--port', type=int, env='PORT'),
        ])
        cfg.parse(['prog'], env={'ASSET_URI': '/static', 'PORT': '8080'})
        self.assertEqual(cfg.assets_uri, '/static')
        self.assertEqual(cfg.port, 8080)
        self.assertEqual(cfg.sources['port'], 'environment')

    def test_env_alias_order(self):
        cfg = config.Config(options=[
            config.Option('--assets-uri', env=('ASSETS_URI', 'ASSET_URI')),
        ])
        cfg.parse(['prog'], env={'ASSET_URI': '/b', 'ASSETS_URI': '/a'})
        self.assertEqual(cfg.assets_uri, '/a')

    def test_env_markers(self):
        cfg = config.Config(options=[
            config.Option('--cdn-url', default='x', env='CDN_URL'),
            config.Option('--flag', action='store_true', env='FLAG'),
        ])
        cfg.parse(['prog'], env={'CDN_URL': '(null)', 'FLAG': 'true'})
        self.assertIsNone(cfg.cdn_url)
        self.assertIs(cfg.flag, True)

    def test_env_namespace_default(self):
        cfg = config.Config(options=[config.Option('--thing')], prog='myapp')
        self.assertEqual(cfg.parse_env(env={'MYAPP_THING': 'x'}),
                         {'thing': 'x'})

    @mock.patch.dict('os.environ', {'TEST_TWO': '2'})
    def test_required(self):
        cfg = config.Config(options=[
            config.Option('--one', default=1, required=True),
            config.Option('--two', required=True, env='TEST_TWO'),
        ])
        cfg.parse(['prog'])
        self.assertEqual(cfg.one, 1)
        self.assertEqual(cfg.two, '2')

    def test_required_negative(self):
        cfg = config.Config(options=[
            config.Option('--required', required=True),
        ])
        with self.assertRaises(SystemExit):
            cfg.parse(['prog'], env={})

    def test_ini(self):
        path = self.get_tempfile("""
            [myapp]
            one = 10
            flag = true

            [mail]
            host = mail.example.com
            """)
        cfg = config.Config(options=[
            config.Option('--one', type=int),
            config.Option('--flag', action='store_true'),
            config.Option('--host', ini_section='mail'),
        ], ini_paths=[path], prog='myapp')
        cfg.parse(['prog'], env={})
        self.assertEqual(cfg.one, 10)
        self.assertIs(cfg.flag, True)
        self.assertEqual(cfg.host, 'mail.example.com')
        self.assertEqual(cfg.sources['host'], 'ini-file')

    def test_ini_missing_file(self):
        cfg = config.Config(options=[config.Option('--one', default=1)],
                            ini_paths=['/no/such/file.ini'])
        self.assertEqual(cfg.parse_ini(), {})

    def test_precedence(self):
        path = self.get_tempfile("""
            [myapp]
            foo = fromini
            """)
        options = [config.Option('--foo', default='fromdefault',
                                 env='FOO')]

        cfg = config.Config(options=options, ini_paths=[path], prog='myapp')
        cfg.parse(['prog'], env={})
        self.assertEqual(cfg.foo, 'fromini')

        cfg = config.Config(options=options, ini_paths=[path], prog='myapp')
        cfg.parse(['prog'], env={'FOO': 'fromenv'})
        self.assertEqual(cfg.foo, 'fromenv')

        cfg = config.Config(options=options, ini_paths=[path], prog='myapp')
        cfg.parse(['prog', '--foo', 'fromcli'], env={'FOO': 'fromenv'})
        self.assertEqual(cfg.foo, 'fromcli')

    def test_repr(self):
        cfg = config.Config.init(a=1)
        self.assertEqual(repr(cfg), '<Config a=1>')

    def test_prog_defaults_to_script_name(self):
        with mock.patch.object(sys, 'argv', ['/usr/bin/myscript']):
            self.assertEqual(config.Config().prog, 'myscript')


class TestLoad(unittest.TestCase):

    def test_recognized_options(self):
        conf = config.load(env={
            'ASSETS_URI': '/assets',
            'CDN_URL': 'https://cdn.example.com',
            'APP_ENV': 'production',
            'APP_REVISION': '"42"',
            'PUBLIC_PATH': '/var/www',
            'EMAIL_ERROR': 'ops@example.com',
            'SMTP_PORT': '2525',
        })
        self.assertEqual(conf.assets_uri, '/assets')
        self.assertEqual(conf.cdn_url, 'https://cdn.example.com')
        self.assertEqual(conf.app_env, 'production')
        self.assertEqual(conf.app_revision, '42')
        self.assertEqual(conf.public_path, '/var/www')
        self.assertEqual(conf.email_error, 'ops@example.com')
        self.assertEqual(conf.smtp_host, 'localhost')
        self.assertEqual(conf.smtp_port, 2525)

    def test_public_path_is_normalized(self):
        conf = config.load(env={'PUBLIC_PATH': '/var/www/../www/'})
        self.assertEqual(conf.public_path, '/var/www')
        with mock.patch.dict('os.environ', {'HOME': '/home/web'}):
            conf = config.load(argv=['webaids', '--public-path', '~/public'],
                               env={})
        self.assertEqual(conf.public_path, '/home/web/public')
        self.assertEqual(config.load(env={}).public_path, '')

    def test_asset_uri_alias(self):
        conf = config.load(env={'ASSET_URI': '/static'})
        self.assertEqual(conf.assets_uri, '/static')

    def test_defaults(self):
        conf = config.load(env={})
        self.assertEqual(conf.assets_uri, '')
        self.assertIsNone(conf.cdn_url)
        self.assertIsNone(conf.app_env)
        self.assertEqual(conf.smtp_port, 25)

    def test_ignores_host_argv(self):
        with mock.patch.object(sys, 'argv', ['app', '--unknown']):
            conf = config.load(env={})
        self.assertEqual(conf.assets_uri, '')

    def test_bad_port(self):
        with self.assertRaises(exceptions.WebaidsConfigError):
            config.load(env={'SMTP_PORT': 'lots'})


if __name__ == '__main__':
    unittest.main()
