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

"""Asset URL helpers.

Builds versioned (and, in production, CDN prefixed) URLs for static assets
from a :class:`webaids.config.Config`:

    assets_uri:   base path prefix, ex. /assets
    cdn_url:      optional CDN host, only used when app_env is 'production'
    app_env:      'production', 'development', etc.
    app_revision: default cache-busting token (appended as ?<revision>)
    public_path:  filesystem root used to find the manifest and icons

Example:

    resolver = AssetResolver(conf)
    resolver.asset('css/site.css')         # /assets/css/site.css?a1b2c3
    resolver.compiled_asset('js/app.js')   # /assets/build/js/app-9f8e.js

Compiled assets are looked up in a rev-manifest.json file, which maps a
logical file name to its revisioned build file name. The manifest is read
once, the first time it is needed, and kept for the life of the resolver.
A missing or unreadable manifest is treated as empty.
"""

import json
import logging
import os
import posixpath

LOG = logging.getLogger(__name__)

MANIFEST_NAME = 'rev-manifest.json'
ICON_PATH = 'img/icons/%s.svg'


class Manifest(object):

    """Lazily loaded mapping of logical to revisioned asset file names."""

    def __init__(self, path):
        """Initialize with the path to a JSON manifest file."""
        self.path = path
        self.loaded = False
        self._entries = {}

    def __repr__(self):
        """Show path and load state."""
        return '<%s %s loaded=%s>' % (type(self).__name__, self.path,
                                      self.loaded)

    def load(self):
        """Read the manifest file, once.

        :returns: the manifest entries (empty if the file is missing or is
            not a JSON object)
        """
        if self.loaded:
            return self._entries
        self.loaded = True
        if not self.path or not os.path.isfile(self.path):
            LOG.debug("No asset manifest found at %s", self.path)
            return self._entries
        try:
            with open(self.path, 'r') as manifest_file:
                entries = json.load(manifest_file)
        except (IOError, ValueError) as exc:
            LOG.warning("Ignoring unreadable asset manifest %s: %s",
                        self.path, exc)
            return self._entries
        if isinstance(entries, dict):
            self._entries = entries
        else:
            LOG.warning("Ignoring asset manifest %s: expected a JSON object",
                        self.path)
        return self._entries

    def get(self, name, default=None):
        """Return the revisioned file name for `name`."""
        return self.load().get(name, default)

    def __contains__(self, name):
        """Check the manifest for `name`."""
        return name in self.load()


class IconCache(dict):

    """Memoized icon name -> inline markup."""


def minified_name(name):
    """Return the build path of the minified version of `name`.

        minified_name('js/app.js') -> '/build/js/app.min.js'
    """
    directory, base = posixpath.split(name)
    filename, dot, extension = base.rpartition('.')
    if not dot:
        filename, extension = base, ''
    path = '%s/%s.min.%s' % (directory or '.', filename, extension)
    return '/build/' + path.replace('//', '/').lstrip('/.')


class AssetResolver(object):

    """Builds asset URLs from config, with manifest and icon caches.

    :param conf: a :class:`webaids.config.Config` (or any mapping) with the
        asset options
    :keyword manifest: a :class:`Manifest`; defaults to
        <public_path>/<assets_uri>/build/rev-manifest.json
    :keyword icons: an :class:`IconCache` to share between resolvers
    """

    def __init__(self, conf, manifest=None, icons=None):
        """Initialize with config and (optionally) caches."""
        self.conf = conf
        if manifest is None:
            manifest = Manifest(self.default_manifest_path())
        self.manifest = manifest
        self.icons = IconCache() if icons is None else icons

    @property
    def assets_uri(self):
        """Base path prefix for asset URLs."""
        return self.conf.get('assets_uri') or ''

    @property
    def app_env(self):
        """Current environment name."""
        return self.conf.get('app_env')

    def default_manifest_path(self):
        """Path to the manifest file under the public path."""
        return os.path.join(self.conf.get('public_path') or '',
                            self.assets_uri.lstrip('/'), 'build',
                            MANIFEST_NAME)

    def asset(self, url, revision=None, use_cdn=True):
        """Return the URL for an asset.

        :keyword revision: cache-busting token. None uses the configured
            app_revision and False disables it.
        :keyword use_cdn: set to False to never use the CDN.
        """
        if revision is None:
            revision = self.conf.get('app_revision')
        url = '%s/%s' % (self.assets_uri, url.lstrip('/'))
        cdn_url = self.conf.get('cdn_url')
        if use_cdn and cdn_url and self.app_env == 'production':
            url = '%s/%s' % (cdn_url, url.lstrip('/'))
        if revision is False or revision is None or revision == '':
            return url
        return '%s?%s' % (url, revision)

    def app_asset(self, path, revision=None):
        """Return the URL for an asset under /app."""
        return self.asset('/app/' + path.lstrip('/'), revision)

    def vendor_asset(self, path, revision=None):
        """Return the URL for an asset under /vendor."""
        return self.asset('/vendor/' + path.lstrip('/'), revision)

    def local_asset(self, path, revision=None):
        """Return the URL for an asset that is never served from the CDN."""
        return self.asset(path, revision, use_cdn=False)

    def compiled_asset(self, name, revision=None):
        """Return the URL for a compiled (built) asset.

        In development, uncompiled assets are served from /dev. Otherwise the
        manifest is consulted; its revisioned file names already bust caches
        so no revision is appended. Files missing from the manifest fall back
        to /build/<dir>/<name>.min.<ext>.
        """
        if self.app_env == 'development':
            return self.asset('/dev/' + name, False)
        built = self.manifest.get(name)
        if built:
            return self.asset('/build/' + str(built).lstrip('/'), False)
        return self.asset(minified_name(name), revision)

    def app_icon(self, icon, embed=True):
        """Return inline SVG markup for an icon, or its URL.

        Markup is read from disk (as UTF-8) once per icon. An unreadable or
        undecodable icon returns None and is not cached.
        """
        if not embed:
            return self.app_asset(ICON_PATH % icon)
        if icon in self.icons:
            return self.icons[icon]
        path = '%s%s' % (self.conf.get('public_path') or '',
                         self.asset(ICON_PATH % icon, False, False))
        try:
            with open(path, 'r', encoding='utf-8') as icon_file:
                markup = icon_file.read()
        except (IOError, UnicodeDecodeError) as exc:
            LOG.warning("Unable to read icon %r at %s: %s", icon, path, exc)
            return None
        self.icons[icon] = markup
        return markup
