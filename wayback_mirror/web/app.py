"""
Flask web application for the wayback mirror.

Exposes a single endpoint that mirrors a site and reports where it was saved.
"""

import asyncio
import os
from typing import Optional
from urllib.parse import urlparse

from flask import Flask, request

from ..mirror import WaybackMirror
from ..utils.constants import BACKUPS_DIRNAME
from ..utils.log import get_logger


def create_app(config: Optional[dict] = None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config: Optional overrides for the app config. BACKUP_DIR is the
            directory mirrors are written under, MIRROR_OPTIONS is a dict of
            keyword arguments for WaybackMirror.
    """
    app = Flask(__name__)
    app.config['BACKUP_DIR'] = os.path.abspath(BACKUPS_DIRNAME)
    app.config['MIRROR_OPTIONS'] = {}
    if config:
        app.config.update(config)

    logger = get_logger("web")

    @app.route('/download')
    def download():
        """Mirror the site given in the url query parameter."""
        url = request.args.get('url', '').strip()
        if not url:
            return 'URL parameter is required', 400

        if not urlparse(url).hostname:
            return 'Invalid URL', 400

        mirror = WaybackMirror(**app.config['MIRROR_OPTIONS'])

        try:
            result = asyncio.run(mirror.run(url, app.config['BACKUP_DIR']))
        except Exception:
            logger.exception(f"Mirror of {url} failed")
            return 'An error occurred while downloading snapshots', 500

        return f'Downloaded snapshots of {url} to {result.backup_path}'

    return app


def run_app(host: str = '127.0.0.1', port: int = 3000, debug: bool = False):
    """Run the Flask web application."""
    app = create_app()
    app.run(host=host, port=port, debug=debug)


if __name__ == '__main__':
    run_app()
