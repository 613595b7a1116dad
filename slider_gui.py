#!/usr/bin/env python3
"""
sliderUI GUI backend - JSON API for the games list screen.
Browse the catalog in any display order, reorder it and remove entries.
"""

import argparse
import logging
import os
import threading
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, request

import slider
from sliderui.services import SortMode

app = Flask(__name__)

gui_logger = logging.getLogger('sliderui.gui')

# The catalog store is not synchronised; every route holds this lock while it
# touches the shared SliderApp.
slider_app: Optional[slider.SliderApp] = None
catalog_lock = threading.Lock()


def init_app(games_path: str = slider.DEFAULT_GAMES_PATH,
             config_path: str = slider.DEFAULT_CONFIG_PATH,
             log_level: Optional[str] = None):
    """Create the shared SliderApp and load its games list.

    Args:
        games_path:  Games list to serve.
        config_path: JSON configuration file.
        log_level:   When given, logging is configured from the config's
                     ``logging`` section before the games list is read.

    Returns:
        ``(ok, message)`` tuple.
    """
    global slider_app
    with catalog_lock:
        slider_app = slider.SliderApp(games_path=games_path, config_path=config_path)
        if log_level is not None:
            slider_app.configure_logging(log_level)
        if not slider_app.load_games():
            gui_logger.warning("Games list %s could not be read", games_path)
            return False, f"Could not read {games_path}"
        count = len(slider_app.catalog_service.games())
        gui_logger.info("Loaded %d games from %s", count, games_path)
        return True, f"Loaded {count} games"


def _not_ready():
    return jsonify({'error': 'Catalog not loaded'}), 503


def _commit_or_error(action: str):
    if not slider_app.catalog_service.commit():
        gui_logger.error("Commit after %s failed", action)
        return jsonify({'error': 'Failed to save games list'}), 500
    return jsonify({'success': True, 'action': action,
                    'total_games': len(slider_app.catalog_service.games())})


@app.route('/api/status')
def api_status():
    """Get catalog status"""
    with catalog_lock:
        if slider_app is None:
            return jsonify({'ready': False, 'message': 'Catalog not loaded'})
        return jsonify({
            'ready': True,
            'games_path': slider_app.games_path,
            'total_games': len(slider_app.catalog_service.games()),
        })


@app.route('/api/games')
def api_games():
    """List games in the requested display order"""
    with catalog_lock:
        if slider_app is None:
            return _not_ready()
        sort = request.args.get('sort')
        try:
            mode = SortMode.parse(sort) if sort else slider_app.settings_service.sort_mode()
        except ValueError as e:
            return jsonify({'error': str(e)}), 400
        service = slider_app.catalog_service
        games = service.to_dicts(service.sorted_view(mode))
        return jsonify({'sort': mode.value, 'games': games})


@app.route('/api/games/find')
def api_find_game():
    """Look up the canonical index of a game path"""
    path = request.args.get('path')
    if not path:
        return jsonify({'error': 'path is required'}), 400
    with catalog_lock:
        if slider_app is None:
            return _not_ready()
        index = slider_app.catalog_service.find(path)
        return jsonify({'found': index is not None, 'index': index})


@app.route('/api/games/<int:index>/move-up', methods=['POST'])
def api_move_up(index):
    """Move a game one place up in the custom order"""
    with catalog_lock:
        if slider_app is None:
            return _not_ready()
        slider_app.catalog_service.move_up(index)
        return _commit_or_error('moved-up')


@app.route('/api/games/<int:index>/move-down', methods=['POST'])
def api_move_down(index):
    """Move a game one place down in the custom order"""
    with catalog_lock:
        if slider_app is None:
            return _not_ready()
        slider_app.catalog_service.move_down(index)
        return _commit_or_error('moved-down')


@app.route('/api/games/assign-orders', methods=['POST'])
def api_assign_orders():
    """Assign missing custom orders and renumber the list"""
    with catalog_lock:
        if slider_app is None:
            return _not_ready()
        slider_app.catalog_service.assign_orders()
        return _commit_or_error('orders-assigned')


@app.route('/api/games/<int:index>', methods=['DELETE'])
def api_remove_game(index):
    """Remove a game and save the list"""
    with catalog_lock:
        if slider_app is None:
            return _not_ready()
        service = slider_app.catalog_service
        if not 0 <= index < len(service.games()):
            return jsonify({'error': 'Game not found'}), 404
        if not service.remove_and_commit(index):
            return jsonify({'error': 'Failed to save games list'}), 500
        return jsonify({'success': True, 'action': 'removed',
                        'total_games': len(service.games())})


def main():
    """Run the development server"""
    load_dotenv()
    parser = argparse.ArgumentParser(description='sliderUI games list API')
    parser.add_argument('--host', default='127.0.0.1', help='Interface to bind (default: 127.0.0.1)')
    parser.add_argument('--port', type=int, default=5000, help='Port to listen on (default: 5000)')
    parser.add_argument('--games', default=os.getenv('SLIDERUI_GAMES', slider.DEFAULT_GAMES_PATH),
                        metavar='FILE', help='Games list to serve')
    parser.add_argument('--config', default=os.getenv('SLIDERUI_CONFIG', slider.DEFAULT_CONFIG_PATH),
                        metavar='FILE', help='JSON configuration file')
    args = parser.parse_args()

    ok, _message = init_app(args.games, args.config, log_level=os.getenv('SLIDERUI_LOG_LEVEL', 'INFO'))
    if not ok:
        gui_logger.warning("Serving an empty catalog")
    app.run(host=args.host, port=args.port)


if __name__ == '__main__':
    main()
