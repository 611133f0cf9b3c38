#!/usr/bin/env python3
"""
Travel List API server
Flask backend for user accounts and per-user favourite city lists.
"""

import argparse
import logging
import os
from functools import wraps
from typing import Optional

from dotenv import load_dotenv
from flask import Blueprint, Flask, current_app, jsonify, request, session
from flask_cors import CORS

from app.config import DEFAULT_CONFIG_PATH, ConfigManager, Settings
from app.errors import TravelError
from app.log import setup_logging
from app.repositories import CityRepository, UserRepository
from app.services import CityService, UserService

server_logger = logging.getLogger('travel.server')

users_bp = Blueprint('users', __name__, url_prefix='/api/users')
cities_bp = Blueprint('cities', __name__, url_prefix='/api/cities')


# ===========================================================================================
# Session gate
# ===========================================================================================

def current_username() -> Optional[str]:
    """Return the username stored in the client's session, if any."""
    user = session.get('user')
    if isinstance(user, dict):
        return user.get('username')
    return None


def require_login(f):
    """Decorator to require user to be logged in"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_username():
            return jsonify({'error': 'Login required'}), 401
        return f(*args, **kwargs)
    return decorated_function


def _services():
    return current_app.extensions['travel_list']


def _user_service() -> UserService:
    return _services()['users']


def _city_service() -> CityService:
    return _services()['cities']


def _json_body() -> dict:
    """Return the request body when it is a JSON object, else an empty dict."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


# ===========================================================================================
# User Endpoints
# ===========================================================================================

@users_bp.route('/register', methods=['POST'])
def api_users_register():
    """Register a new user and log them in"""
    data = _json_body()
    username = data.get('username')
    password = data.get('password')
    server_logger.info('Register endpoint called for username=%s', username)

    user = _user_service().register(username, password)
    session['user'] = {'username': user['username']}
    return jsonify(user)


@users_bp.route('/login', methods=['POST'])
def api_users_login():
    """Log in a user"""
    data = _json_body()
    username = data.get('username')
    password = data.get('password')

    user = _user_service().login(username, password)
    session['user'] = {'username': user['username']}
    server_logger.info('User logged in: %s', username)
    return jsonify(user)


@users_bp.route('/logout', methods=['POST'])
def api_users_logout():
    """Log out the current user"""
    server_logger.info('User logged out: %s', current_username())
    session.clear()
    return jsonify({'message': 'Logged out'})


@users_bp.route('/me', methods=['GET'])
def api_users_me():
    """Get current logged-in user"""
    username = current_username()
    if not username:
        return jsonify({'error': 'Not logged in'}), 401
    return jsonify({'username': username})


# ===========================================================================================
# City Endpoints
# ===========================================================================================

@cities_bp.route('', methods=['GET'])
def api_cities_list():
    """List the session user's cities, or the latest list for guests"""
    return jsonify(_city_service().list_cities(current_username()))


@cities_bp.route('', methods=['POST'])
@require_login
def api_cities_save():
    """Add or update a city"""
    data = _json_body()
    city = _city_service().add_or_update_city(current_username(), data.get('city'))
    return jsonify(city)


@cities_bp.route('/<city_name>', methods=['DELETE'])
@require_login
def api_cities_delete(city_name):
    """Delete a city"""
    _city_service().delete_city(current_username(), city_name)
    return jsonify({'message': 'City deleted'})


@cities_bp.route('/<city_name>/attractions', methods=['POST'])
@require_login
def api_attractions_add(city_name):
    """Add an attraction to a city"""
    data = _json_body()
    city = _city_service().add_attraction(current_username(), city_name, data.get('attraction'))
    return jsonify(city)


@cities_bp.route('/<city_name>/attractions/<attraction>', methods=['DELETE'])
@require_login
def api_attractions_delete(city_name, attraction):
    """Remove an attraction from a city"""
    city = _city_service().delete_attraction(current_username(), city_name, attraction)
    return jsonify(city)


@cities_bp.route('/<city_name>/restaurants', methods=['POST'])
@require_login
def api_restaurants_add(city_name):
    """Add a restaurant to a city"""
    data = _json_body()
    city = _city_service().add_restaurant(current_username(), city_name, data.get('restaurant'))
    return jsonify(city)


@cities_bp.route('/<city_name>/restaurants/<restaurant>', methods=['DELETE'])
@require_login
def api_restaurants_delete(city_name, restaurant):
    """Remove a restaurant from a city"""
    city = _city_service().delete_restaurant(current_username(), city_name, restaurant)
    return jsonify(city)


# ===========================================================================================
# Application factory
# ===========================================================================================

def _handle_travel_error(exc: TravelError):
    return jsonify(exc.to_dict()), exc.status_code


def _handle_os_error(exc: OSError):
    server_logger.exception('Data file error: %s', exc)
    return jsonify({'error': 'Failed to save data'}), 500


def create_app(settings: Optional[Settings] = None) -> Flask:
    """Build the Flask app with its stores wired from *settings*.

    When *settings* is omitted the default config file is loaded.
    """
    if settings is None:
        settings = ConfigManager().settings()

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.config.update(
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SECURE=False,
    )
    CORS(app, origins=[settings.cors_origin], supports_credentials=True)

    app.extensions['travel_list'] = {
        'settings': settings,
        'users': UserService(UserRepository(settings.users_file)),
        'cities': CityService.from_settings(CityRepository(settings.cities_file), settings),
    }

    app.register_blueprint(users_bp)
    app.register_blueprint(cities_bp)
    app.register_error_handler(TravelError, _handle_travel_error)
    app.register_error_handler(OSError, _handle_os_error)

    @app.route('/')
    def index():
        return 'Backend API is running'

    return app


def main():
    """Main entry point"""
    load_dotenv()
    parser = argparse.ArgumentParser(description='Travel List API server')
    parser.add_argument(
        '--config', '-c',
        default=DEFAULT_CONFIG_PATH,
        help='Path to config file (default: config/database.json)'
    )
    parser.add_argument(
        '--host',
        default='127.0.0.1',
        help='Interface to bind (default: 127.0.0.1)'
    )
    parser.add_argument(
        '--port', '-p',
        type=int,
        default=int(os.getenv('PORT', '3001')),
        help='Port to listen on (default: $PORT or 3001)'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Run Flask in debug mode'
    )
    args = parser.parse_args()

    settings = ConfigManager(args.config).settings()
    setup_logging(settings.log_level)
    app = create_app(settings)

    server_logger.info('Cities file: %s', settings.cities_file)
    server_logger.info('Users file: %s', settings.users_file)
    print(f"Server running on http://{args.host}:{args.port}")
    app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()
