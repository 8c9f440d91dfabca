"""
AirSense AQI - Application Factory

This module provides the Flask application factory pattern for creating
and configuring the application instance.
"""

from flask import Flask
from airsense.extensions import aqi
from airsense.config import Config


def create_app(config_class=Config):
    """Create and configure the Flask application.

    Args:
        config_class: Configuration class to use (default: Config)

    Returns:
        Configured Flask application instance

    Raises:
        RuntimeError: if no OpenAQ API key is configured
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    aqi.init_app(app)

    # Register blueprints
    from airsense.api import api_bp

    app.register_blueprint(api_bp)

    return app
