"""
API Blueprint

JSON endpoints for current AQI, forecasts, health advice and single
stations.
"""

from flask import Blueprint

api_bp = Blueprint('api', __name__, url_prefix='/api')

from airsense.api import routes  # noqa: E402, F401
