"""
API Routes

A blank or missing ``city`` is a 400 with an empty body. Every other
outcome is rendered as JSON with the status its Outcome maps to: 200 with
the response body, 404 with ``{message}`` for "no data", or the upstream
status with ``{message}`` when a source rejected our credentials or rate
limited us.
"""

from flask import jsonify, request

from airsense.api import api_bp
from airsense.extensions import aqi


TRUTHY = ('1', 'true', 'yes', 'on')


def _city_param():
    return (request.args.get('city') or '').strip()


def _render(outcome):
    response = jsonify(outcome.to_dict())
    response.status_code = outcome.http_status
    return response


@api_bp.route('/aqi')
def current_aqi():
    """Current PM2.5 AQI for a city"""
    city = _city_param()
    if not city:
        return '', 400
    response = _render(aqi.services.resolver.resolve(city))
    response.headers['Cache-Control'] = 'no-store'
    return response


@api_bp.route('/forecast')
def forecast():
    """Hourly PM2.5 / AQI forecast for a city"""
    city = _city_param()
    if not city:
        return '', 400
    return _render(aqi.services.forecaster.forecast(city))


@api_bp.route('/advice')
def advice():
    """Health advice for a city, stricter when asthma=true"""
    city = _city_param()
    if not city:
        return '', 400
    asthma = (request.args.get('asthma') or '').strip().lower() in TRUTHY
    return _render(aqi.services.advisor.advise(city, asthma=asthma))


@api_bp.route('/locations/<int:location_id>')
def location(location_id):
    """Current PM2.5 AQI for a single OpenAQ location"""
    return _render(aqi.services.resolver.resolve_location(location_id))


@api_bp.route('/health')
def health():
    return jsonify({'status': 'ok'})
