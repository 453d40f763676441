from __future__ import annotations
from dataclasses import asdict
from pathlib import Path
from typing import Any
from flask import Flask, request, jsonify, Response, g

from commercial_ratio.benchmarks.zones import BENCHMARKS
from commercial_ratio.config.env import get_api_config
from commercial_ratio.dashboard.state import DashboardState, SessionRegistry
from commercial_ratio.exports.reports import summary_md
from commercial_ratio.exports.writers import write_pro_forma, write_projection
from commercial_ratio.projection.impact import pro_forma
from commercial_ratio.projection.scenario import ScenarioInput, clamp_ratio, default_scenario, parse_mode
from commercial_ratio.snapshot.financials import DEFAULT_SNAPSHOT
from commercial_ratio.snapshot.kpi import compute_kpis

import json
import logging
import time
from collections import deque, defaultdict

logger = logging.getLogger(__name__)

app = Flask(__name__)

REGISTRY = SessionRegistry()
OPENAPI_PATH = Path(__file__).with_name("openapi.json")

# Configuration helpers (overridable via app.config in tests)

def _get_api_key() -> str | None:
    if 'API_KEY' in app.config:
        return app.config.get('API_KEY')
    return get_api_config().api_key


def _get_rate_limit() -> tuple[int, float]:
    cfg = get_api_config()
    n = app.config.get('RATE_LIMIT_N')
    w = app.config.get('RATE_LIMIT_WINDOW_SEC')
    if n is None:
        n = cfg.rate_limit_n
    if w is None:
        w = cfg.rate_limit_window_sec
    return int(n), float(w)


def _get_max_sessions() -> int:
    n = app.config.get('MAX_SESSIONS')
    if n is None:
        n = get_api_config().max_sessions
    return int(n)


def _get_snapshot():
    return app.config.get('SNAPSHOT') or DEFAULT_SNAPSHOT


_recent: dict[str, deque[float]] = defaultdict(lambda: deque(maxlen=100))


def _client_ip() -> str:
    xff = request.headers.get('X-Forwarded-For')
    if xff:
        return xff.split(',')[0].strip()
    return request.remote_addr or 'anon'


def _check_api_key():
    api_key = _get_api_key()
    if api_key:
        provided = request.headers.get('X-API-Key')
        if provided != api_key:
            return jsonify({'error': 'unauthorized'}), 401
    return None


def _check_rate_limit(ip: str):
    # Allow if rate limiting disabled or N <= 0
    n, window = _get_rate_limit()
    if n <= 0:
        return None
    now = time.time()
    dq = _recent[ip]
    while dq and now - dq[0] > window:
        dq.popleft()
    if len(dq) >= n:
        retry = max(0.0, window - (now - dq[0]))
        resp = jsonify({'error': 'rate_limited'})
        resp.status_code = 429
        resp.headers['Retry-After'] = f"{retry:.2f}"
        return resp
    dq.append(now)
    return None


@app.before_request
def _auth_and_rate_limit():
    g.start_time = time.time()
    logger.info("Incoming request: %s %s", request.method, request.path)
    # Only enforce for dashboard sessions
    if request.path.startswith('/sessions'):
        unauthorized = _check_api_key()
        if unauthorized is not None:
            return unauthorized
        if request.method == 'POST' and request.path == '/sessions':
            rl = _check_rate_limit(_client_ip())
            if rl is not None:
                return rl
    return None


@app.after_request
def _log_response(resp):
    elapsed = time.time() - g.get('start_time', time.time())
    logger.info("Request completed: %s %s Status: %s Time: %.4fs", request.method, request.path, resp.status_code, elapsed)
    return resp


class BadInput(ValueError):
    pass


def _scenario_from(params: dict[str, Any], base: ScenarioInput) -> ScenarioInput:
    ratio = base.target_ratio
    mode = base.mode
    if params.get('target_ratio') is not None:
        try:
            ratio = clamp_ratio(float(params['target_ratio']))
        except (TypeError, ValueError):
            raise BadInput('target_ratio must be a finite number')
    if params.get('mode') is not None:
        try:
            mode = parse_mode(params['mode'])
        except ValueError as e:
            raise BadInput(str(e))
    return ScenarioInput(target_ratio=ratio, mode=mode)


def _json_object() -> dict[str, Any]:
    payload = request.get_json(force=True, silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise BadInput('request body must be a JSON object')
    return payload


@app.errorhandler(BadInput)
def _bad_input(e: BadInput):
    return jsonify({'error': str(e)}), 400


@app.get('/snapshot')
def get_snapshot():
    snap = _get_snapshot()
    state = DashboardState.create(snapshot=snap)
    return jsonify({
        'snapshot': asdict(snap),
        'baseline': asdict(state.baseline),
        'kpis': compute_kpis(snap),
        'benchmarks': [asdict(b) for b in BENCHMARKS],
    })


@app.get('/projection')
def get_projection():
    scenario = _scenario_from(request.args.to_dict(), default_scenario())
    state = DashboardState.create(snapshot=_get_snapshot(), scenario=scenario)
    body = state.summary()
    if state.error is not None:
        return jsonify({'error': state.error.code, 'message': str(state.error), 'summary': body}), 422
    return jsonify(body)


@app.post('/sessions')
def post_sessions():
    payload = _json_object()
    scenario = _scenario_from(payload, default_scenario())
    state = DashboardState.create(snapshot=_get_snapshot(), scenario=scenario)
    body = state.summary()
    session = REGISTRY.create(state, max_sessions=_get_max_sessions())
    return jsonify({'session_id': session.id, **body})


@app.get('/sessions/<sid>')
def get_session(sid: str):
    body = REGISTRY.summary(sid)
    if body is None:
        return jsonify({'error': 'not_found'}), 404
    return jsonify(body)


@app.delete('/sessions/<sid>')
def delete_session(sid: str):
    if not REGISTRY.delete(sid):
        return jsonify({'error': 'not_found'}), 404
    return jsonify({'session_id': sid, 'deleted': True})


@app.patch('/sessions/<sid>')
def patch_session(sid: str):
    payload = _json_object()
    if REGISTRY.get(sid) is None:
        return jsonify({'error': 'not_found'}), 404
    # validate up front; the registry applies both changes under its lock
    scenario = _scenario_from(payload, default_scenario())
    s = REGISTRY.update(
        sid,
        target_ratio=scenario.target_ratio if payload.get('target_ratio') is not None else None,
        mode=scenario.mode if payload.get('mode') is not None else None,
    )
    body = REGISTRY.summary(sid) if s is not None else None
    if body is None:
        return jsonify({'error': 'not_found'}), 404
    return jsonify(body)


EXPORTS = {
    'pro_forma.csv': 'text/csv',
    'projection.csv': 'text/csv',
    'summary.md': 'text/markdown',
}


def _render_export(state: DashboardState, name: str):
    """Render one export; returns (body, None) or (None, error body)."""
    summary = state.summary()
    if state.projection is None and name != 'summary.md':
        return None, {'error': state.error.code, 'message': str(state.error)}
    if name == 'pro_forma.csv':
        return write_pro_forma(pro_forma(state.snapshot, state.baseline, state.projection)), None
    if name == 'projection.csv':
        return write_projection([{**summary, **summary['projection'], **summary['impact']}]), None
    rows = pro_forma(state.snapshot, state.baseline, state.projection) if state.projection else None
    return summary_md(summary, rows), None


@app.get('/sessions/<sid>/export/<name>')
def get_export(sid: str, name: str):
    if REGISTRY.get(sid) is None:
        return jsonify({'error': 'not_found'}), 404
    if name not in EXPORTS:
        return jsonify({'error': 'export_not_found'}), 404
    # render under the registry lock so a concurrent PATCH cannot interleave
    rendered = REGISTRY.read(sid, lambda state: _render_export(state, name))
    if rendered is None:
        return jsonify({'error': 'not_found'}), 404
    body, err = rendered
    if err is not None:
        return jsonify(err), 422
    return Response(body, mimetype=EXPORTS[name])


@app.get('/openapi.json')
def get_openapi():
    try:
        spec = json.loads(OPENAPI_PATH.read_text())
    except (OSError, ValueError):
        return jsonify({'error': 'openapi_not_found'}), 404
    return jsonify(spec)


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    app.run(host='0.0.0.0', port=8000)
