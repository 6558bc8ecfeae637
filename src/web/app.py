"""Flask web application for Credit Calculator."""

import os

from flask import Flask, Response, jsonify, render_template, request, session

from opentelemetry import trace
from src.core.config import get_agent_id, get_flask_secret, load_environment
from src.core.session import InMemorySessionStore
from src.shared.async_utils import run_coroutine
from src.shared.errors import ValidationError
from src.shared.logging import resolve_log_level, setup_logging
from src.shared.metrics import configure_metrics
from src.shared.tracing import configure_tracing
from src.web.handlers import WebHandlers
from src.web.interface import WebInterface
from src.web.session_tracing import end_session_span, get_or_create_session_span

# Load environment and configure Flask
load_environment()

setup_logging(
    name="credit_calculator_web",
    level=resolve_log_level(),
    service_name="credit-calculator-web",
)

# Configure OpenTelemetry traces and metrics (OTLP/gRPC, only when ENABLE_OTEL=true)
configure_tracing(service_name="credit-calculator-web")
configure_metrics()

# Resolve template and static directories
BASE_DIR = os.path.abspath(os.path.dirname(__file__))
TEMPLATES_DIR = os.path.join(BASE_DIR, "templates")
STATIC_DIR = os.path.join(BASE_DIR, "static")

app = Flask(__name__, template_folder=TEMPLATES_DIR, static_folder=STATIC_DIR)
app.secret_key = get_flask_secret()

# Initialize shared components
session_store = InMemorySessionStore(get_agent_id())
web_interface = WebInterface(session_store)
handlers = WebHandlers(web_interface)


def _session_id() -> str:
    """Return the browser session id, creating one on first use."""
    session_id = session.get('session_id')
    if not session_id:
        session_id = os.urandom(16).hex()
        session['session_id'] = session_id
    return session_id


def _run_in_session(session_id: str, coro):
    """Run a handler coroutine inside the session's long-lived span."""
    session_span = get_or_create_session_span(session_id)
    with trace.use_span(session_span, end_on_exit=False):
        return run_coroutine(coro)


@app.route('/')
def index():
    """Render main page."""
    _session_id()
    return render_template('index.html')


@app.route('/api/state', methods=['GET'])
def get_state():
    """Get the calculator state for the current session."""
    session_id = _session_id()
    try:
        return jsonify(_run_in_session(session_id, handlers.handle_state(session_id)))
    except Exception as e:
        return jsonify({'error': str(e)}), 500


@app.route('/api/parameters', methods=['POST'])
def update_parameters():
    """Apply form edits."""
    session_id = _session_id()
    data = request.get_json(silent=True)
    try:
        return jsonify(_run_in_session(session_id, handlers.handle_parameters(session_id, data)))
    except ValidationError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        return jsonify({'error': str(e)}), 500


@app.route('/api/sample', methods=['POST'])
def load_sample():
    """Load the sample problem statement."""
    session_id = _session_id()
    try:
        return jsonify(_run_in_session(session_id, handlers.handle_sample(session_id)))
    except Exception as e:
        return jsonify({'error': str(e)}), 500


@app.route('/api/calculate', methods=['POST'])
def calculate():
    """Submit the form to the agent and return the resulting state."""
    session_id = _session_id()
    data = request.get_json(silent=True)
    try:
        return jsonify(_run_in_session(session_id, handlers.handle_calculate(session_id, data)))
    except ValidationError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        return jsonify({'error': str(e)}), 500


@app.route('/api/new-calculation', methods=['POST'])
def new_calculation():
    """Clear the result and reset the form."""
    session_id = _session_id()
    try:
        result = _run_in_session(session_id, handlers.handle_new_calculation(session_id))
        end_session_span(session_id)
        return jsonify(result)
    except Exception as e:
        return jsonify({'error': str(e)}), 500


@app.route('/api/summary', methods=['GET'])
def copy_summary():
    """Return the summary text for the page to place on the clipboard."""
    session_id = _session_id()
    try:
        result = _run_in_session(session_id, handlers.handle_copy_summary(session_id))
    except Exception as e:
        return jsonify({'error': str(e)}), 500

    if result is None:
        return '', 204
    return jsonify(result)


@app.route('/api/export', methods=['GET'])
def export_summary():
    """Download the summary as a dated text file."""
    session_id = _session_id()
    try:
        exported = _run_in_session(session_id, handlers.handle_export(session_id))
    except Exception as e:
        return jsonify({'error': str(e)}), 500

    if exported is None:
        return '', 204

    filename, content = exported
    return Response(
        content,
        mimetype='text/plain; charset=utf-8',
        headers={'Content-Disposition': f'attachment; filename="{filename}"'},
    )


@app.route('/health')
def health():
    """Health check endpoint."""
    return jsonify({'status': 'healthy'})


if __name__ == '__main__':
    from src.core.config import get_port

    app.run(host='0.0.0.0', port=get_port(), debug=False)
