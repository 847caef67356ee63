"""
Flask web application for the syllabus deadline tracker.

This is the web interface for the application. It provides:
- Syllabus PDF upload (JSON API used by the upload page)
- Events API for the dashboard views
- Dashboard page with tomorrow / week / month / all views
- A simple email sign-in that keeps the user in the session

Run locally with:
    flask --app syllabus_tracker.app run
"""

import logging
from dataclasses import asdict
from typing import Any, Dict, Optional, Tuple

from flask import (
    Blueprint, Flask, current_app, flash, jsonify, redirect, render_template,
    request, session, url_for
)
from werkzeug.exceptions import RequestEntityTooLarge

from .config import Settings, get_settings
from .due_dates import local_now
from .errors import PersistenceFailure, Unauthenticated, UploadError
from .models import EVENT_TYPE_VALUES
from .pdf_extractor import PDFTextExtractor
from .store import EventStore, get_event_store
from .upload import UploadProcessor
from .windows import DEFAULT_VIEW, VIEWS, filter_and_sort, window_range

web = Blueprint("web", __name__)


def current_user_id() -> Optional[str]:
    """Signed-in user for this request, or None."""
    return session.get("user_id")


def _settings() -> Settings:
    return current_app.config["SETTINGS"]


def _store() -> EventStore:
    return current_app.config["EVENT_STORE"]


def _dashboard_params() -> Tuple[str, str, str]:
    """Read view, type and query from the query string.

    Raises:
        ValueError: If view or type is not one we know
    """
    view = request.args.get("view", DEFAULT_VIEW)
    type_filter = request.args.get("type", "all")
    query = request.args.get("q", "")
    if view not in VIEWS:
        raise ValueError(f"Unknown view '{view}'.")
    if type_filter != "all" and type_filter not in EVENT_TYPE_VALUES:
        raise ValueError(f"Unknown type '{type_filter}'.")
    return view, type_filter, query


def load_dashboard(user_id: str, view: str, type_filter: str, query: str) -> Dict[str, Any]:
    """Fetch the user's events and filter them for one dashboard view.

    Events are fetched and resolved on every call; nothing is cached.
    """
    settings = _settings()
    now = local_now(settings.timezone)
    window = window_range(view, now)
    events = _store().fetch_events(user_id=user_id, limit=settings.event_fetch_limit)
    resolved = filter_and_sort(events, window, type_filter, query, now)
    return {
        "view": window.view,
        "label": window.label,
        "start": window.start,
        "end": window.end,
        "events": resolved,
    }


@web.route('/')
def index():
    """Upload page."""
    return render_template('upload.html', user_id=current_user_id())


@web.route('/login', methods=['GET', 'POST'])
def login():
    """Sign in with an email address.

    GET: Display the sign-in form
    POST: Store the email as the session identity and go to the dashboard
    """
    if request.method == 'POST':
        email = request.form.get('email', '').strip().lower()
        if '@' not in email:
            flash('Please enter a valid email address.', 'error')
            return render_template('login.html'), 400
        session['user_id'] = email
        return redirect(url_for('web.dashboard'))
    return render_template('login.html')


@web.route('/logout', methods=['POST'])
def logout():
    session.pop('user_id', None)
    return redirect(url_for('web.login'))


@web.route('/api/upload', methods=['POST'])
def api_upload():
    """Handle syllabus upload.

    Expects a multipart form with the PDF in the "file" field.

    Returns:
        JSON with message, preview, events and syllabusId on success,
        or JSON {"message": ...} with 401/400/413/500 on failure
    """
    try:
        user_id = current_user_id()
        if not user_id:
            raise Unauthenticated()

        file = request.files.get('file')
        source = None
        filename = None
        if file is not None and file.filename:
            filename = file.filename
            source = file.read()

        processor: UploadProcessor = current_app.config["UPLOAD_PROCESSOR"]
        result = processor.process(user_id, filename, source)
        return jsonify(result.to_dict())

    except (UploadError, RequestEntityTooLarge):
        raise
    except Exception as e:
        current_app.logger.exception("Upload failed")
        return jsonify({"message": f"Server error: {e}"}), 500


@web.route('/api/events')
def api_events():
    """Events for one dashboard view.

    Query params: view (tomorrow|week|month|all), type (all or an event type), q
    """
    user_id = current_user_id()
    if not user_id:
        raise Unauthenticated()

    try:
        view, type_filter, query = _dashboard_params()
    except ValueError as e:
        return jsonify({"message": str(e)}), 400

    data = load_dashboard(user_id, view, type_filter, query)
    return jsonify({
        "view": data["view"],
        "label": data["label"],
        "start": data["start"].isoformat(),
        "end": data["end"].isoformat(),
        "events": [e.to_dict() for e in data["events"]],
    })


@web.route('/dashboard')
def dashboard():
    """Dashboard with the signed-in user's upcoming deadlines."""
    user_id = current_user_id()
    if not user_id:
        return redirect(url_for('web.login'))

    try:
        view, type_filter, query = _dashboard_params()
    except ValueError as e:
        flash(str(e), 'error')
        view, type_filter, query = DEFAULT_VIEW, "all", ""

    context = {
        'user_id': user_id,
        'views': VIEWS,
        'event_types': EVENT_TYPE_VALUES,
        'type_filter': type_filter,
        'query': query,
        'error': None,
    }
    try:
        context.update(load_dashboard(user_id, view, type_filter, query))
    except PersistenceFailure as e:
        context.update(asdict(window_range(view, local_now(_settings().timezone))))
        context['events'] = []
        context['error'] = e.message

    return render_template('dashboard.html', **context)


def handle_upload_error(error: UploadError):
    """Answer any UploadError with its message and status code."""
    if error.status_code >= 500:
        current_app.logger.error("%s: %s", type(error).__name__, error.message)
    return jsonify({"message": error.message}), error.status_code


def handle_too_large(error):
    max_mb = _settings().max_upload_bytes // (1024 * 1024)
    return jsonify({"message": f"File too large. Maximum size is {max_mb}MB."}), 413


def create_app(settings: Optional[Settings] = None,
               store: Optional[EventStore] = None,
               text_extractor: Optional[PDFTextExtractor] = None) -> Flask:
    """Create the Flask application.

    Args:
        settings: Application settings. Defaults to get_settings() (environment).
        store: Event store. Defaults to get_event_store(settings).
        text_extractor: PDF text extractor. Defaults to PDFTextExtractor.

    Returns:
        Configured Flask app
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.config['MAX_CONTENT_LENGTH'] = settings.max_upload_bytes
    app.config['SETTINGS'] = settings
    app.config['EVENT_STORE'] = store or get_event_store(settings)
    app.config['UPLOAD_PROCESSOR'] = UploadProcessor(
        app.config['EVENT_STORE'],
        text_extractor=text_extractor,
        settings=settings,
    )

    app.register_blueprint(web)
    app.register_error_handler(UploadError, handle_upload_error)
    app.register_error_handler(RequestEntityTooLarge, handle_too_large)
    return app


if __name__ == '__main__':
    # Run development server
    create_app().run(debug=True, host='0.0.0.0', port=5000)
