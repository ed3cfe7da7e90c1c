"""Flask application factory for the pagesim web UI.

The ``create_app`` function returns a Flask app with these endpoints:

- ``GET /`` — render the simulator page with the default settings.
- ``GET /api/defaults`` — return the app's settings as JSON.
- ``POST /api/simulate`` — run one policy, return the full trace.
- ``POST /api/compare`` — run every policy, return their scores.
- ``POST /api/export`` — run one policy, return the trace as a download.
- ``POST /api/execute`` — run a shell command and return its output.

The simulate/compare/export endpoints accept a JSON body such as
``{"refs": "7,0,1,2", "frames": 3, "algorithm": "LRU"}``.  Missing
fields fall back to the app's settings.  Invalid input yields a 400
with an ``error`` field.

The execute endpoint drives one shell session shared by every client.
That shell cannot read or write files (``export`` and ``load`` are
refused), and its event log keeps only the last ``WEB_LOG_LIMIT``
entries.  The stateless endpoints log rejected requests only.
"""

from __future__ import annotations

import json
import os
from typing import Any

from flask import Flask, Response, jsonify, render_template, request

from pagesim.compare import best_policies, compare_all
from pagesim.engine import simulate
from pagesim.export import EXPORT_FILENAME, result_to_dict
from pagesim.logging import Logger, LogLevel
from pagesim.parsing import format_references, parse_frame_count, parse_references
from pagesim.policies import Policy
from pagesim.settings import Settings
from pagesim.shell import Shell
from pagesim.trace import SimulationResult
from pagesim.validation import SimulationError

_HTTP_BAD_REQUEST = 400

# Entries kept in the web session log; older ones are dropped.
WEB_LOG_LIMIT = 500


def _read_inputs(
    data: dict[str, Any], settings: Settings
) -> tuple[Policy, tuple[int, ...], str, int]:
    """Pull (policy, references, reference text, frames) from a request body.

    Raises:
        SimulationError: If any value is invalid.

    """
    raw_refs = data.get("refs", settings.refs)
    if isinstance(raw_refs, list):
        raw_refs = format_references(raw_refs)  # pyright: ignore[reportUnknownArgumentType]
    ref_string = str(raw_refs)
    references = parse_references(ref_string)
    frames = parse_frame_count(str(data.get("frames", settings.frames)))
    policy = Policy.parse(str(data.get("algorithm", settings.algorithm)))
    return policy, references, ref_string, frames


def _result_payload(result: SimulationResult, ref_string: str) -> dict[str, Any]:
    """Build the simulate response: export payload plus summary figures."""
    payload = result_to_dict(result, ref_string=ref_string)
    payload["hits"] = result.hits
    payload["hitRatio"] = round(result.hit_ratio, 2)
    payload["missRatio"] = round(result.miss_ratio, 2)
    return payload


def create_app(settings: Settings | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        settings: Defaults for the page and for missing request fields.

    Returns:
        A configured Flask application ready to serve.

    """
    settings = settings if settings is not None else Settings()
    logger = Logger(max_entries=WEB_LOG_LIMIT)
    shell = Shell(settings=settings.copy(), logger=logger, allow_files=False)

    app = Flask(__name__)

    def _bad_request(message: str) -> tuple[Response, int]:
        logger.log(LogLevel.WARNING, message, source="web")
        return jsonify({"error": message}), _HTTP_BAD_REQUEST

    def _json_body() -> dict[str, Any] | None:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else None

    @app.route("/")
    def index() -> str:  # pyright: ignore[reportUnusedFunction]
        """Render the simulator page."""
        return render_template(
            "index.html",
            frames=settings.frames,
            refs=settings.refs,
            algorithm=settings.algorithm.value,
            interval=settings.interval,
            policies=[p.value for p in Policy],
        )

    @app.route("/api/defaults")
    def defaults() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the default settings."""
        return jsonify({key: str(value) for key, value in settings.items()})

    @app.route("/api/simulate", methods=["POST"])
    def simulate_endpoint() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Run one policy and return its trace.

        Returns:
            The export payload plus ``hits``, ``hitRatio`` and ``missRatio``.

        """
        data = _json_body()
        if data is None:
            return _bad_request("Expected a JSON object body")
        try:
            policy, references, ref_string, frames = _read_inputs(data, settings)
            result = simulate(policy, references, frames)
        except SimulationError as e:
            return _bad_request(str(e))
        return jsonify(_result_payload(result, ref_string))

    @app.route("/api/compare", methods=["POST"])
    def compare_endpoint() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Run every policy and return hit ratios and fault counts.

        Returns:
            JSON with a ``results`` map and the ``best`` policy names.

        """
        data = _json_body()
        if data is None:
            return _bad_request("Expected a JSON object body")
        try:
            _policy, references, _ref_string, frames = _read_inputs(data, settings)
            comparison = compare_all(references, frames)
        except SimulationError as e:
            return _bad_request(str(e))
        return jsonify(
            {
                "results": {
                    policy.value: {"hitRatio": round(stats.hit_ratio, 2), "faults": stats.faults}
                    for policy, stats in comparison.items()
                },
                "best": [p.value for p in best_policies(comparison)],
            }
        )

    @app.route("/api/export", methods=["POST"])
    def export_endpoint() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Run one policy and return the trace as a JSON attachment."""
        data = _json_body()
        if data is None:
            return _bad_request("Expected a JSON object body")
        try:
            policy, references, ref_string, frames = _read_inputs(data, settings)
            result = simulate(policy, references, frames)
        except SimulationError as e:
            return _bad_request(str(e))
        body = json.dumps(result_to_dict(result, ref_string=ref_string), indent=2)
        return Response(
            body,
            mimetype="application/json",
            headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"},
        )

    @app.route("/api/execute", methods=["POST"])
    def execute() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Execute a shell command and return JSON output.

        Expects JSON body: ``{"command": "..."}``

        """
        data = _json_body()
        if data is None or "command" not in data:
            return jsonify({"error": "Missing 'command' field"}), _HTTP_BAD_REQUEST
        output = shell.execute(str(data["command"]))
        if output == Shell.EXIT_SENTINEL:
            output = "The web shell cannot be exited."
        return jsonify({"output": output})

    return app


def main() -> None:
    """Run the web UI development server.

    This is the ``pagesim-web`` console entry point.  Defaults come
    from ``PAGESIM_*`` environment variables.
    """
    app = create_app(Settings.from_environ(os.environ))
    app.run(debug=True, port=8080)
