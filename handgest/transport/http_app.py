from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from handgest.export.csv_export import CsvExporter
from handgest.streaming.engine import GestureEngine, IngestResult
from handgest.streaming.protocol import Sample

logger = logging.getLogger(__name__)


def _sample_dict(s: Sample) -> dict[str, object]:
    return {"ts": s.ts, "gx": s.gx, "gy": s.gy, "gz": s.gz, "ax": s.ax, "ay": s.ay, "az": s.az}


def create_app(engine: GestureEngine, *, exporter: CsvExporter | None = None) -> Flask:
    """HTTP front for one GestureEngine.

    Ingestion routes always answer 200 with the result object; rejected
    batches carry status "error" and a detail string.
    """

    app = Flask(__name__)

    @app.get("/health")
    def health():
        return "OK", 200, {"Content-Type": "text/plain"}

    @app.post("/gyro-data-full")
    def gyro_data_full():
        result = engine.handle_envelope(request.get_data(), replace=False)
        return jsonify(result.to_dict())

    @app.post("/gyro-data-replace")
    def gyro_data_replace():
        result = engine.handle_envelope(request.get_data(), replace=True)
        return jsonify(result.to_dict())

    @app.get("/state")
    def state():
        points = engine.points()
        classification = engine.latest_classification()
        return jsonify(
            {
                "mode": engine.mode.value,
                "blue_points": points.blue,
                "red_points": points.red,
                "message": classification.message,
                "active": list(classification.active),
            }
        )

    @app.get("/last-second")
    def last_second():
        samples = engine.display_window()
        span = engine.display_span()
        return jsonify({"span": list(span) if span else None, "samples": [_sample_dict(s) for s in samples]})

    @app.post("/session/start")
    def session_start():
        engine.reset_points()
        return jsonify({"status": "ok"})

    @app.post("/session/stop")
    def session_stop():
        points = engine.points()
        body: dict[str, object] = {"status": "ok", "blue_points": points.blue, "red_points": points.red}
        if exporter is not None:
            body["file"] = str(exporter.write_points(points))
        return jsonify(body)

    @app.post("/export")
    def export_history():
        samples = engine.history()
        if not samples:
            return jsonify(IngestResult.error("No samples to export").to_dict())
        if exporter is None:
            return jsonify(IngestResult.error("No exporter configured").to_dict())
        path = exporter.write_samples(samples, prefix="imu_samples")
        return jsonify({"status": "ok", "exported": len(samples), "file": str(path)})

    @app.errorhandler(404)
    def not_found(_e):
        return "Not found", 404, {"Content-Type": "text/plain"}

    @app.errorhandler(500)
    def internal_error(e):
        original = getattr(e, "original_exception", None) or e
        logger.error("Request failed: %s", original)
        return f"Error: {original}", 500, {"Content-Type": "text/plain"}

    return app
