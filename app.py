import os
import logging
from flask import Flask, request, jsonify, session, Response
from models import db
from catalog import THROW_SYMBOLS, ordered_selection
from patterns import generate_patterns
from progress import ProgressStore, SqlGateway, format_date, MIN_CATCHES, MAX_CATCHES
from view import project, toggle_sort, SORT_KEYS, SORT_PATTERN, ASCENDING

basedir = os.path.abspath(os.path.dirname(__file__))

app = Flask(__name__)
app.config["SECRET_KEY"] = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-production")
app.config["SQLALCHEMY_DATABASE_URI"] = os.environ.get(
    "DATABASE_URL",
    "sqlite:///" + os.path.join(basedir, "juggle_trainer.db"),
)
app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))

db.init_app(app)

# ── Selection limits ──────────────────────────────────────────────────────────

MIN_LENGTH = 1
MAX_LENGTH = 10
DEFAULT_LENGTH = 3

# Created at startup, once the tables exist
progress = None


# ── Helpers ───────────────────────────────────────────────────────────────────

def _clamp(value, low, high):
    return max(low, min(high, value))


def _row_json(row):
    return {
        "pattern": row.pattern,
        "maxCatches": row.max_catches,
        "completed": row.completed,
        "dateCompleted": format_date(row.completion_date) if row.completion_date else None,
    }


def _record_json(pattern):
    rec = progress.record(pattern)
    return {
        "pattern": pattern,
        "maxCatches": rec.max_catches,
        "completed": rec.completed,
        "dateCompleted": format_date(rec.completion_date) if rec.completion_date else None,
    }


def current_selection():
    """Symbols and length from the query string, falling back to the session."""
    raw = request.args.get("symbols")
    if raw is not None:
        session["symbols"] = [s.strip() for s in raw.split(",") if s.strip()]
    length = request.args.get("length", type=int)
    if length is not None:
        session["length"] = _clamp(length, MIN_LENGTH, MAX_LENGTH)
    symbols = ordered_selection(session.get("symbols", []))
    return symbols, session.get("length", DEFAULT_LENGTH)


def current_sort():
    """Apply a header click (``?sort=<key>``) to the sort remembered in the session."""
    key = session.get("sort_key", SORT_PATTERN)
    order = session.get("sort_order", ASCENDING)
    clicked = request.args.get("sort")
    if clicked in SORT_KEYS:
        key, order = toggle_sort(key, order, clicked)
        session["sort_key"], session["sort_order"] = key, order
    return key, order


# ── Routes ────────────────────────────────────────────────────────────────────

@app.route("/api/symbols")
def list_symbols():
    return jsonify([{"code": s.code, "name": s.name} for s in THROW_SYMBOLS])


@app.route("/api/patterns")
def list_patterns():
    symbols, length = current_selection()
    sort_key, sort_order = current_sort()
    generated = generate_patterns(symbols, length)
    rows = project(generated, progress, sort_key, sort_order)
    return jsonify({
        "symbols": symbols,
        "length": length,
        "sort": {"key": sort_key, "order": sort_order},
        "summary": progress.summary(generated),
        "patterns": [_row_json(r) for r in rows],
    })


@app.route("/api/catches", methods=["POST"])
def save_catches():
    """Save the best catch count for a pattern (and its repeat family)."""
    data = request.get_json(force=True, silent=True) or {}
    pattern = str(data.get("pattern", "")).strip()
    if not pattern:
        return jsonify({"ok": False, "error": "missing pattern"}), 400
    try:
        catches = int(data.get("catches"))
    except (TypeError, ValueError):
        return jsonify({"ok": False, "error": "invalid catches"}), 400
    catches = _clamp(catches, MIN_CATCHES, MAX_CATCHES)
    updated = progress.set_max_catches(pattern, catches)
    app.logger.info("Saved %d catches for %s (%d patterns updated)", catches, pattern, len(updated))
    return jsonify({"ok": True, "updated": [_record_json(p) for p in updated]})


@app.route("/api/progress/<path:pattern>")
def pattern_progress(pattern):
    return jsonify(_record_json(pattern))


@app.route("/api/progress/reset", methods=["POST"])
def reset_progress():
    progress.reset()
    return jsonify({"ok": True})


@app.route("/api/progress/export")
def export_progress():
    return Response(
        progress.export_data(),
        mimetype="application/json",
        headers={"Content-Disposition": "attachment; filename=juggle_progress.json"},
    )


@app.route("/api/progress/import", methods=["POST"])
def import_progress():
    text = request.get_data(as_text=True)
    if not progress.import_data(text):
        return jsonify({"ok": False, "error": "invalid progress data"}), 400
    return jsonify({"ok": True, "completed": len(progress.completed_patterns)})


with app.app_context():
    db.create_all()
    progress = ProgressStore(SqlGateway())

if __name__ == "__main__":
    app.run(debug=True)
