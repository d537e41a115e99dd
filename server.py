"""
Forging Quote Analyzer — Flask API Server
Relays an uploaded quote sheet (CSV / image / PDF) to the configured AI provider
and returns the extracted forging items as JSON.

Endpoints:
  OPTIONS /api/analyze          — CORS preflight
  POST    /api/analyze          — analyze the multipart `file` upload
  GET     /api/status           — health check + provider state
"""

import sys
from pathlib import Path
from datetime import datetime
from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

# ── Path setup ────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(BASE_DIR))

from forgequote.config import (
    CORS_ORIGINS,
    CORS_ALLOW_METHODS,
    CORS_ALLOW_HEADERS,
    MAX_FILE_SIZE,
    MAX_REQUEST_SIZE,
    UPLOAD_FIELD,
    DEFAULT_SERVER_ERROR,
)
from forgequote.analyzer import QuoteAnalyzer
from forgequote.uploads import UploadedFile, UploadError
from forgequote.utils import setup_logger

logger = setup_logger(__name__)


app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = MAX_REQUEST_SIZE
app.json.ensure_ascii = False  # keep Korean notes readable in responses
CORS(
    app,
    resources={r"/api/*": {"origins": CORS_ORIGINS}},  # "*" echoes the caller's Origin
    methods=CORS_ALLOW_METHODS,
    allow_headers=CORS_ALLOW_HEADERS,
)

# ── Analyzer (reused across warm invocations) ─────────────
_analyzer = None


def get_analyzer() -> QuoteAnalyzer:
    global _analyzer
    if _analyzer is None:
        _analyzer = QuoteAnalyzer()
    return _analyzer


# ── Error handlers ────────────────────────────────────────

@app.errorhandler(405)
def method_not_allowed(_e):
    return jsonify({"error": "Method Not Allowed"}), 405


@app.errorhandler(413)
def request_too_large(_e):
    return jsonify({"error": f"File too large (max {MAX_FILE_SIZE // (1024 * 1024)}MB)"}), 413


# ── API Routes ────────────────────────────────────────────

@app.route("/api/status")
def api_status():
    try:
        analyzer = get_analyzer()
        provider = analyzer.engine.label
        ready = analyzer.engine.is_ready()
    except Exception as e:
        logger.error(f"Status check error: {e}")
        provider, ready = None, False
    return jsonify({
        "ok": True,
        "provider": provider,
        "ai_ready": ready,
        "max_file_size": MAX_FILE_SIZE,
        "timestamp": datetime.now().isoformat(),
    })


@app.route("/api/analyze", methods=["POST"])
def api_analyze():
    try:
        analyzer = get_analyzer()
        upload = UploadedFile.from_storage(request.files.get(UPLOAD_FIELD))
        return jsonify(analyzer.analyze(upload))
    except UploadError as e:
        logger.warning(f"[WARN] Rejected upload: {e.message}")
        return jsonify(e.to_dict()), e.status_code
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Server Error: {e}")
        return jsonify({"error": str(e) or DEFAULT_SERVER_ERROR}), 500


# ── Run ───────────────────────────────────────────────────
# Export app for Vercel serverless functions
# Vercel will use this directly without calling app.run()

if __name__ == "__main__":
    print("\n" + "="*50)
    print("  FORGING QUOTE ANALYZER — API SERVER")
    print("  http://localhost:5000")
    print("="*50 + "\n")
    app.run(host="0.0.0.0", port=5000, debug=False, threaded=True)
