"""
Quote Analyzer
Validate upload → build request parts → one AI call → strip fences → parse JSON → items.
"""

from typing import Any, Dict, Optional

from forgequote.config import MAX_FILE_SIZE
from forgequote.prompts import FORGING_ANALYSIS_PROMPT
from forgequote.uploads import UploadedFile, build_parts, validate_upload
from forgequote.utils import extract_items, extract_json, setup_logger, safe_filename

logger = setup_logger(__name__)


class AnalysisError(Exception):
    """Server-side failure: missing configuration, upstream error or unparseable answer."""


class QuoteAnalyzer:
    """Runs the forging quote prompt against one uploaded file."""

    def __init__(self, engine=None, prompt: str = FORGING_ANALYSIS_PROMPT, max_file_size: int = MAX_FILE_SIZE):
        if engine is None:
            # Delayed import so tests can inject a stub engine without provider SDKs configured
            from forgequote.ai_engine import AIEngine
            engine = AIEngine()
        self.engine = engine
        self.prompt = prompt
        self.max_file_size = max_file_size

    def analyze(self, upload: Optional[UploadedFile]) -> Dict[str, Any]:
        """
        Returns:
            {"success": True, "data": {"items": [...]}, "fileName": str}

        Raises:
            UploadError: missing, empty, oversized or unsupported upload
            AnalysisError: engine not configured, API failure, non-JSON answer
        """
        if not self.engine.is_ready():
            raise AnalysisError(f"{self.engine.api_key_name} is not configured")

        upload = validate_upload(upload, self.max_file_size)
        kind = "text" if upload.is_text else upload.mime_type
        logger.info(f"[ANALYZE] {safe_filename(upload.filename)} ({kind}, {upload.size} bytes)")

        parts = build_parts(upload, self.prompt)
        result = self.engine.safe_generate(parts)
        if result["status"] != "success":
            raise AnalysisError(result["error"] or "AI request failed")

        try:
            extracted = extract_json(result["text"])
        except ValueError as e:
            logger.error(f"[ERROR] Could not parse AI response: {result['text'][:500]}")
            raise AnalysisError(str(e)) from e

        items = extract_items(extracted)
        logger.info(f"[OK] {len(items)} item(s) extracted via {result['provider']}")
        return {
            "success": True,
            "data": {"items": items},
            "fileName": upload.filename,
        }
