"""
AI Engine Component
Single-provider multimodal engine for the forging quote review prompt.

Providers (selected by AI_PROVIDER):
  - gemini: Google Gemini, text + inline image/PDF blobs (default)
  - openai: OpenAI chat completions (or the HuggingFace router for hf_ keys),
            text + base64 data URLs
  - cohere: Cohere chat, text uploads only

Exactly one outbound call per request; failures are reported in the result
object rather than retried.
"""

import base64
from typing import Any, Dict, List, Optional

try:
    import google.generativeai as genai
except ImportError:
    genai = None
import cohere
from openai import OpenAI

from forgequote import config
from forgequote.utils import setup_logger

logger = setup_logger(__name__)

PROVIDER_LABELS = {
    "gemini": "Google Gemini",
    "openai": "OpenAI/HF",
    "cohere": "Cohere",
}

PROVIDER_KEY_NAMES = {
    "gemini": "GEMINI_API_KEY",
    "openai": "OPENAI_API_KEY",
    "cohere": "COHERE_API_KEY",
}


class UnsupportedInputError(ValueError):
    """The configured provider cannot take this kind of upload."""


def _is_api_key_missing(api_key: Optional[str]) -> bool:
    return not api_key or api_key.strip() == ""


def _describe_error(error: Exception) -> str:
    """Short status for the caller: HTTP-ish code when the SDK exposes one."""
    code = getattr(error, "code", None) or getattr(error, "status_code", None)
    if code:
        return str(code)
    return type(error).__name__


class AIEngine:
    """Wraps the configured provider SDK behind one generate(parts) call."""

    def __init__(self, provider: str = None):
        self.provider = (provider or config.AI_PROVIDER).strip().lower()
        if self.provider not in config.SUPPORTED_PROVIDERS:
            raise ValueError(
                f"Unknown AI provider '{self.provider}'. "
                f"Expected one of: {', '.join(config.SUPPORTED_PROVIDERS)}"
            )
        self.label = PROVIDER_LABELS[self.provider]
        self.gemini_ready = False
        self.openai_client = None
        self.cohere_client = None
        self._initialize_client()

    @property
    def api_key_name(self) -> str:
        return PROVIDER_KEY_NAMES[self.provider]

    def _api_key(self) -> Optional[str]:
        return getattr(config, self.api_key_name)

    def _initialize_client(self):
        """Initialize only the configured provider."""
        api_key = self._api_key()
        if _is_api_key_missing(api_key):
            logger.warning(f"[WARN] {self.api_key_name} is not configured. {self.label} unavailable.")
            return

        if self.provider == "gemini":
            if genai is None:
                logger.error("[ERROR] google-generativeai is not installed")
                return
            try:
                genai.configure(api_key=api_key)
                self.gemini_ready = True
                logger.info(f"[OK] Gemini initialized ({config.GEMINI_MODEL})")
            except Exception as e:
                logger.error(f"Failed to initialize Gemini: {e}")

        elif self.provider == "openai":
            try:
                base_url = None
                # Check for HuggingFace key
                if api_key.startswith("hf_"):
                    base_url = config.HF_BASE_URL
                    logger.info(f"[OK] HuggingFace initialized ({config.GPT_MODEL})")
                else:
                    logger.info(f"[OK] OpenAI initialized ({config.GPT_MODEL})")

                self.openai_client = OpenAI(
                    api_key=api_key,
                    base_url=base_url,
                    timeout=config.AI_TIMEOUT_SECONDS,
                )
            except Exception as e:
                logger.error(f"Failed to initialize OpenAI/HF: {e}")

        elif self.provider == "cohere":
            try:
                self.cohere_client = cohere.Client(api_key, timeout=int(config.AI_TIMEOUT_SECONDS))
                logger.info(f"[OK] Cohere initialized ({config.COHERE_MODEL})")
            except Exception as e:
                logger.error(f"Failed to initialize Cohere: {e}")

    def is_ready(self) -> bool:
        """Check if the configured provider is available."""
        return self.gemini_ready or self.openai_client is not None or self.cohere_client is not None

    # ── Provider calls ────────────────────────────────────

    def _call_gemini(self, parts: List[Dict[str, Any]]) -> str:
        contents = []
        for part in parts:
            if "text" in part:
                contents.append(part["text"])
            else:
                contents.append({"mime_type": part["mime_type"], "data": part["data"]})

        model = genai.GenerativeModel(config.GEMINI_MODEL)
        response = model.generate_content(
            contents,
            request_options={"timeout": config.AI_TIMEOUT_SECONDS},
        )

        try:
            text = response.text
        except ValueError:
            # Blocked or multi-candidate responses: collect whatever text parts exist
            text = ""
            for candidate in getattr(response, "candidates", None) or []:
                content = getattr(candidate, "content", None)
                for p in getattr(content, "parts", None) or []:
                    if getattr(p, "text", None):
                        text += p.text
        return text

    @staticmethod
    def _openai_content(parts: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        content = []
        for part in parts:
            if "text" in part:
                content.append({"type": "text", "text": part["text"]})
                continue
            encoded = base64.b64encode(part["data"]).decode("ascii")
            data_url = f"data:{part['mime_type']};base64,{encoded}"
            if part["mime_type"].startswith("image/"):
                content.append({"type": "image_url", "image_url": {"url": data_url}})
            else:
                content.append({
                    "type": "file",
                    "file": {"filename": part.get("filename") or "upload.pdf", "file_data": data_url},
                })
        return content

    def _call_openai(self, parts: List[Dict[str, Any]]) -> str:
        resp = self.openai_client.chat.completions.create(
            model=config.GPT_MODEL,
            messages=[{"role": "user", "content": self._openai_content(parts)}],
        )
        return resp.choices[0].message.content or ""

    def _call_cohere(self, parts: List[Dict[str, Any]]) -> str:
        if any("text" not in part for part in parts):
            raise UnsupportedInputError("Cohere does not accept binary uploads; send CSV or switch AI_PROVIDER")
        message = "".join(part["text"] for part in parts)
        response = self.cohere_client.chat(message=message, model=config.COHERE_MODEL)
        return response.text or ""

    # ── Public API ────────────────────────────────────────

    def generate(self, parts: List[Dict[str, Any]]) -> dict:
        """
        Send the prompt + upload parts to the configured provider once.
        Returns detailed object: {"text": str, "status": "success"|"failed", "provider": str, "error": str|None}
        """
        if not self.is_ready():
            error_msg = f"{self.api_key_name} is not configured"
            logger.error(f"[ERROR] {error_msg}")
            return {"text": "", "status": "failed", "provider": self.label, "error": error_msg}

        callers = {
            "gemini": self._call_gemini,
            "openai": self._call_openai,
            "cohere": self._call_cohere,
        }
        try:
            text = callers[self.provider](parts)
        except UnsupportedInputError as e:
            logger.warning(f"{self.label} rejected the request: {e}")
            return {"text": "", "status": "failed", "provider": self.label, "error": str(e)}
        except Exception as e:
            logger.error(f"{self.label} API Error: {e}")
            return {
                "text": "",
                "status": "failed",
                "provider": self.label,
                "error": f"{self.label} API Error: {_describe_error(e)}",
            }

        if not text or not text.strip():
            logger.warning(f"{self.label} returned an empty response")
            return {"text": "", "status": "failed", "provider": self.label, "error": "AI response is empty"}

        return {"text": text, "status": "success", "provider": self.label, "error": None}

    def safe_generate(self, parts: List[Dict[str, Any]]) -> dict:
        """Safe wrapper that guarantees a return object."""
        try:
            return self.generate(parts)
        except Exception as e:
            logger.critical(f"Critical Engine Failure: {e}")
            return {
                "text": "",
                "status": "failed",
                "provider": self.label,
                "error": f"{self.label} API Error: {_describe_error(e)}",
            }
