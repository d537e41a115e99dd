"""
Vercel Serverless Function Entry Point
Exports the Flask app as a WSGI application for Vercel

vercel.json rewrites every path here; Flask routes /api/analyze and
/api/status from the original request path. Vercel sets VERCEL itself,
which keeps forgequote.config from reading a local .env.
"""
import sys
from pathlib import Path

# Add parent directory to path so we can import from server.py and forgequote/
BASE_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(BASE_DIR))

from server import app

__all__ = ['app']
