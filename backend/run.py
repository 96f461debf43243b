#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Creates the tables on startup (see ``app_lifespan``) against DATABASE_URL,
which defaults to a local SQLite file.
"""
import os
from pathlib import Path
import sys

import uvicorn

backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

if __name__ == "__main__":
    print("Starting Dialoom API at http://localhost:8000 (docs at /docs)")
    uvicorn.run("dialoom.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
