"""
RUN SCRIPT - Start the chat relay server
========================================

PURPOSE:
  Single entry point to start the backend.

WHAT IT DOES:
  - Runs chat_relay.main:app with uvicorn on host 0.0.0.0 (accept connections from any interface).
  - The port comes from the PORT env var (default 8080), see config.py.

USAGE:
  python run.py

  Then POST to http://localhost:8080/api/chat or connect to ws://localhost:8080/ws.

NOTE:
  Before running, set HUGGINGFACE_API_KEY (and optionally MODEL_ID) in .env.
"""

import uvicorn

from config import PORT

# ------------------------------------------------------------------------------
# ENTRY POINT
# ------------------------------------------------------------------------------
if __name__ == "__main__":
    uvicorn.run(
        "chat_relay.main:app",   # String path to the FastAPI app instance (module:variable).
        host="0.0.0.0",          # Listen on all network interfaces so other devices can connect.
        port=PORT,
    )
