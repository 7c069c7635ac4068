"""Global pytest configuration."""

import os

# Keep tests independent of a developer's .env / provider key
os.environ.setdefault("HISTORY_BACKEND", "memory")
os.environ["OPENAI_API_KEY"] = ""
