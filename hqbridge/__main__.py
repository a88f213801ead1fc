import os
from pathlib import Path

from dotenv import load_dotenv

# Variables already set in the environment win over the .env file.
_home = os.environ.get("HQBRIDGE_HOME", "").strip() or "~/.hqbridge"
load_dotenv(Path(_home).expanduser() / ".env", override=False)

from hqbridge.cli.commands import app  # noqa: E402

if __name__ == "__main__":
    app()
