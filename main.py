#!/usr/bin/env python3
"""Entry point for labelwrap."""

from labelwrap.app.config import load_env_from_files

# Environment from .env-like files must be in place before config is read
load_env_from_files(override=False)

from labelwrap.app.main import run  # noqa: E402

if __name__ == "__main__":
    run()
