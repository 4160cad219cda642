#!/usr/bin/env python
"""
Run the Holder Pricing API with uvicorn.

Usage:
    python scripts/run_api.py

HOLDER_PRICING_HOST / HOLDER_PRICING_PORT override the bind address.
"""
import subprocess
import sys
import os
from pathlib import Path


def main():
    project_root = Path(__file__).parent.parent
    os.chdir(project_root)

    # Ensure src is in python path
    env = os.environ.copy()
    src_path = str(project_root / "src")
    env["PYTHONPATH"] = os.pathsep.join(p for p in (src_path, env.get("PYTHONPATH")) if p)

    host = env.get("HOLDER_PRICING_HOST", "127.0.0.1")
    port = env.get("HOLDER_PRICING_PORT", "8000")

    print(f"Starting Holder Pricing API on {host}:{port}...")
    try:
        subprocess.run([
            sys.executable, "-m", "uvicorn",
            "holder_pricing.api.main:app",
            "--host", host,
            "--port", port,
            "--reload"
        ], env=env)
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
