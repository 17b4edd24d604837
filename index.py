"""
Launches the WikiStack server with uvicorn.

Reads PORT and DEV (both required) and HOST from the environment or a
local .env file.
"""

import os
import subprocess
from typing import List
from dotenv import load_dotenv

load_dotenv()

TRUTHY_VALUES = {"1", "true", "yes", "on"}
FALSEY_VALUES = {"0", "false", "no", "off"}


def required_env(name: str) -> str:
    """Get required environment variable or raise error."""
    value = os.getenv(name)
    if value is None:
        raise RuntimeError(f"Environment variable '{name}' is required but not set.")
    return value


def parse_bool_env(name: str) -> bool:
    """Parse an environment variable into a strict boolean."""
    normalized = required_env(name).strip().lower()
    if normalized in TRUTHY_VALUES:
        return True
    if normalized in FALSEY_VALUES:
        return False
    raise RuntimeError(
        f"Environment variable '{name}' must be one of: true/false, 1/0, yes/no, on/off"
    )


def uvicorn_command(port: int, dev: bool, host: str) -> List[str]:
    command = ["uvicorn", "wikistack.server:app", "--host", host, "--port", str(port)]
    if dev:
        command.append("--reload")
    return command


def main() -> None:
    port = int(required_env("PORT"))
    dev = parse_bool_env("DEV")
    host = os.getenv("HOST", "0.0.0.0")
    # wikistack.config reads DEV itself, so hand it the normalized value
    os.environ["DEV"] = "true" if dev else "false"

    print(f"Starting WikiStack on {host}:{port} (dev={dev})")
    try:
        subprocess.run(uvicorn_command(port, dev, host), cwd=os.getcwd(), check=True)
    except KeyboardInterrupt:
        print("Server stopped by user.")


if __name__ == "__main__":
    main()
