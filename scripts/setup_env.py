"""Bootstrap a local .env file for the notification API."""

from __future__ import annotations

import argparse
import os
import secrets
import sys
from pathlib import Path

# Keys that are filled with fresh random values when missing or placeholders
SECRET_KEYS = ("SESSION_SECRET", "PUSH_SEND_SECRET")


def _generate_secret(bytes_len: int = 32) -> str:
    return secrets.token_urlsafe(bytes_len)


def _is_placeholder(value: str) -> bool:
    return "CHANGE_ME" in value or value.strip() == ""


def _parse_kv_line(line: str) -> tuple[str, str] | None:
    if "=" not in line or line.lstrip().startswith("#"):
        return None
    key, _, value = line.partition("=")
    return key.strip(), value.strip()


def build_values(
    template_lines: list[str],
    *,
    db_host: str,
    db_port: str,
    firebase_credentials: str | None,
    force_rotate: bool,
) -> dict[str, str]:
    existing: dict[str, str] = {}
    for line in template_lines:
        parsed = _parse_kv_line(line)
        if parsed:
            key, value = parsed
            existing[key] = value

    postgres_user = existing.get("POSTGRES_USER", "postgres")
    postgres_db = existing.get("POSTGRES_DB", "clubhub")
    postgres_password = existing.get("POSTGRES_PASSWORD", "")
    if force_rotate or _is_placeholder(postgres_password):
        postgres_password = _generate_secret(24)

    values = {
        "POSTGRES_USER": postgres_user,
        "POSTGRES_PASSWORD": postgres_password,
        "POSTGRES_DB": postgres_db,
        "DATABASE_URL": (
            f"postgresql+asyncpg://{postgres_user}:{postgres_password}"
            f"@{db_host}:{db_port}/{postgres_db}"
        ),
    }

    for key in SECRET_KEYS:
        current = existing.get(key, "")
        values[key] = _generate_secret() if force_rotate or _is_placeholder(current) else current

    if firebase_credentials:
        values["FIREBASE_CREDENTIALS_PATH"] = str(Path(firebase_credentials).resolve())

    return values


def write_env(template_lines: list[str], values: dict[str, str]) -> str:
    rendered: list[str] = []
    written: set[str] = set()
    for line in template_lines:
        parsed = _parse_kv_line(line)
        if parsed and parsed[0] in values:
            rendered.append(f"{parsed[0]}={values[parsed[0]]}\n")
            written.add(parsed[0])
        else:
            rendered.append(line)
    # Keys the template does not mention go at the end
    for key, value in values.items():
        if key not in written:
            rendered.append(f"{key}={value}\n")
    return "".join(rendered)


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate a .env file from .env.example")
    parser.add_argument(
        "--path",
        default=None,
        help="Output path for .env (default: repo root/.env)",
    )
    parser.add_argument(
        "--db-host",
        default="localhost",
        help="Database host for DATABASE_URL (default: localhost)",
    )
    parser.add_argument(
        "--db-port",
        default="5432",
        help="Database port for DATABASE_URL (default: 5432)",
    )
    parser.add_argument(
        "--firebase-credentials",
        default=None,
        help="Path to a Firebase service account JSON file",
    )
    parser.add_argument(
        "--rotate",
        action="store_true",
        help="Regenerate secrets even if placeholders are already replaced",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite existing .env if present",
    )

    args = parser.parse_args()

    repo_root = Path(__file__).resolve().parents[1]
    template_path = repo_root / ".env.example"
    if not template_path.exists():
        print(f"Template not found: {template_path}", file=sys.stderr)
        return 1

    env_path = Path(args.path) if args.path else repo_root / ".env"
    if env_path.exists() and not args.force:
        print(
            f"{env_path} already exists. Use --force to overwrite.",
            file=sys.stderr,
        )
        return 1

    template_lines = template_path.read_text(encoding="utf-8").splitlines(keepends=True)
    values = build_values(
        template_lines,
        db_host=args.db_host,
        db_port=args.db_port,
        firebase_credentials=args.firebase_credentials,
        force_rotate=args.rotate,
    )
    env_path.write_text(write_env(template_lines, values), encoding="utf-8")

    if os.name != "nt":
        try:
            env_path.chmod(0o600)
        except OSError:
            pass

    print(f"Wrote {env_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
