# src/elearn_auth/cli.py

from __future__ import annotations

import argparse
import getpass
import json
import logging
import sys
from typing import Any, Sequence

from .config.env import settings_from_env
from .integrations.common.auth_factory import AuthDependencies, create_auth_dependencies


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="elearn-auth",
        description="Issue and inspect e-learning bearer tokens "
                    "(settings from ELEARN_* environment variables)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for diagnostics written to stderr.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_hash = sub.add_parser("hash-password", help="Hash a password with bcrypt.")
    p_hash.add_argument(
        "--password",
        help="Password to hash (prompted for when omitted).",
    )

    p_issue = sub.add_parser("issue-token", help="Sign a token for a user.")
    p_issue.add_argument("--subject", "-s", required=True, help="Username to put in 'sub'.")
    p_issue.add_argument(
        "--role",
        "-r",
        default="USER",
        help="USER, INSTRUCTOR or ADMIN (default: USER).",
    )

    p_validate = sub.add_parser("validate-token", help="Check a token's signature and expiry.")
    p_validate.add_argument("token")

    p_classify = sub.add_parser("classify", help="Tell whether a path is public.")
    p_classify.add_argument("path")
    p_classify.add_argument("--method", "-m", default="GET")

    return parser.parse_args(args=argv)


def _run(args: argparse.Namespace, auth: AuthDependencies) -> dict[str, Any]:
    if args.command == "hash-password":
        password = args.password if args.password is not None else getpass.getpass()
        return {"hash": auth.password_hasher.hash(password)}

    if args.command == "issue-token":
        issued = auth.issue(args.subject, args.role)
        return {
            "token": issued.token,
            "subject": issued.claims.subject,
            "role": issued.claims.role,
            "issued_at": issued.claims.issued_at,
            "expires_at": issued.claims.expires_at,
            "expires_in": issued.expires_in,
        }

    if args.command == "validate-token":
        result = auth.validate(args.token)
        return {
            "valid": result.valid,
            "subject": result.subject,
            "role": result.role.value if result.role else None,
            "reason": result.reason,
        }

    if args.command == "classify":
        rule = auth.classifier.match(args.path)
        return {
            "path": args.path,
            "method": args.method.upper(),
            "public": auth.is_public(args.path, args.method),
            "rule": str(rule) if rule else None,
        }

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), stream=sys.stderr)

    try:
        auth = create_auth_dependencies(settings_from_env())
        summary = _run(args, auth)
        json.dump({"ok": True, **summary}, sys.stdout, indent=2)
        sys.stdout.write("\n")
    except Exception as exc:  # noqa: BLE001
        json.dump({"ok": False, "error": str(exc)}, sys.stdout, indent=2)
        sys.stdout.write("\n")
        raise


if __name__ == "__main__":
    main()
