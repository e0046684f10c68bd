"""
Marketplace client session tool.

Drives the session and theme stores against the configured storage file the
same way the client does: restore on startup, then login, profile update,
logout or theme changes.
"""

import argparse
import asyncio
import json
import sys
from typing import Any, Optional

from rich.console import Console

from shared.config import get_settings
from shared.exceptions import ClientError
from shared.logging_config import configure_logging
from modules.identity import IdentityRecord, merge_identity
from modules.session import LoginResponse, RestoreStatus, SessionService
from modules.theme import InvalidThemeError, ThemeService

console = Console()


def print_identity(identity: Optional[IdentityRecord]) -> None:
    """Print the signed-in identity, or a logged-out notice."""
    if identity is None:
        console.print("[yellow]Not logged in[/yellow]")
        return
    console.print(f"[bold]{identity.username}[/bold] (id: {identity.id})")
    if identity.email:
        console.print(f"[dim]Email: {identity.email}[/dim]")
    if identity.profile_picture:
        console.print(f"[dim]Picture: {identity.profile_picture}[/dim]")


def print_error(error: ClientError) -> None:
    """Print a client error with its code."""
    info = error.to_dict()
    console.print(f"[red]Error ({info['error']}):[/red] {info['message']}")


def parse_json_object(value: Optional[str], option: str = "--user-json") -> Optional[dict[str, Any]]:
    """Parse a JSON object argument, exiting on malformed input."""
    if value is None:
        return None
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error:[/red] {option} is not valid JSON: {e}")
        sys.exit(1)
    if not isinstance(parsed, dict):
        console.print(f"[red]Error:[/red] {option} must be a JSON object")
        sys.exit(1)
    return parsed


async def start_session() -> SessionService:
    """Create the session store and restore it, as the client does on startup."""
    session = SessionService()
    result = await session.restore()
    if result.status == RestoreStatus.CORRUPT:
        console.print("[yellow]Stored session was corrupt and has been cleared[/yellow]")
    return session


async def run_session_command(args: argparse.Namespace) -> int:
    session = await start_session()

    if args.command == "restore":
        console.print(f"Session: [bold]{session.state.value}[/bold]")
        print_identity(session.identity)

    elif args.command == "whoami":
        print_identity(session.identity)

    elif args.command == "login":
        if args.response_json is not None:
            response = LoginResponse.from_payload(
                parse_json_object(args.response_json, "--response-json"),
                email=args.email,
            )
        else:
            response = LoginResponse(
                token=args.token,
                raw_user=parse_json_object(args.user_json),
                email=args.email,
            )
        try:
            identity = session.login_with_response(response)
        except ClientError as e:
            print_error(e)
            return 1
        if identity is None:
            console.print("[red]Error:[/red] Session could not be saved")
            return 1
        console.print("[green]Logged in[/green]")
        print_identity(identity)

    elif args.command == "update":
        if session.identity is None:
            console.print("[red]Error:[/red] Not logged in")
            return 1
        changes = parse_json_object(args.user_json) or {}
        updated = merge_identity(session.identity, changes, get_settings().asset_base_url)
        if session.update(updated) is None:
            console.print("[red]Error:[/red] Profile could not be saved")
            return 1
        console.print("[green]Profile updated[/green]")
        print_identity(updated)

    elif args.command == "logout":
        session.logout()
        console.print("[green]Logged out[/green]")

    return 0


def run_theme_command(args: argparse.Namespace) -> int:
    themes = ThemeService()

    if args.action == "get":
        console.print(themes.get().value)
    elif args.action == "toggle":
        console.print(f"Theme: [bold]{themes.toggle().value}[/bold]")
    elif args.action == "set":
        try:
            theme = themes.set(args.value)
        except InvalidThemeError as e:
            print_error(e)
            return 1
        console.print(f"Theme: [bold]{theme.value}[/bold]")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Inspect and drive the marketplace client's persisted session and theme"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("restore", help="Restore the stored session and show its state")
    subparsers.add_parser("whoami", help="Show the signed-in user")

    login = subparsers.add_parser("login", help="Store a session from a login result")
    source = login.add_mutually_exclusive_group(required=True)
    source.add_argument("--token", help="Bearer token from the login call")
    source.add_argument(
        "--response-json",
        help="Raw login response body (token or accessToken, user or rawUser), as JSON",
    )
    login.add_argument("--user-json", help="User record returned by the backend, as JSON")
    login.add_argument("--email", help="Email used to sign in (for the fallback identity)")

    update = subparsers.add_parser("update", help="Apply a profile-edit response")
    update.add_argument("--user-json", required=True, help="Updated user fields, as JSON")

    subparsers.add_parser("logout", help="Clear the stored session")

    theme = subparsers.add_parser("theme", help="Get, set or toggle the display theme")
    theme.add_argument("action", nargs="?", choices=["get", "set", "toggle"], default="get")
    theme.add_argument("value", nargs="?", help="light or dark (for set)")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging()

    if args.command == "theme":
        if args.action == "set" and not args.value:
            parser.error("theme set requires a value (light or dark)")
        return run_theme_command(args)

    return asyncio.run(run_session_command(args))


if __name__ == "__main__":
    sys.exit(main())
