"""
Tether - passwordless sign-in and profile editing in the terminal.

Requests a magic link for an email address, completes sign-in from the
link the user receives, then lets the user view and edit their profile
(username, website, avatar) stored in Supabase.
"""

import argparse
import asyncio
import sys
from typing import Optional

from rich.markup import escape
from rich.prompt import Prompt

from modules.account.controller import AccountController
from modules.account.display import console, render_notice, render_profile, render_sign_in
from modules.auth.service import SupabaseIdentityProvider
from modules.profiles.flow import ProfileSyncFlow
from modules.profiles.repository import ProfileRepository
from shared.config import get_settings
from shared.database import get_supabase_client
from shared.exceptions import TetherError
from shared.logging_config import configure_logging
from shared.models import FlowStatus

QUIT = "q"


async def ask(prompt: str, default: str = "") -> str:
    """Prompt without blocking the event loop."""
    return await asyncio.to_thread(Prompt.ask, prompt, console=console, default=default)


async def sign_in_step(controller: AccountController) -> bool:
    """Run one round of the sign-in screen. Returns False to quit."""
    flow = controller.sign_in
    render_sign_in(flow)

    if flow.link_sent:
        link = (await ask("Paste the link from your email (Enter to change address, q to quit)")).strip()
        if link.lower() == QUIT:
            return False
        if not link:
            flow.reset()
            return True
        try:
            await controller.complete_sign_in(link)
        except TetherError as e:
            console.print(f"[red]{escape(e.message)}[/red]")
        return True

    email = (await ask("Email (q to quit)", default=flow.email)).strip()
    if email.lower() == QUIT:
        return False
    await flow.submit(email)
    return True


async def edit_profile(flow: ProfileSyncFlow) -> None:
    values = {
        "username": await ask("Username", default=flow.fields["username"]),
        "website": await ask("Website", default=flow.fields["website"]),
        "avatar_url": await ask("Avatar URL", default=flow.fields["avatar_url"]),
    }
    with console.status("Saving..."):
        await flow.submit(values)
    if flow.field_errors:
        for name, message in flow.field_errors.items():
            console.print(f"[red]{name}: {escape(message)}[/red]")


async def profile_step(controller: AccountController, flow: ProfileSyncFlow) -> bool:
    """Run one round of the profile screen. Returns False to quit."""
    with console.status("Loading profile..."):
        await controller.wait_for_load()
    render_profile(flow)

    if flow.load_state.status == FlowStatus.FAILED:
        choices = ["s", QUIT]
        if flow.can_retry_load:
            choices.insert(0, "r")
        choice = await asyncio.to_thread(
            Prompt.ask, "[r]etry, [s]ign out, [q]uit", console=console, choices=choices
        )
        if choice == "r":
            await flow.retry_load()
            return True
    else:
        choice = await asyncio.to_thread(
            Prompt.ask, "[e]dit, [s]ign out, [q]uit", console=console, choices=["e", "s", QUIT]
        )
        if choice == "e":
            await edit_profile(flow)
            return True

    if choice == "s":
        await flow.sign_out()
        return True
    return False


async def run(redirect_url: Optional[str] = None) -> int:
    """Wire the Supabase collaborators into the controller and drive the screens."""
    try:
        client = await get_supabase_client()
    except RuntimeError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1

    identity = SupabaseIdentityProvider(client, email_redirect_url=redirect_url)
    controller = AccountController(identity, ProfileRepository(client))
    controller.notices.subscribe(render_notice)

    await controller.start()
    try:
        while True:
            profile = controller.profile
            if profile is None:
                keep_going = await sign_in_step(controller)
            else:
                keep_going = await profile_step(controller, profile)
            if not keep_going:
                break
    finally:
        await controller.close()

    console.print("\n[bold green]Done![/bold green]")
    return 0


def cli() -> None:
    """Console script entry point."""
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Passwordless sign-in and profile editing backed by Supabase"
    )
    parser.add_argument(
        "--redirect-url",
        type=str,
        help="URL the magic link redirects to (default: EMAIL_REDIRECT_URL)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=settings.log_level,
        help=f"Log level (default: {settings.log_level})",
    )
    args = parser.parse_args()

    configure_logging("DEBUG" if settings.debug else args.log_level)
    try:
        sys.exit(asyncio.run(run(args.redirect_url)))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    cli()
