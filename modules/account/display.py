"""Rich terminal rendering of the account flows."""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from modules.auth.flow import SignInFlow
from modules.profiles.flow import ProfileSyncFlow
from shared.models import FlowStatus, Notice, NoticeVariant

console = Console()

FIELD_LABELS = {
    "username": "Username",
    "website": "Website",
    "avatar_url": "Avatar URL",
}


def render_notice(notice: Notice) -> None:
    """Print a notice as a one-line toast."""
    style = "red" if notice.variant == NoticeVariant.DESTRUCTIVE else "green"
    line = Text(notice.title, style=f"bold {style}")
    if notice.description:
        line.append(f"  {notice.description}", style="dim")
    console.print(line)


def render_sign_in(flow: SignInFlow) -> None:
    """Show the sign-in card."""
    body = Text("Sign in to your account using your email.\n", style="dim")
    body.append("We'll send you a magic link for password-free sign in.", style="dim")
    console.print(Panel(body, title="Welcome Back", border_style="blue"))

    if flow.link_sent:
        console.print(
            Panel(
                "We've sent you a magic link to sign in to your account.",
                title="Check your email",
                border_style="green",
            )
        )
    if flow.state.status == FlowStatus.PENDING:
        console.print("[dim]Sending magic link...[/dim]")
    for message in flow.field_errors.values():
        console.print(f"[red]{escape(message)}[/red]")


def render_profile(flow: ProfileSyncFlow) -> None:
    """Show the profile card, or its loading/error placeholder."""
    if flow.error:
        console.print(Panel(escape(flow.error), border_style="red", title="Error"))

    if flow.load_state.status in (FlowStatus.IDLE, FlowStatus.PENDING):
        console.print("[dim]Loading profile...[/dim]")
        return
    if not flow.form_ready:
        return

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()
    for name, label in FIELD_LABELS.items():
        value = escape(flow.fields.get(name, "")) or "[dim]-[/dim]"
        table.add_row(label, value)
        if name in flow.field_errors:
            table.add_row("", f"[red]{escape(flow.field_errors[name])}[/red]")
    table.add_row("Email", f"[dim]{escape(flow.email)}[/dim]")

    title = f"[bold]({escape(flow.initials)})[/bold] Profile Settings"
    if flow.submit_state.status == FlowStatus.PENDING:
        title += " [dim]Saving...[/dim]"
    console.print(Panel(table, title=title, border_style="blue"))
