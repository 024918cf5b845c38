"""fitcoach command-line client.

Terminal front end for the coaching backend: login, onboarding with coach
matching, coach chat with action confirmation, plan status and connectivity
diagnostics. Every command talks to the backend through fitcoach.api.ApiClient.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypeVar

import httpx
import typer
from loguru import logger
from rich.console import Console
from rich.json import JSON
from rich.panel import Panel
from rich.table import Table

from fitcoach.api.client import ApiClient
from fitcoach.api.results import ApiFailure, ApiResult
from fitcoach.api.session_expiry import SessionExpiryHandler
from fitcoach.auth.service import AuthService
from fitcoach.coach.chat import CoachChatService, ConversationSession
from fitcoach.coaches.catalog import COACH_CATALOG, DEFAULT_COACH_ID, CoachId, get_coach_profile
from fitcoach.config.settings import settings
from fitcoach.core.errors import EncryptionError, QaLoginDisabledError, StorageError
from fitcoach.core.logger import setup_logger_from_settings
from fitcoach.diagnostics.report import DiagnosticsReport, DiagnosticsService
from fitcoach.onboarding.schemas import (
    EQUIPMENT_OPTIONS,
    LIMITATION_OPTIONS,
    ActivityLevel,
    CoachingStyle,
    FitnessLevel,
    Gender,
    HeightUnit,
    MotivationStyle,
    OnboardingAnswers,
    PrimaryGoal,
    SessionDuration,
    TrainingDays,
    WeightUnit,
    WorkoutType,
)
from fitcoach.onboarding.wizard import OnboardingStep, OnboardingWizard, Transition
from fitcoach.storage.secure_store import MemorySecureStore, SecureStore
from fitcoach.storage.session_store import SessionStore, get_session_store
from fitcoach.workouts.service import WorkoutService

# Initialize Rich console for output
console = Console()

# Initialize Typer app
app = typer.Typer(
    name="fitcoach",
    help="fitcoach - AI fitness coaching from the terminal",
    add_completion=False,
)

BACK_COMMAND = "back"

T = TypeVar("T")


@dataclass
class CliState:
    """Per-invocation state shared by all commands."""

    ephemeral: bool = False


state = CliState()


class RichAlertPresenter:
    def show_alert(self, title: str, message: str) -> None:
        console.print(Panel(message, title=f"[bold red]{title}[/bold red]", border_style="red"))


class RichNavigator:
    def navigate(self, route: str) -> None:
        if route == "login":
            console.print("[yellow]Run [bold]fitcoach login[/bold] to sign in again.[/yellow]")
        else:
            console.print(f"[dim]Next: {route}[/dim]")


def _make_secure_store(ephemeral: bool) -> SecureStore | None:
    """Volatile store for --ephemeral runs; None selects the encrypted file store."""
    return MemorySecureStore() if ephemeral else None


def _make_transport() -> httpx.AsyncBaseTransport | None:
    """HTTP transport for the API client (None means the httpx default)."""
    return None


def _session_store() -> SessionStore:
    store = _make_secure_store(state.ephemeral)
    if store is None:
        return get_session_store(settings)
    return SessionStore(store)


def _api_client(session_store: SessionStore) -> ApiClient:
    expiry = SessionExpiryHandler(session_store, alerts=RichAlertPresenter(), navigator=RichNavigator())
    return ApiClient(session_store, settings, session_expiry=expiry, transport=_make_transport())


def _run(coro_factory: Callable[[], Awaitable[T]]) -> T:
    """Run a command coroutine, turning storage failures into a clean exit."""
    try:
        return asyncio.run(coro_factory())
    except (StorageError, EncryptionError) as e:
        logger.error(f"[CLI] Secure storage failure: {e}")
        console.print(f"[red]Error:[/red] {e}", style="bold red")
        raise typer.Exit(1) from e


def _fail(result: ApiFailure) -> None:
    console.print(f"[red]Error:[/red] {result.error} [dim](status={result.status}, kind={result.kind.value})[/dim]")
    raise typer.Exit(1)


def _print_data(data: Any) -> None:
    if isinstance(data, (dict, list)):
        console.print(JSON.from_data(data))
    elif data is not None:
        console.print(str(data))


@app.callback()
def main(
    ephemeral: bool = typer.Option(False, "--ephemeral", help="Keep session data in memory only"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """fitcoach command-line client."""
    state.ephemeral = ephemeral
    setup_logger_from_settings(settings, debug=debug)


# Session commands


@app.command()
def login(
    email: str = typer.Option(..., "--email", "-e", prompt=True, help="Account email"),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True, help="Account password"),
) -> None:
    """Log in and store the access token."""

    async def _login() -> ApiResult:
        session_store = _session_store()
        async with _api_client(session_store) as client:
            return await AuthService(client, session_store, settings).login(email, password)

    result = _run(_login)
    if isinstance(result, ApiFailure):
        _fail(result)
    user = result.data.get("user") if isinstance(result.data, dict) else None
    name = user.get("name") if isinstance(user, dict) else None
    console.print(f"[green]Logged in{f' as {name}' if name else ''}.[/green]")


@app.command()
def logout() -> None:
    """Log out and clear the stored token."""

    async def _logout() -> None:
        session_store = _session_store()
        async with _api_client(session_store) as client:
            await AuthService(client, session_store, settings).logout()

    _run(_logout)
    console.print("[green]Logged out.[/green]")


@app.command()
def whoami() -> None:
    """Show the account for the stored token."""

    async def _whoami() -> ApiResult:
        session_store = _session_store()
        async with _api_client(session_store) as client:
            return await AuthService(client, session_store, settings).verify_auth()

    result = _run(_whoami)
    if isinstance(result, ApiFailure):
        _fail(result)
    data = result.data.get("user", result.data) if isinstance(result.data, dict) else result.data
    _print_data(data)


@app.command("set-api-url")
def set_api_url(url: str = typer.Argument(..., help="Backend base URL, e.g. https://api.example.com")) -> None:
    """Persist an API base URL override."""

    async def _set() -> None:
        await _session_store().set_api_url_override(url)

    try:
        _run(_set)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    console.print(f"[green]API URL override set to {url.strip()}[/green]")


@app.command("clear-api-url")
def clear_api_url() -> None:
    """Remove the API base URL override."""

    async def _clear() -> None:
        await _session_store().clear_api_url_override()

    _run(_clear)
    console.print("[green]API URL override cleared.[/green]")


@app.command("reset-password")
def reset_password(
    email: str | None = typer.Option(None, "--email", "-e", help="Request a reset email for this account"),
    token: str | None = typer.Option(None, "--token", "-t", help="Reset token from the email"),
) -> None:
    """Request a password reset email, or complete a reset with its token."""
    if not email and not token:
        console.print("[red]Error:[/red] Provide --email to request a reset or --token to complete one")
        raise typer.Exit(1)

    new_password = typer.prompt("New password", hide_input=True, confirmation_prompt=True) if token else ""

    async def _reset() -> ApiResult:
        session_store = _session_store()
        async with _api_client(session_store) as client:
            auth = AuthService(client, session_store, settings)
            if token:
                return await auth.reset_password(token, new_password)
            return await auth.request_password_reset(email or "")

    result = _run(_reset)
    if isinstance(result, ApiFailure):
        _fail(result)
    if token:
        console.print("[green]Password updated. You can now log in.[/green]")
    else:
        console.print("[green]If that account exists, a reset email is on its way.[/green]")


@app.command("qa-login")
def qa_login(profile: str = typer.Argument(..., help="Seeded QA profile id")) -> None:
    """Log in as a seeded QA profile (development only)."""

    async def _qa_login() -> ApiResult:
        session_store = _session_store()
        async with _api_client(session_store) as client:
            return await AuthService(client, session_store, settings).qa_login_as(profile)

    try:
        result = _run(_qa_login)
    except QaLoginDisabledError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from e
    if isinstance(result, ApiFailure):
        _fail(result)
    console.print(f"[green]Logged in as QA profile {profile}.[/green]")


# Diagnostics


def _render_report(report: DiagnosticsReport) -> None:
    base = report.api_base_url
    console.print(
        Panel(
            f"API base URL: [bold]{base.value or 'NOT CONFIGURED'}[/bold] [dim](source: {base.source})[/dim]\n"
            f"Auth token: {'[green]Present[/green]' if report.token_present else '[red]Missing[/red]'}",
            title="[bold blue]fitcoach diagnostics[/bold blue]",
            border_style="blue",
        )
    )

    if report.probes:
        probes = Table(title="Endpoint probes")
        probes.add_column("Endpoint")
        probes.add_column("Status")
        probes.add_column("Latency")
        probes.add_column("Error")
        for probe in report.probes:
            color = "green" if probe.ok else "red"
            status = str(probe.status) if probe.status else "ERR"
            probes.add_row(probe.endpoint, f"[{color}]{status}[/{color}]", f"{probe.latency_ms} ms", probe.error or "")
        console.print(probes)

    if report.recent_errors:
        errors = Table(title="API errors in this run")
        errors.add_column("Time")
        errors.add_column("Endpoint")
        errors.add_column("Status")
        errors.add_column("Body")
        for record in report.recent_errors:
            errors.add_row(record.timestamp, record.endpoint, str(record.status), record.body)
        console.print(errors)
    else:
        console.print("[dim]No API errors in this run[/dim]")


@app.command()
def diagnostics() -> None:
    """Show configuration, token state and endpoint health.

    The error log lives in memory, so it lists only failures from this run
    (usually the probes themselves), not from earlier commands.
    """

    async def _collect() -> DiagnosticsReport:
        session_store = _session_store()
        async with _api_client(session_store) as client:
            return await DiagnosticsService(client, session_store).collect()

    report = _run(_collect)
    _render_report(report)
    if not report.healthy:
        raise typer.Exit(1)


# Workouts


@app.command()
def plan(
    ensure: bool = typer.Option(False, "--ensure", help="Generate a plan if none exists"),
    summary: str | None = typer.Option(None, "--summary", help="Show the summary of one workout"),
    favorites: bool = typer.Option(False, "--favorites", help="Show favorite workouts"),
) -> None:
    """Show workout plan status."""

    async def _plan() -> ApiResult:
        session_store = _session_store()
        async with _api_client(session_store) as client:
            workouts = WorkoutService(client)
            if summary:
                return await workouts.workout_summary(summary)
            if favorites:
                return await workouts.favorites()
            if ensure:
                return await workouts.ensure_plan()
            return await workouts.plan_status()

    result = _run(_plan)
    if isinstance(result, ApiFailure):
        _fail(result)
    _print_data(result.data)


# Onboarding


def _ask(label: str, default: str | None = None) -> str:
    """Prompt for text. Blank answers are returned so the wizard can report them inline."""
    answer = typer.prompt(label, default=default if default is not None else "", show_default=default is not None)
    return str(answer).strip()


def _ask_choice(label: str, enum_cls: type[StrEnum]) -> str:
    """Prompt until the answer is one of the enum values (or the back command)."""
    values = [member.value for member in enum_cls]
    while True:
        answer = _ask(f"{label} [{'/'.join(values)}]")
        if answer == BACK_COMMAND or answer in values:
            return answer
        console.print(f"[yellow]Choose one of: {', '.join(values)}[/yellow]")


def _ask_many(label: str, options: tuple[str, ...]) -> list[str] | None:
    answer = _ask(f"{label} (comma separated: {', '.join(options)})")
    if answer == BACK_COMMAND:
        return None
    return [item.strip() for item in answer.split(",") if item.strip()]


def _ask_select_with_other(wizard: OnboardingWizard, label: str, enum_cls: type[StrEnum], field: str) -> bool:
    value = _ask_choice(label, enum_cls)
    if value == BACK_COMMAND:
        return False
    fields: dict[str, Any] = {field: value}
    if value == "other":
        fields[f"{field}_other"] = _ask("Please describe")
    wizard.update(**fields)
    return True


def _ask_body_metrics(wizard: OnboardingWizard) -> bool:
    dob = _ask("Date of birth (YYYY-MM-DD)")
    if dob == BACK_COMMAND:
        return False
    height_unit = _ask_choice("Height unit", HeightUnit)
    if height_unit == BACK_COMMAND:
        return False
    fields: dict[str, Any] = {"date_of_birth": dob, "height_unit": height_unit}
    if height_unit == HeightUnit.FT:
        fields["height_ft"] = _ask("Height (feet)")
        fields["height_in"] = _ask("Height (inches)", default="0")
    else:
        fields["height_cm"] = _ask("Height (cm)")
    weight_unit = _ask_choice("Weight unit", WeightUnit)
    if weight_unit == BACK_COMMAND:
        return False
    fields["weight_unit"] = weight_unit
    fields["weight"] = _ask(f"Weight ({weight_unit})")
    wizard.update(**fields)
    return True


def _prompt_step(wizard: OnboardingWizard) -> bool:
    """Collect input for the current step. Returns False when the user typed "back"."""
    step = wizard.step
    if step == OnboardingStep.WELCOME:
        console.print(
            Panel(
                "A few questions and we'll match you with the right coach.\nType [bold]back[/bold] at any prompt to go back.",
                title="[bold green]Welcome to fitcoach[/bold green]",
                border_style="green",
            )
        )
        return _ask("Press Enter to begin", default="") != BACK_COMMAND
    if step == OnboardingStep.NAME:
        name = _ask("What should we call you?")
        if name == BACK_COMMAND:
            return False
        wizard.update(display_name=name)
        return True
    if step == OnboardingStep.GENDER:
        return _ask_select_with_other(wizard, "Gender", Gender, "gender")
    if step == OnboardingStep.GOAL:
        return _ask_select_with_other(wizard, "Primary goal", PrimaryGoal, "primary_goal")
    if step == OnboardingStep.WORKOUT_TYPE:
        return _ask_select_with_other(wizard, "Preferred workout type", WorkoutType, "workout_type")
    if step == OnboardingStep.TRAINING_DAYS:
        value = _ask_choice("Training days per week", TrainingDays)
        if value == BACK_COMMAND:
            return False
        wizard.update(training_days_per_week=value)
        return True
    if step == OnboardingStep.WORKOUT_DURATION:
        value = _ask_choice("Session length (minutes)", SessionDuration)
        if value == BACK_COMMAND:
            return False
        wizard.update(session_duration=value)
        return True
    if step == OnboardingStep.FITNESS_LEVEL:
        value = _ask_choice("Fitness level", FitnessLevel)
        if value == BACK_COMMAND:
            return False
        wizard.update(fitness_level=value)
        return True
    if step == OnboardingStep.BODY_METRICS:
        return _ask_body_metrics(wizard)
    if step == OnboardingStep.EQUIPMENT:
        items = _ask_many("Available equipment", EQUIPMENT_OPTIONS)
        if items is None:
            return False
        fields: dict[str, Any] = {"equipment": items}
        if "other" in items:
            fields["equipment_other"] = _ask("Describe your other equipment")
        wizard.update(**fields)
        return True
    if step == OnboardingStep.LIMITATIONS:
        items = _ask_many("Injuries or limitations", LIMITATION_OPTIONS)
        if items is None:
            return False
        wizard.update(limitations=items)
        return True
    if step == OnboardingStep.ACTIVITY_LEVEL:
        value = _ask_choice("Daily activity level", ActivityLevel)
        if value == BACK_COMMAND:
            return False
        wizard.update(activity_level=value)
        return True
    if step == OnboardingStep.MOTIVATION_STYLE:
        return _ask_select_with_other(wizard, "What motivates you", MotivationStyle, "motivation_style")
    if step == OnboardingStep.COACHING_STYLE:
        return _ask_select_with_other(wizard, "Coaching style", CoachingStyle, "coaching_style")
    return True


@app.command()
def onboard(
    register: bool = typer.Option(False, "--register", help="Create an account when onboarding completes"),
) -> None:
    """Answer the onboarding questions and get matched with a coach."""

    async def _onboard() -> CoachId | None:
        session_store = _session_store()
        async with _api_client(session_store) as client:
            auth = AuthService(client, session_store, settings)

            async def _on_complete(answers: OnboardingAnswers, coach_id: CoachId) -> None:
                profile = get_coach_profile(coach_id)
                console.print(
                    Panel(
                        f"{profile.description}\n\n[italic]{profile.welcome_message}[/italic]",
                        title=f"[bold green]Your coach: {profile.name} ({profile.specialty})[/bold green]",
                        border_style="green",
                    )
                )
                if not register:
                    return
                email = _ask("Email")
                password = typer.prompt("Password", hide_input=True, confirmation_prompt=True)
                result = await auth.register_from_onboarding(answers, coach_id, email, password)
                if isinstance(result, ApiFailure):
                    console.print(f"[red]Registration failed:[/red] {result.error}")
                else:
                    console.print("[green]Account created. You're logged in.[/green]")

            def _on_exit() -> None:
                console.print("[yellow]Onboarding cancelled. Run [bold]fitcoach login[/bold] if you already have an account.[/yellow]")

            wizard = OnboardingWizard(on_complete=_on_complete, on_exit_to_login=_on_exit)
            while True:
                current, total = wizard.progress
                console.print(f"[dim]Step {current}/{total}: {wizard.step.value}[/dim]")
                if not _prompt_step(wizard):
                    if await wizard.back() == Transition.EXITED_TO_LOGIN:
                        return None
                    continue
                transition = await wizard.next()
                if transition == Transition.BLOCKED:
                    console.print(f"[yellow]{wizard.last_message}[/yellow]")
                elif transition == Transition.COMPLETED:
                    return wizard.matched_coach

    coach_id = _run(_onboard)
    if coach_id is None:
        raise typer.Exit(1)


# Coach chat


def _render_pending(session: ConversationSession) -> None:
    action = session.pending_action
    if action is None:
        return
    console.print(
        Panel(
            f"{action.describe()}\n\nType [bold]/confirm[/bold] to apply or [bold]/cancel[/bold] to skip.",
            title="[bold yellow]Coach suggests a change[/bold yellow]",
            border_style="yellow",
        )
    )


@app.command()
def chat(
    coach: str = typer.Option(DEFAULT_COACH_ID.value, "--coach", "-c", help="Coach id"),
    message: str | None = typer.Option(None, "--message", "-m", help="Send one message and exit"),
) -> None:
    """Chat with your AI coach. /confirm and /cancel answer proposed actions, /quit exits."""
    if coach not in COACH_CATALOG:
        console.print(f"[red]Error:[/red] Unknown coach {coach!r}. Choose one of: {', '.join(COACH_CATALOG)}")
        raise typer.Exit(1)
    profile = get_coach_profile(coach)

    async def _chat() -> None:
        session_store = _session_store()
        async with _api_client(session_store) as client:
            session = ConversationSession(
                CoachChatService(client),
                profile.id,
                history_limit=settings.chat_history_limit,
            )

            async def _send(text: str) -> None:
                reply = await session.send(text)
                if reply is not None:
                    style = "red" if reply.is_error else "cyan"
                    console.print(f"\n[bold {style}]{profile.name}:[/bold {style}] {reply.content}\n")
                _render_pending(session)

            if message is not None:
                await _send(message)
                return

            console.print(Panel(profile.welcome_message, title=f"[bold cyan]{profile.name}[/bold cyan]", border_style="cyan"))
            while True:
                text = typer.prompt("You", default="", show_default=False).strip()
                if text in {"", "/quit", "/exit"}:
                    console.print("[yellow]Exiting...[/yellow]")
                    return
                if text == "/confirm":
                    outcome = await session.confirm_pending_action()
                    console.print(outcome.content if outcome else "[dim]Nothing to confirm[/dim]")
                    continue
                if text == "/cancel":
                    outcome = session.cancel_pending_action()
                    console.print(outcome.content if outcome else "[dim]Nothing to cancel[/dim]")
                    continue
                await _send(text)

    _run(_chat)


if __name__ == "__main__":
    app()
