"""Interactive CLI application."""
import logging
from datetime import date, timedelta

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from study_coach.calendar_view import (
    build_calendar, checkpoint_date, tasks_due_on, tasks_on_day,
)
from study_coach.config import (
    API_KEY_SETTING, MODEL_SETTING, THEME_COLOR_SETTING, THEME_COLORS, THEME_MODE_SETTING,
    AppConfig, default_db_path, load_config,
)
from study_coach.dashboard import (
    DAY_STATUS_STYLES, PHASE_COLORS, TASK_TYPE_COLORS, get_learning_label, get_study_stats,
    progress_bar, project_summary, theme_style,
)
from study_coach.db import init_db
from study_coach.errors import (
    CollaboratorError, ConfigurationError, StudyCoachError, ValidationError,
)
from study_coach.gemini import GeminiClient
from study_coach.log import configure_logging
from study_coach.models import (
    CreateProjectInput, Difficulty, DIFFICULTY_LABELS, Importance, IMPORTANCE_LABELS,
    LEARNING_STATE_LABELS, PHASE_LABELS, Project, Schedule, TASK_TYPE_LABELS, TaskType,
    WEEKDAY_LABELS,
)
from study_coach.projects import ProjectStore, resize_chapters
from study_coach.schedule import set_daily, set_routine, toggle_weekday, update_weekday
from study_coach.store import set_setting

logger = logging.getLogger(__name__)

console = Console()

WEEKDAY_SHORT = ("Sa", "Su", "Mo", "Tu", "We", "Th", "Fr")
TASK_TYPE_CHOICES = [t.value.lower() for t in TaskType]


def parse_day_input(text: str, today: date | None = None) -> date:
    """Accept YYYY-MM-DD, 'today', or a signed day offset like '+3' / '-2'."""
    today = today or date.today()
    text = text.strip().lower()
    if text in ("", "today"):
        return today
    if text[0] in "+-" and text[1:].isdigit():
        return today + timedelta(days=int(text))
    try:
        return date.fromisoformat(text)
    except ValueError as e:
        raise ValidationError(f"Not a date: {text!r}") from e


def show_welcome(config: AppConfig):
    console.print(Panel(
        "[bold]Study Coach[/bold]\n[dim]AI-planned study projects on a calendar[/dim]",
        title="Welcome", border_style=theme_style(config.theme_color, config.dark_mode),
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("projects", "Projects dashboard"),
        ("today", "Today's tasks"),
        ("create", "New study project"),
        ("open", "Project detail + calendar"),
        ("settings", "API key, model, theme"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def choose_project(store: ProjectStore) -> Project | None:
    projects = store.projects
    if not projects:
        console.print("[yellow]No projects yet. Use 'create' first.[/yellow]")
        return None
    for i, p in enumerate(projects, 1):
        console.print(f"  [cyan]{i}[/cyan]) {p.name}")
    idx = IntPrompt.ask("Project", choices=[str(i) for i in range(1, len(projects) + 1)])
    return projects[idx - 1]


def render_dashboard(store: ProjectStore, config: AppConfig):
    projects = store.projects
    if not projects:
        console.print(Panel("No projects to show. Try [cyan]create[/cyan].", border_style="dim"))
        return
    table = Table(title="Study Projects", border_style=theme_style(config.theme_color, config.dark_mode))
    table.add_column("Project", style="cyan")
    table.add_column("Difficulty")
    table.add_column("Learning state")
    table.add_column("Progress")
    table.add_column("Chapters", justify="right")
    for p in projects:
        s = project_summary(p)
        color = s["color"]
        table.add_row(
            p.name,
            DIFFICULTY_LABELS[p.difficulty],
            s["label"],
            f"[{color}]{progress_bar(s['progress'], 10)}[/{color}] {s['progress']}%",
            str(s["chapters"]),
        )
    console.print(table)
    stats = get_study_stats(projects)
    console.print(f"\n  Projects: [bold]{stats['projects']}[/bold]  |  "
                  f"Tasks: [bold]{stats['tasks_completed']}/{stats['tasks_total']}[/bold]  |  "
                  f"Avg progress: [bold]{stats['avg_progress']}%[/bold]  |  "
                  f"Mastered: [bold]{stats['mastered']}[/bold]")


def render_today(store: ProjectStore, today: date | None = None, dark_mode: bool = False):
    today = today or date.today()
    due = tasks_due_on(store.projects, today)
    console.print(Panel(f"[bold]{today.isoformat()}[/bold]", title="Today's plan"))
    if not due:
        console.print("[green]All done! Nothing left for today.[/green]")
        return
    for i, (project, task) in enumerate(due, 1):
        mark = "[green]✔[/green]" if task.is_completed else "[dim]○[/dim]"
        desc = f"[strike dim]{task.description}[/strike dim]" if task.is_completed else task.description
        console.print(f"  [cyan]{i}[/cyan]) {mark} [{theme_style(project.color, dark_mode)}]{project.name}[/] "
                      f"[{TASK_TYPE_COLORS[task.type]}]{TASK_TYPE_LABELS[task.type]}[/] {desc}")
    choice = Prompt.ask("Toggle task # (Enter to go back)", default="")
    if choice.isdigit() and 1 <= int(choice) <= len(due):
        project, task = due[int(choice) - 1]
        change = store.toggle_task(project.id, task.id)
        console.print(f"[green]{project.name}: {change.progress}% ({PHASE_LABELS[change.phase]})[/green]")


def render_calendar(project: Project, today: date | None = None):
    today = today or date.today()
    days = build_calendar(project, today)
    table = Table(title=f"{project.name} calendar", show_lines=True)
    for name in WEEKDAY_SHORT:
        table.add_column(name, justify="center")
    # Pad the first row so columns line up with the Persian week
    cells = [""] * ((days[0].day.weekday() + 2) % 7)
    for cd in days:
        style = DAY_STATUS_STYLES[cd.status]
        label = f"[{style}]{cd.day.day}[/{style}]"
        if cd.is_today:
            label = f"[reverse]{label}[/reverse]"
        dots = "".join(f"[{TASK_TYPE_COLORS[t.type]}]●[/]" for t in cd.tasks[:3])
        if len(cd.tasks) > 3:
            dots += "+"
        cells.append(f"{label}\n{dots}")
    while len(cells) % 7:
        cells.append("")
    for i in range(0, len(cells), 7):
        table.add_row(*cells[i:i + 7])
    console.print(table)


def render_project(project: Project, dark_mode: bool = False):
    s = project_summary(project)
    color = PHASE_COLORS[project.current_phase]
    console.print(Panel(
        f"[bold]{project.name}[/bold]\n"
        f"{project.chapter_count} chapters | {project.page_count} pages | "
        f"importance {IMPORTANCE_LABELS[project.importance]}\n"
        f"[{color}]{progress_bar(project.progress)}[/{color}] {project.progress}% "
        f"[{color}]{PHASE_LABELS[project.current_phase]}[/{color}]\n"
        f"Checkpoints: {s['checkpoints_completed']}/{s['checkpoints_total']}",
        border_style=theme_style(project.color, dark_mode),
    ))
    analysis = project.last_analysis
    if analysis:
        body = (f"{analysis.user_feedback}\n\n"
                f"State: [bold]{LEARNING_STATE_LABELS[analysis.learning_state]}[/bold]  |  "
                f"Depth: [bold]{analysis.estimated_dou:.0f}%[/bold]  |  "
                f"Next: [bold]{TASK_TYPE_LABELS[analysis.next_action]}[/bold]")
        if analysis.illusion_of_competence.detected:
            body += f"\n[red]Illusion of competence:[/red] {analysis.illusion_of_competence.reason or ''}"
            if analysis.illusion_of_competence.corrective_action:
                body += f"\n[green]Fix:[/green] {analysis.illusion_of_competence.corrective_action}"
        if analysis.scheduling_recommendation:
            body += f"\n[dim]{analysis.scheduling_recommendation}[/dim]"
        console.print(Panel(body, title="Coach analysis", border_style="magenta"))


def cmd_day(store: ProjectStore, project: Project):
    day = parse_day_input(Prompt.ask("Day (YYYY-MM-DD, today, +N)", default="today"))
    tasks = tasks_on_day(project, day)
    if not tasks:
        console.print("[dim]Nothing planned for this day.[/dim]")
    for i, t in enumerate(tasks, 1):
        mark = "✔" if t.is_completed else "○"
        console.print(f"  [cyan]{i}[/cyan]) {mark} [{TASK_TYPE_COLORS[t.type]}]{TASK_TYPE_LABELS[t.type]}[/] {t.description}")
    action = Prompt.ask("Action", choices=["add", "set", "edit", "delete", "toggle", "back"], default="back")
    if action == "back":
        return
    if action == "set":
        kind = Prompt.ask("Task type (none clears the day)", choices=TASK_TYPE_CHOICES + ["none"])
        store.replace_task_for_date(project.id, day, None if kind == "none" else TaskType(kind.upper()))
        return
    if action == "add":
        kind = Prompt.ask("Task type", choices=TASK_TYPE_CHOICES, default="study")
        store.add_task(project.id, day, TaskType(kind.upper()), Prompt.ask("Description"))
        return
    if not tasks:
        console.print("[yellow]No task to change.[/yellow]")
        return
    idx = IntPrompt.ask("Task #", choices=[str(i) for i in range(1, len(tasks) + 1)])
    task = tasks[idx - 1]
    if action == "toggle":
        store.toggle_task(project.id, task.id)
    elif action == "delete":
        store.delete_task(project.id, task.id)
    elif action == "edit":
        description = Prompt.ask("Description", default=task.description)
        kind = Prompt.ask("Task type", choices=TASK_TYPE_CHOICES, default=task.type.value.lower())
        store.edit_task(project.id, task.id, description=description, task_type=TaskType(kind.upper()))


def cmd_checkpoints(store: ProjectStore, project: Project):
    if not project.checkpoints:
        console.print("[dim]This plan has no checkpoints.[/dim]")
        return
    for i, cp in enumerate(project.checkpoints, 1):
        mark = "[green]✔[/green]" if cp.is_completed else "[dim]○[/dim]"
        console.print(f"  [cyan]{i}[/cyan]) {mark} {checkpoint_date(project, cp).isoformat()} {cp.purpose}")
        for q in cp.questions:
            console.print(f"       • {q.text}")
            for c in q.choices:
                console.print(f"         [dim]{c.key})[/dim] {c.label}")
    choice = Prompt.ask("Mark checkpoint # done (Enter to go back)", default="")
    if choice.isdigit() and 1 <= int(choice) <= len(project.checkpoints):
        store.complete_checkpoint(project.id, project.checkpoints[int(choice) - 1].id)


def cmd_analyze(store: ProjectStore, project: Project, dark_mode: bool = False):
    with console.status(f"Analyzing {project.name}..."):
        try:
            store.analyze_project(project.id)
        except (ConfigurationError, CollaboratorError) as e:
            console.print(f"[red]Analysis failed: {e}[/red]")
            return
    render_project(store.get_project(project.id), dark_mode)


def cmd_open(store: ProjectStore, dark_mode: bool = False):
    project = choose_project(store)
    if project is None:
        return
    while True:
        project = store.get_project(project.id)
        render_project(project, dark_mode)
        render_calendar(project)
        action = Prompt.ask(
            "Project",
            choices=["day", "checkpoints", "analyze", "delete", "back"],
            default="back",
        )
        if action == "back":
            return
        try:
            if action == "day":
                cmd_day(store, project)
            elif action == "checkpoints":
                cmd_checkpoints(store, project)
            elif action == "analyze":
                cmd_analyze(store, project, dark_mode)
            elif action == "delete":
                if Confirm.ask(f"Delete {project.name} and all its tasks?", default=False):
                    store.delete_project(project.id)
                    return
        except ValidationError as e:
            console.print(f"[red]{e}[/red]")


def prompt_schedule() -> Schedule:
    schedule = Schedule()
    daily = Prompt.ask("Study every day or on specific weekdays?", choices=["daily", "custom"], default="daily")
    set_daily(schedule, daily == "daily")
    if schedule.is_daily:
        start = Prompt.ask("Start time", default="09:00")
        end = Prompt.ask("End time", default="10:00")
        set_routine(schedule, start, end)
        return schedule
    for idx, name in enumerate(WEEKDAY_LABELS):
        if Confirm.ask(f"Study on {name}?", default=False):
            toggle_weekday(schedule, idx)
            start = Prompt.ask("  Start time", default="09:00")
            end = Prompt.ask("  End time", default="10:00")
            update_weekday(schedule, idx, start, end)
    return schedule


def cmd_create(store: ProjectStore):
    console.print("\n[bold]New Study Project[/bold]")
    name = Prompt.ask("Book or course title")
    page_count = IntPrompt.ask("Total pages", default=100)
    count, chapters = resize_chapters([], IntPrompt.ask("Number of chapters (1-50)", default=5))
    for i in range(count):
        chapters[i] = Prompt.ask(f"  Chapter {i + 1} title", default="")
    difficulty = Prompt.ask("Difficulty", choices=[d.value.lower() for d in Difficulty], default="medium")
    importance = Prompt.ask("Importance", choices=[i.value.lower() for i in Importance], default="medium")
    project_input = CreateProjectInput(
        name=name,
        page_count=page_count,
        chapter_count=count,
        chapters=chapters,
        difficulty=Difficulty(difficulty.upper()),
        importance=Importance(importance.upper()),
        schedule=prompt_schedule(),
    )
    with console.status("Designing your plan..."):
        try:
            project = store.create_project(project_input)
        except (ConfigurationError, CollaboratorError) as e:
            console.print(f"[red]Could not create the plan:[/red] {e}\n"
                          "[dim]Check that your API key is set under 'settings'.[/dim]")
            return
    console.print(f"[green]Created {project.name} with {len(project.tasks)} tasks "
                  f"and {len(project.checkpoints)} checkpoints.[/green]")


def cmd_settings(config: AppConfig) -> AppConfig:
    console.print(f"\nModel: [cyan]{config.model}[/cyan]  |  "
                  f"API key: {'[green]set[/green]' if config.api_key else '[red]missing[/red]'}  |  "
                  f"Theme: [{theme_style(config.theme_color, config.dark_mode)}]{config.theme_color}[/]"
                  f"{' (dark)' if config.dark_mode else ''}")
    key = Prompt.ask("Gemini API key (Enter to keep)", default="", password=True)
    if key:
        set_setting(config.db_path, API_KEY_SETTING, key.strip())
    model = Prompt.ask("Model", default=config.model)
    set_setting(config.db_path, MODEL_SETTING, model)
    color = Prompt.ask("Theme color", choices=list(THEME_COLORS), default=config.theme_color)
    set_setting(config.db_path, THEME_COLOR_SETTING, color)
    dark = Confirm.ask("Dark mode?", default=config.dark_mode)
    set_setting(config.db_path, THEME_MODE_SETTING, "dark" if dark else "light")
    return load_config(config.db_path)


def build_store(config: AppConfig) -> ProjectStore:
    client = GeminiClient.from_config(config)
    return ProjectStore(config.db_path, planner=client, analyzer=client, color=config.theme_color)


def main():
    db_path = default_db_path()
    init_db(db_path)
    config = load_config(db_path)
    configure_logging(config.log_level, console)
    store = build_store(config)

    show_welcome(config)

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="projects").strip().lower()
        try:
            if choice == "projects":
                render_dashboard(store, config)
            elif choice == "today":
                render_today(store, dark_mode=config.dark_mode)
            elif choice == "create":
                cmd_create(store)
            elif choice == "open":
                cmd_open(store, config.dark_mode)
            elif choice == "settings":
                config = cmd_settings(config)
                store = build_store(config)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Keep learning![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except StudyCoachError as e:
            logger.debug("Command %s failed", choice, exc_info=True)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
