import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.tree import Tree

from .indexer import ProjectIndexer, build_dependency_graph, graph_statistics
from .models import IndexFilters
from .tracer import CodeTracer, extract_keywords
from .utils.config import Config, load_config
from .utils.logging import configure_logging
from .utils.progress_tracker import ProgressTracker

console = Console()

# Pygments lexer names for the language tags produced by the classifier
LEXERS = {
    "typescript": "typescript",
    "javascript": "javascript",
    "python": "python",
    "java": "java",
    "go": "go",
    "rust": "rust",
    "cpp": "cpp",
    "c": "c",
    "csharp": "csharp",
    "ruby": "ruby",
    "php": "php",
    "swift": "swift",
    "kotlin": "kotlin",
}


@click.command()
@click.argument('question', required=False)
@click.option('--path', '-p', default='.', help='Path to the project to analyze')
@click.option('--include', '-i', multiple=True, help='Glob pattern to include (repeatable)')
@click.option('--exclude', '-e', multiple=True, help='Glob pattern to exclude (repeatable)')
@click.option('--max-steps', '-n', type=int, default=None, help='Maximum walkthrough steps to display')
@click.option('--json', 'as_json', is_flag=True, help='Print the index and steps as JSON')
@click.option('--show-index', is_flag=True, help='Show the project index summary')
@click.option('--debug', '-d', is_flag=True, help='Show debug information')
@click.option('--config', 'show_config_only', is_flag=True, help='Show current configuration and exit')
def main(question, path, include, exclude, max_steps, as_json, show_index, debug, show_config_only):
    """Code Walkthrough - trace how a question maps onto your codebase."""

    # Validate path
    code_path = Path(path).resolve()
    if not code_path.exists():
        console.print(f"[red]Error: Path '{escape(path)}' does not exist[/red]")
        sys.exit(1)

    if not code_path.is_dir():
        console.print(f"[red]Error: Path '{escape(path)}' is not a directory[/red]")
        sys.exit(1)

    try:
        config = load_config(code_path)
    except (ValidationError, ValueError) as e:
        console.print(f"[red]Error: Invalid configuration: {escape(str(e))}[/red]")
        sys.exit(1)

    if show_config_only:
        show_config(config, code_path)
        return

    debug = debug or config.ui.show_debug_info
    configure_logging(verbose=debug)
    console.no_color = not config.ui.use_colors

    if not question and not show_index:
        console.print("[red]Error: Provide a QUESTION or use --show-index[/red]")
        sys.exit(1)

    filters = IndexFilters(
        include=tuple(include) if include else tuple(config.index.include),
        exclude=tuple(exclude) if exclude else tuple(config.index.exclude),
    )

    tracker = ProgressTracker(show_details=not as_json)
    indexer = ProjectIndexer(config)

    tracker.start_step("Indexing project", path=str(code_path))
    project = indexer.index_project(str(code_path), filters, on_progress=tracker)
    tracker.complete_current_step(files=len(project.files), entry_points=len(project.entry_points))

    steps = []
    if question:
        tracker.start_step("Tracing execution path", keywords=", ".join(extract_keywords(question)))
        steps = CodeTracer(config).trace_execution_path(question, project, on_progress=tracker)
        tracker.complete_current_step(steps=len(steps))

    if as_json:
        payload = {
            "project": project.to_dict(),
            "steps": [step.to_dict() for step in steps],
        }
        click.echo(json.dumps(payload, indent=2))
        return

    if debug:
        tracker.show_summary()

    console.print(Panel.fit(
        f"[bold blue]Code Walkthrough[/bold blue]\n"
        f"Analyzing: [green]{project.root}[/green]\n"
        f"Files: [yellow]{len(project.files)}[/yellow]  Size: [yellow]{project.total_size:,}[/yellow] bytes",
        border_style="blue"
    ))

    if show_index:
        show_project_index(project)

    if question:
        limit = max_steps or config.ui.max_display_steps
        show_walkthrough(question, project, steps, limit, config)


def show_project_index(project):
    """Display the index summary and import graph statistics."""
    table = Table(title=f"Project index: {project.name}")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Files", str(len(project.files)))
    table.add_row("Total size", f"{project.total_size:,} bytes")
    table.add_row("Languages", ", ".join(sorted(project.languages)) or "-")
    table.add_row("Frameworks", ", ".join(project.frameworks) or "-")
    table.add_row("Entry points", "\n".join(project.entry_points) or "-")

    stats = graph_statistics(build_dependency_graph(project))
    table.add_row("Files with imports", str(len(project.import_graph)))
    table.add_row("Resolved import edges", str(stats["total_edges"]))
    table.add_row("Import cycles", str(len(stats["import_cycles"])))
    if stats["most_imported"]:
        table.add_row(
            "Most imported",
            "\n".join(f"{path} ({count})" for path, count in stats["most_imported"])
        )

    console.print(table)


def show_walkthrough(question, project, steps, limit, config: Config):
    """Display walkthrough steps as highlighted code panels."""
    console.print(f"\n[bold]Question:[/bold] {escape(question)}")

    if not steps:
        console.print("[yellow]No relevant code found for this question.[/yellow]")
        return

    shown = steps[:limit]
    for step in shown:
        f = project.get_file(step.file)
        lexer = LEXERS.get(f.language, "text") if f and f.language else "text"
        syntax = Syntax(
            step.code,
            lexer,
            line_numbers=config.ui.show_line_numbers,
            start_line=step.start_line,
        )
        title = f"[{step.index}] {step.file}:{step.start_line}-{step.end_line}"
        body = Table.grid(padding=(0, 1))
        body.add_row(syntax)
        body.add_row(f"[bold]{escape(step.explanation)}[/bold]")
        body.add_row(f"[dim]{escape(step.why_relevant)}[/dim]")
        if step.links_to:
            body.add_row(f"[cyan]Links to:[/cyan] {escape(', '.join(step.links_to))}")
        console.print(Panel(body, title=title, border_style="green"))

    if len(steps) > len(shown):
        console.print(f"[dim]... {len(steps) - len(shown)} more steps not shown (use --max-steps)[/dim]")


def show_config(config: Config, project_dir: Path):
    """Display current configuration."""
    console.print("\n[bold blue]Current Configuration[/bold blue]\n")

    tree = Tree("[bold]Configuration[/bold]")

    index_branch = tree.add("Indexing")
    index_branch.add(f"Max File Size: [green]{config.index.max_file_size:,}[/green] bytes")
    index_branch.add(f"Max Content Size: [green]{config.index.max_content_size:,}[/green] bytes")
    index_branch.add(f"Preview Lines: [cyan]{config.index.preview_lines}[/cyan]")
    index_branch.add(f"Include: [yellow]{', '.join(config.index.include)}[/yellow]")
    index_branch.add(f"Exclude: [yellow]{', '.join(config.index.exclude)}[/yellow]")
    index_branch.add(f"Respect .gitignore: [magenta]{config.index.respect_gitignore}[/magenta]")
    index_branch.add(f"Max Workers: [cyan]{config.index.max_workers}[/cyan]")

    trace_branch = tree.add("Tracing")
    trace_branch.add(f"Context Lines: [cyan]{config.trace.context_before}[/cyan] before, "
                     f"[cyan]{config.trace.context_after}[/cyan] after")
    trace_branch.add(f"Fallback File Limit: [cyan]{config.trace.fallback_file_limit}[/cyan]")
    trace_branch.add(f"Follow Imports: [magenta]{config.trace.follow_imports}[/magenta]")

    ui_branch = tree.add("UI Settings")
    ui_branch.add(f"Show Debug Info: [magenta]{config.ui.show_debug_info}[/magenta]")
    ui_branch.add(f"Max Display Steps: [cyan]{config.ui.max_display_steps}[/cyan]")
    ui_branch.add(f"Use Colors: [magenta]{config.ui.use_colors}[/magenta]")
    ui_branch.add(f"Show Line Numbers: [magenta]{config.ui.show_line_numbers}[/magenta]")

    console.print(tree)

    console.print(f"\n[dim]Project config: {project_dir / '.code-walkthrough.yaml'}[/dim]")
    console.print("[dim]Environment variables take precedence over the project config[/dim]")


if __name__ == "__main__":
    main()
