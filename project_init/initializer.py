"""project-init orchestrator and CLI entry point.

Runs the whole scaffolding flow in order:

1. Fetch the template registry (fatal on failure, before any prompt).
2. Ask for a category and template, descending until a source locator.
3. Ask for a project name that is valid and not taken in the cwd.
4. Download the template into ``<cwd>/<name>`` (fatal on failure).
5. Rewrite ``name`` in ``package.json`` / ``package-lock.json``.
6. Optionally create a fresh git repository.

Usage::

    project-init
    python -m project_init --registry-url https://example.com/repos.json --no-git
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path

from pydantic import BaseModel, ValidationError
from rich.logging import RichHandler
from rich.markup import escape

from project_init import __version__
from project_init.config import Config
from project_init.errors import ProjectInitError, UserAbort
from project_init.prompts import InterruptiblePrompt
from project_init.registry import TemplateRegistryClient
from project_init.scaffolder import (
    CUSTOM_URL_CHOICE,
    ManifestPatch,
    PatchStatus,
    TemplateFetcher,
    init_git_repository,
    patch_manifests,
    resolve_target_directory,
    select_template,
)
from project_init.utils import (
    console,
    create_progress,
    format_duration,
    print_error_panel,
    print_success,
    print_summary_table,
    print_warning,
)

logger = logging.getLogger(__name__)


class InitResult(BaseModel):
    """Outcome of a completed run."""

    locator: str
    project_name: str
    target_dir: Path
    manifests: list[ManifestPatch]
    git_initialized: bool = False


class ProjectInitializer:
    """Drives one interactive project-init run.

    Attributes:
        config: Run configuration.
        prompt: Prompt wrapper shared by every question.
        registry_client: Fetches the template registry.
        fetcher: Materialises the chosen template.
    """

    def __init__(
        self,
        config: Config,
        prompt: InterruptiblePrompt | None = None,
        cwd: Path | None = None,
        registry_client: TemplateRegistryClient | None = None,
        fetcher: TemplateFetcher | None = None,
    ) -> None:
        self.config = config
        self.prompt = prompt or InterruptiblePrompt(console)
        self.cwd = cwd
        self.registry_client = registry_client or TemplateRegistryClient(
            config.registry_url, timeout=config.request_timeout
        )
        self.fetcher = fetcher or TemplateFetcher(timeout=config.download_timeout)

    async def run(self) -> InitResult:
        """Execute the full flow.

        Raises:
            RegistryError: If the registry cannot be fetched or parsed.
            FetchFailed: If the template cannot be materialised.
            UserAbort: If the user cancels a prompt and confirms exit.
        """
        start = time.monotonic()
        console.print("[bold bright_cyan]Project Initializer[/bold bright_cyan]\n")

        with create_progress() as progress:
            progress.add_task("Fetching template list...", total=None)
            registry = await self.registry_client.fetch()

        custom = CUSTOM_URL_CHOICE if self.config.allow_custom_url else None
        locator = select_template(registry, self.prompt, custom_choice=custom)
        target = resolve_target_directory(
            self.prompt, cwd=self.cwd, default=self.config.default_project_name
        )

        console.print(f"Downloading template into [bold]{escape(str(target.path))}[/bold]...")
        with create_progress() as progress:
            progress.add_task(f"Downloading {escape(locator)}...", total=None)
            await self.fetcher.fetch(locator, target.path)

        manifests = await patch_manifests(
            target.path, target.name, files=self.config.manifest_files
        )
        for patch in manifests:
            if patch.status in (PatchStatus.MALFORMED, PatchStatus.FAILED):
                print_warning(f"Could not update {patch.path.name}: {patch.error}")

        git_initialized = False
        init_git = self.config.init_git
        if init_git is None:
            init_git = self.prompt.confirm("Initialize a fresh git repository?", default=False)
        if init_git:
            git_initialized = await init_git_repository(target.path)
            if git_initialized:
                console.print("Git repository initialized.")
            else:
                print_warning("Git initialization failed; the project files are still in place.")

        result = InitResult(
            locator=locator,
            project_name=target.name,
            target_dir=target.path,
            manifests=manifests,
            git_initialized=git_initialized,
        )
        self._print_summary(result, time.monotonic() - start)
        return result

    def _print_summary(self, result: InitResult, elapsed: float) -> None:
        rows = {
            "Template": result.locator,
            "Project": result.project_name,
            "Location": str(result.target_dir),
        }
        for patch in result.manifests:
            rows[patch.path.name] = patch.status.value
        rows["Git"] = "initialized" if result.git_initialized else "not initialized"
        rows["Duration"] = format_duration(elapsed)
        print_summary_table(rows, title="Project created")
        print_success(f"Done! Your project is ready in '{result.project_name}'")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="project-init",
        description="Create a new project from a remote template",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  project-init\n"
            "  project-init --default-name my-app --no-git\n"
            "  project-init --registry-url https://example.com/repos.json\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--registry-url",
        default=None,
        help="URL of the template registry JSON (env: PROJECT_INIT_REGISTRY_URL)",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=None,
        help="Registry request timeout in seconds (env: PROJECT_INIT_TIMEOUT)",
    )
    parser.add_argument(
        "--default-name",
        default=None,
        help="Project name suggested at the prompt (default: my-project)",
    )
    git = parser.add_mutually_exclusive_group()
    git.add_argument(
        "--git",
        dest="init_git",
        action="store_const",
        const=True,
        default=None,
        help="Initialize a git repository without asking",
    )
    git.add_argument(
        "--no-git",
        dest="init_git",
        action="store_const",
        const=False,
        help="Never initialize a git repository",
    )
    parser.add_argument(
        "--no-custom-url",
        action="store_true",
        help="Only offer templates from the registry",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logging",
    )
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=verbose)],
        force=True,
    )
    # httpx logs every request at INFO; keep it out of normal output.
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def build_config(args: argparse.Namespace) -> Config:
    """Merge CLI flags over the environment-derived configuration."""
    config = Config.from_env()
    overrides: dict[str, object] = {}
    if args.registry_url:
        overrides["registry_url"] = args.registry_url
    if args.timeout is not None:
        overrides["request_timeout"] = args.timeout
    if args.default_name is not None:
        overrides["default_project_name"] = args.default_name
    if args.init_git is not None:
        overrides["init_git"] = args.init_git
    if args.no_custom_url:
        overrides["allow_custom_url"] = False
    return Config.model_validate({**config.model_dump(), **overrides})


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``project-init`` / ``python -m project_init``."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = build_config(args)
    except (ValidationError, ValueError) as exc:
        print_error_panel(str(exc), title="Invalid configuration")
        sys.exit(2)

    initializer = ProjectInitializer(config)
    try:
        asyncio.run(initializer.run())
    except UserAbort:
        console.print("[yellow]Exiting.[/yellow]")
        sys.exit(0)
    except ProjectInitError as exc:
        logger.debug("Fatal error", exc_info=True)
        print_error_panel(exc.message, title=exc.code)
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
