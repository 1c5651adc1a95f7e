"""
pageforge CLI - Command-line interface for page-object generation.
"""

import dataclasses
import logging
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.syntax import Syntax
from rich.table import Table
from selenium import __version__ as selenium_version
from selenium.common.exceptions import WebDriverException

from pageforge import __version__
from pageforge.core.config import GeneratorConfig
from pageforge.core.driver_factory import browser_session
from pageforge.core.errors import PageForgeError

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    # Selenium and urllib3 are chatty at DEBUG
    logging.getLogger("selenium").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def _resolve_config(ctx: click.Context, **overrides) -> GeneratorConfig:
    """File values (if ``--config``) with command-line options on top."""
    config: GeneratorConfig = ctx.obj["config"]
    changes = {key: value for key, value in overrides.items() if value is not None}
    try:
        return dataclasses.replace(config, **changes)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def _open_browser(config: GeneratorConfig, headless: Optional[bool] = None):
    """Browser session built from the configuration."""
    return browser_session(
        headless=config.headless if headless is None else headless,
        profile_path=config.profile_path,
        window_size=config.window_size,
    )


def _load_cookies(parser, url: str, cookies: str) -> None:
    """Open ``url`` so the cookie domain matches, add the cookies and reload."""
    parser.driver.get(url)
    result = parser.load_cookies(cookies)
    console.print(f"[dim]Loaded {result.loaded} cookies ({len(result.errors)} skipped)[/dim]")
    parser.driver.refresh()


def _print_artifact(artifact) -> None:
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Field", style="green")
    table.add_column("Role", style="dim")
    table.add_column("Locator", style="yellow", max_width=50)
    table.add_column("Operations", justify="right")

    for spec in artifact.elements:
        table.add_row(spec.field_name, spec.role.value, str(spec.locator), str(len(spec.operations)))
    console.print(table)


@click.group()
@click.version_option(version=__version__, prog_name="pageforge")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="JSON configuration file")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, config_path, verbose):
    """pageforge - Page-object generation from live pages

    Scan a page or a whole site and generate page-object classes.
    """
    _configure_logging(verbose)
    try:
        config = GeneratorConfig.from_file(config_path) if config_path else GeneratorConfig()
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--config") from e
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command()
@click.argument("url")
@click.option("--output-dir", default=None, help="Root directory for generated packages")
@click.option("--print", "print_only", is_flag=True, help="Print the module instead of writing it")
@click.option("--timeout", default=None, type=float, help="Seconds to wait for elements")
@click.option("--headless/--headed", default=None, help="Run browser in headless mode")
@click.option("--profile", "profile_path", default=None, type=click.Path(file_okay=False),
              help="Chrome profile directory to reuse")
@click.option("--cookies", default=None, type=click.Path(exists=True, dir_okay=False),
              help="Cookie file to load before parsing")
@click.pass_context
def generate(ctx, url, output_dir, print_only, timeout, headless, cookies, profile_path):
    """
    Generate the page object for a single page.

    \b
    Examples:

        pageforge generate "https://example.com/login"

        pageforge generate "https://example.com/account" --cookies cookies.txt --print
    """
    config = _resolve_config(ctx, output_dir=output_dir, timeout=timeout, headless=headless,
                             profile_path=profile_path)
    from pageforge.core.page_parser import PageParser

    try:
        with _open_browser(config) as driver:
            parser = PageParser(driver, config)
            if cookies:
                _load_cookies(parser, url, cookies)
            else:
                driver.get(url)

            artifact = parser.generate_pom()
            if print_only:
                from pageforge.layers.generate import render_python
                console.print(Syntax(render_python(artifact), "python"))
                return

            path = parser.write_artifact(artifact, config.output_dir)
    except PageForgeError as e:
        console.print(f"[red]❌ Error: {e}[/red]")
        ctx.exit(1)

    _print_artifact(artifact)
    console.print(f"\n[bold green]✅ {artifact.class_name}[/bold green] written to {path}")


@cli.command()
@click.argument("url")
@click.option("--max-depth", default=None, type=int, help="Crawl depth bound")
@click.option("--output-dir", default=None, help="Root directory for generated packages")
@click.option("--timeout", default=None, type=float, help="Seconds to wait for each page")
@click.option("--headless/--headed", default=None, help="Run browser in headless mode")
@click.option("--profile", "profile_path", default=None, type=click.Path(file_okay=False),
              help="Chrome profile directory to reuse")
@click.option("--cookies", default=None, type=click.Path(exists=True, dir_okay=False),
              help="Cookie file to load before crawling")
@click.pass_context
def crawl(ctx, url, max_depth, output_dir, timeout, headless, cookies, profile_path):
    """
    Crawl a site breadth-first and generate a page object per page.

    Example:

        pageforge crawl "https://example.com" --max-depth 3 --output-dir ./pages
    """
    config = _resolve_config(ctx, max_depth=max_depth, output_dir=output_dir,
                             timeout=timeout, headless=headless, profile_path=profile_path)
    from pageforge.core.page_parser import PageParser

    console.print(Panel.fit(
        f"[bold blue]pageforge crawl[/bold blue]\n"
        f"[dim]{url} (max depth {config.max_depth})[/dim]",
        border_style="blue"
    ))

    try:
        with _open_browser(config) as driver:
            parser = PageParser(driver, config)
            if cookies:
                _load_cookies(parser, url, cookies)

            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
            ) as progress:
                progress.add_task("Crawling...", total=None)
                files = parser.save_all_to_files(config.output_dir, url, config.max_depth)
    except PageForgeError as e:
        console.print(f"[red]❌ Error: {e}[/red]")
        ctx.exit(1)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Generated module", style="green")
    for path in files:
        table.add_row(path)
    console.print(table)
    console.print(f"\n[bold green]✅ {len(files)} page objects written to {config.output_dir}[/bold green]")


@cli.command()
@click.argument("url")
@click.argument("popup_id")
@click.option("--output-dir", default=None, help="Root directory for generated packages")
@click.option("--headless/--headed", default=None, help="Run browser in headless mode")
@click.pass_context
def popup(ctx, url, popup_id, output_dir, headless):
    """
    Generate a page object for a popup container.

    Example:

        pageforge popup "https://example.com" login-modal
    """
    config = _resolve_config(ctx, output_dir=output_dir, headless=headless)
    from pageforge.core.page_parser import PageParser

    try:
        with _open_browser(config) as driver:
            driver.get(url)
            parser = PageParser(driver, config)
            artifact = parser.handle_popup(popup_id)
            path = parser.write_artifact(artifact, config.output_dir)
    except PageForgeError as e:
        console.print(f"[red]❌ Error: {e}[/red]")
        ctx.exit(1)

    _print_artifact(artifact)
    console.print(f"\n[bold green]✅ {artifact.class_name}[/bold green] written to {path}")


@cli.command()
@click.argument("url")
@click.argument("file", type=click.Path(dir_okay=False))
@click.option("--profile", "profile_path", default=None, type=click.Path(file_okay=False),
              help="Chrome profile directory to reuse")
@click.pass_context
def save_cookies(ctx, url, file, profile_path):
    """
    Open a browser, wait for you to log in, then save its cookies.

    Example:

        pageforge save-cookies "https://example.com/login" cookies.txt
    """
    config = _resolve_config(ctx, profile_path=profile_path)
    from pageforge.core.page_parser import PageParser

    try:
        with _open_browser(config, headless=False) as driver:
            driver.get(url)
            click.prompt("Log in in the browser window, then press Enter",
                         default="", show_default=False)
            count = PageParser(driver, config).save_cookies(file)
    except PageForgeError as e:
        console.print(f"[red]❌ Error: {e}[/red]")
        ctx.exit(1)

    console.print(f"[bold green]✅ Saved {count} cookies to {file}[/bold green]")


@cli.command()
@click.pass_context
def doctor(ctx):
    """
    Check that pageforge can drive a browser.

    Starts a headless Chrome with the configured profile and window size,
    loads a blank page and reports the browser and driver versions.
    """
    config = _resolve_config(ctx)
    console.print(Panel.fit(
        f"[bold cyan]🩺 pageforge Doctor[/bold cyan]\n"
        f"[dim]System Health Check[/dim]",
        border_style="cyan"
    ))
    console.print()

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Component", style="blue")
    table.add_column("Version", style="dim")
    table.add_column("Status", justify="center")
    table.add_row("selenium", selenium_version, "[green]✅ Installed[/green]")

    error = None
    try:
        with _open_browser(config, headless=True) as driver:
            driver.get("about:blank")
            capabilities = driver.capabilities or {}
    except WebDriverException as e:
        error = e.msg or str(e)

    if error is None:
        browser = f"{capabilities.get('browserName', 'chrome')} {capabilities.get('browserVersion', '?')}"
        chromedriver = (capabilities.get("chrome") or {}).get("chromedriverVersion", "?").split(" ")[0]
        table.add_row("browser", browser, "[green]✅ Started[/green]")
        table.add_row("chromedriver", chromedriver, "[green]✅ Connected[/green]")
    else:
        table.add_row("browser", "-", "[red]❌ Failed[/red]")

    console.print(table)
    console.print()

    if error is not None:
        console.print(f"[red]❌ Could not start Chrome: {error}[/red]")
        console.print("[dim]Check that Chrome is installed; Selenium Manager fetches a matching driver.[/dim]")
        ctx.exit(1)

    console.print("[bold green]✅ Browser session works! pageforge is ready.[/bold green]")


@cli.command()
def version():
    """Show version information."""
    console.print(f"pageforge v{__version__}")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
