"""
CLI integration for code generation functionality.

Provides the ``generate`` subcommand of the command-line interface.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.syntax import Syntax
from rich.table import Table

from .core.config import ConfigError, GeneratorConfig, load_config
from .core.generator import GenerationResult, generate_code
from .core.interface import ComponentInterface
from .registry import (
    RegistryError,
    get_generator,
    get_language_info,
    is_language_supported,
    list_all_language_info,
    list_supported_languages,
)
from ..logging_config import get_logger
from ..utils import InterfaceLoaderError, load_interface

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Initialize rich console
console = Console()


def create_generate_subparser(subparsers) -> argparse.ArgumentParser:
    """
    Create the ``generate`` subcommand parser.

    For use with: bindgen-java generate [options] INTERFACE

    Args:
        subparsers: Subparser group from main parser

    Returns:
        Configured subparser for the generate command
    """
    parser = subparsers.add_parser(
        "generate",
        help="Generate bindings from interface metadata",
        description="Generate Java bindings from component interface metadata",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bindgen-java generate arithmetic.json --out-dir src/main/java
  bindgen-java generate --package-name com.example.math arithmetic.json
  bindgen-java generate --config uniffi.toml --stdin < arithmetic.json
  bindgen-java generate --list-languages
        """.strip(),
    )

    # Input options (mutually exclusive)
    input_group = parser.add_mutually_exclusive_group(required=False)
    input_group.add_argument(
        "source", nargs="?", help="Interface metadata file or http(s) URL"
    )
    input_group.add_argument(
        "--stdin", action="store_true", help="Read interface metadata from standard input"
    )

    parser.add_argument(
        "--language",
        "-l",
        default="java",
        help="Target language for code generation (default: java)",
    )
    parser.add_argument(
        "--out-dir",
        "-o",
        metavar="DIR",
        help="Directory to write generated sources to (default: stdout)",
    )
    parser.add_argument(
        "--config", metavar="FILE", help="Configuration file (JSON or uniffi.toml)"
    )

    java_group = parser.add_argument_group("Java options")
    java_group.add_argument("--package-name", help="Java package of the generated code")
    java_group.add_argument("--cdylib-name", help="Name of the native library to load")
    java_group.add_argument(
        "--immutable-records",
        action="store_true",
        default=None,
        help="Generate records as Java record types",
    )
    java_group.add_argument(
        "--android",
        action="store_true",
        default=None,
        help="Target Android (JNA cleaner instead of java.lang.ref.Cleaner)",
    )
    java_group.add_argument(
        "--quarkus",
        action="store_true",
        default=None,
        help="Annotate generated types for Quarkus native images",
    )
    java_group.add_argument(
        "--no-comments",
        action="store_true",
        help="Don't copy interface documentation into generated code",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show generation result metadata",
    )

    info_group = parser.add_argument_group("information")
    info_group.add_argument(
        "--list-languages",
        action="store_true",
        help="List supported languages and exit",
    )
    info_group.add_argument(
        "--language-info",
        metavar="LANGUAGE",
        help="Show detailed info about a language and exit",
    )

    parser.set_defaults(func=handle_generate_command)
    return parser


def handle_generate_command(args: argparse.Namespace) -> int:
    """
    Handle the generate subcommand.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    try:
        if args.list_languages:
            return _list_languages()

        if args.language_info:
            return _show_language_info(args.language_info)

        if not (args.source or args.stdin):
            console.print("[red]✗[/red] Input source required (file, URL, or --stdin)")
            return 1

        if not _validate_language(args.language):
            return 1

        ci = _get_interface(args)
        config = _build_config(args)

        return _generate_and_output(ci, args.language, config, args)

    except CLIError as e:
        logger.debug("CLI error", exc_info=True)
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1


def _list_languages() -> int:
    """List supported languages with details."""
    language_info = list_all_language_info()

    if not language_info:
        console.print("[yellow]⚠️ No code generators available[/yellow]")
        return 0

    table = Table(
        title="📋 Supported Languages", box=box.ROUNDED, title_style="bold cyan"
    )

    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for lang_name, info in sorted(language_info.items()):
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(f"🔧 {lang_name}", info["file_extension"], info["class"], aliases)

    console.print()
    console.print(table)
    console.print()

    console.print(
        Panel(
            "[bold]Usage:[/bold] bindgen-java generate [dim]interface.json[/dim] --out-dir [cyan]DIR[/cyan]\n"
            "[bold]Info:[/bold] bindgen-java generate --language-info [cyan]LANGUAGE[/cyan]",
            title="💡 Quick Start",
            border_style="blue",
        )
    )
    return 0


def _show_language_info(language: str) -> int:
    """Show detailed information about a specific language."""
    if not _validate_language(language, silent=True):
        console.print(f"[red]✗ Language '{language}' is not supported[/red]")
        console.print("[dim]Use --list-languages to see available options[/dim]")
        return 1

    try:
        info = get_language_info(language)
    except RegistryError as e:
        console.print(f"[red]✗ Error getting language info:[/red] {e}")
        return 1

    info_text = f"""[bold]Language:[/bold] {info['name']}
[bold]File Extension:[/bold] {info['file_extension']}
[bold]Generator Class:[/bold] {info['class']}
[bold]Module:[/bold] {info['module']}"""

    if info["aliases"]:
        info_text += f"\n[bold]Aliases:[/bold] {', '.join(info['aliases'])}"

    console.print()
    console.print(
        Panel(
            info_text,
            title=f"🔧 {info['name'].title()} Generator",
            border_style="green",
        )
    )

    config_table = Table(
        title="⚙️  Default Configuration",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    config_table.add_column("Setting", style="bold")
    config_table.add_column("Value", style="green")

    config = info["config"]
    config_table.add_row("Package Name", config.package_name)
    config_table.add_row("Native Library", config.cdylib_name)
    config_table.add_row("Immutable Records", str(config.generate_immutable_records))
    config_table.add_row("Android", str(config.android))
    config_table.add_row("Quarkus", str(config.quarkus))
    config_table.add_row("Add Comments", str(config.add_comments))

    console.print()
    console.print(config_table)

    examples_text = f"""Generate into a source tree:
[cyan]bindgen-java generate -l {language} -o src/main/java arithmetic.json[/cyan]

Custom package name:
[cyan]bindgen-java generate -l {language} --package-name com.example arithmetic.json[/cyan]

Settings from uniffi.toml:
[cyan]bindgen-java generate -l {language} --config uniffi.toml arithmetic.json[/cyan]"""

    console.print()
    console.print(Panel(examples_text, title="💡 Usage Examples", border_style="blue"))
    return 0


def _validate_language(language: str, silent: bool = False) -> bool:
    """Validate that a language is supported."""
    if not is_language_supported(language):
        if not silent:
            supported = list_supported_languages()
            console.print(f"[red]✗ Unsupported language '{language}'[/red]")
            console.print(f"[dim]Supported languages: {', '.join(supported)}[/dim]")
        return False
    return True


def _get_interface(args: argparse.Namespace) -> ComponentInterface:
    """Load the component interface from the selected source."""
    try:
        if args.stdin:
            return ComponentInterface.from_dict(json.load(sys.stdin))
        return load_interface(args.source)[1]
    except json.JSONDecodeError as e:
        raise CLIError(f"Invalid JSON input: {e}") from e
    except (InterfaceLoaderError, FileNotFoundError, ValueError) as e:
        raise CLIError(f"Failed to load interface: {e}") from e


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Build configuration from a config file plus CLI overrides."""
    overrides: Dict[str, Any] = {
        "package_name": args.package_name,
        "cdylib_name": args.cdylib_name,
        "generate_immutable_records": args.immutable_records,
        "android": args.android,
        "quarkus": args.quarkus,
    }
    if args.no_comments:
        overrides["add_comments"] = False

    try:
        return load_config(
            args.language.lower(), custom_config=overrides, config_file=args.config
        )
    except ConfigError as e:
        raise CLIError(f"Configuration error: {e}") from e


def _write_files(result: GenerationResult, out_dir: Path) -> None:
    for relative_path, code in sorted(result.files.items()):
        path = out_dir / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(code, encoding="utf-8")
        logger.debug("Wrote %s", path)


def _print_files(result: GenerationResult) -> None:
    for relative_path, code in sorted(result.files.items()):
        console.print(Panel(f"[bold]{relative_path}[/bold]", border_style="green"))
        console.print(Syntax(code, "java", theme="monokai"))


def _generate_and_output(
    ci: ComponentInterface,
    language: str,
    config: GeneratorConfig,
    args: argparse.Namespace,
) -> int:
    """Generate code and handle output with rich formatting."""
    try:
        generator = get_generator(language, config)
    except RegistryError as e:
        console.print(f"[red]✗[/red] {e}")
        return 1

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        gen_task = progress.add_task(
            f"[green]Generating {language} bindings for {ci.namespace}...", total=None
        )
        result = generate_code(generator, ci)
        progress.remove_task(gen_task)

    if not result.success:
        console.print(f"[red]✗ Code generation failed:[/red] {result.error_message}")
        return 1

    if args.out_dir:
        out_dir = Path(args.out_dir)
        try:
            _write_files(result, out_dir)
        except OSError as e:
            console.print(f"[red]✗ Failed to write to {out_dir}:[/red] {e}")
            return 1
        console.print(
            f"[green]✓[/green] Wrote {len(result.files)} {language} files to [cyan]{out_dir}[/cyan]"
        )
    else:
        _print_files(result)

    if args.verbose and result.metadata:
        metadata_table = Table(
            title="📊 Generation Metadata",
            box=box.SIMPLE,
            show_header=True,
            header_style="bold cyan",
        )
        metadata_table.add_column("Property", style="bold")
        metadata_table.add_column("Value", style="green")

        for key, value in result.metadata.items():
            if key == "config":
                continue
            metadata_table.add_row(key.replace("_", " ").title(), str(value))

        console.print()
        console.print(metadata_table)

    if result.warnings:
        console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]•[/yellow] {warning}")
        console.print()

    return 0
