"""
Command-line interface for al-xml-doc.

Provides commands for checking AL procedure documentation and generating
XML documentation snippets.
"""

import json
import sys
import traceback

import click

from .analyzer import DocumentationAnalyzer
from .config import ConfigManager, DocumentationCheckConfiguration
from .documents import FileDocument
from .extractor import SourceExtractor
from .generator import generate_full_procedure_doc, generate_object_doc
from .models import Severity
from .publisher import DiagnosticCollection, DiagnosticPublisher
from .scanner import Scanner
from ..utils.logger_setup import LoggerManager
from ..utils.text_utils import resolve_placeholders, to_external

SEVERITY_SYMBOLS = {
    Severity.ERROR: "❌",
    Severity.WARNING: "⚠️",
    Severity.INFORMATION: "ℹ️",
    Severity.HINT: "💡",
}


@click.group()
@click.version_option(version="0.1.0")
@click.option('--verbose', is_flag=True, help='Log debug messages to the console')
def cli(verbose):
    """AL XML Documentation - check and generate AL procedure documentation."""
    if verbose:
        LoggerManager.setup_logging(level="DEBUG", console=True, force=True)
    else:
        LoggerManager.setup_logging()


@cli.command()
@click.option('--overwrite', is_flag=True, help='Overwrite existing configuration')
def init(overwrite):
    """Initialize configuration in current directory."""
    config_manager = ConfigManager()

    if config_manager.init_config(overwrite=overwrite):
        click.echo("✓ Configuration initialized successfully")
        click.echo(f"  Config file: {config_manager.config_file}")
        click.echo("\nNext steps:")
        click.echo("  1. Edit config file to set severity and overrides")
        click.echo("  2. Run 'al-xml-doc check' to check procedure documentation")
    else:
        click.echo("Configuration already exists. Use --overwrite to replace it.")


@cli.command()
@click.argument('paths', nargs=-1, type=click.Path())
@click.option('--format', 'output_format', type=click.Choice(['text', 'json']), default='text',
              help='Output format')
def check(paths, output_format):
    """Check procedure documentation of AL files."""
    try:
        config_manager = ConfigManager()
        config = config_manager.load()

        errors = config_manager.validate(config)
        if errors:
            click.echo("❌ Configuration errors:")
            for error in errors:
                click.echo(f"  - {error}")
            sys.exit(1)

        collection = DiagnosticCollection()
        analyzer = DocumentationAnalyzer(
            DocumentationCheckConfiguration(config),
            SourceExtractor(),
            DiagnosticPublisher(collection)
        )
        scanner = Scanner(config, analyzer)

        if output_format == 'text':
            click.echo("🔍 Checking AL procedure documentation...")
        scan_result = scanner.scan(list(paths) if paths else None)

        if output_format == 'json':
            click.echo(json.dumps({
                uri: [diagnostic.to_dict() for diagnostic in diagnostics]
                for uri, diagnostics in collection.items()
            }, indent=2))
        else:
            for uri, diagnostics in collection.items():
                click.echo(f"\n{uri}")
                for diagnostic in diagnostics:
                    symbol = SEVERITY_SYMBOLS.get(diagnostic.severity, "•")
                    line = to_external(diagnostic.range.start.line)
                    click.echo(f"  {symbol} {line}:{diagnostic.range.start.character + 1} "
                               f"[{diagnostic.code}] {diagnostic.message}")

            click.echo("\n✓ Check complete!")
            click.echo(f"  Files scanned: {scan_result.files_scanned}")
            click.echo(f"  Objects checked: {scan_result.objects_found}")
            click.echo(f"  Diagnostics: {scan_result.diagnostics_found}")

            if scan_result.errors:
                click.echo(f"\n⚠ Scan errors: {len(scan_result.errors)}")
                for error in scan_result.errors[:5]:
                    click.echo(f"  - {error}")

        has_errors = any(
            diagnostic.severity == Severity.ERROR
            for _, diagnostics in collection.items()
            for diagnostic in diagnostics
        )
        if has_errors:
            sys.exit(1)

    except Exception as e:
        click.echo(f"❌ Error: {e}", err=True)
        traceback.print_exc()
        sys.exit(1)


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
@click.option('--procedure', 'procedure_name', help='Procedure to document (object summary if omitted)')
@click.option('--plain', is_flag=True, help='Replace snippet placeholders by their default text')
def generate(file, procedure_name, plain):
    """Generate XML documentation for an AL object or procedure."""
    extractor = SourceExtractor()
    source_object = extractor.extract_object(FileDocument(file))
    if source_object is None:
        click.echo(f"❌ No AL object found in {file}", err=True)
        sys.exit(1)

    if procedure_name:
        procedure = source_object.get_procedure(procedure_name)
        if procedure is None:
            click.echo(f"❌ Procedure '{procedure_name}' not found in {source_object.name}", err=True)
            sys.exit(1)
        doc_string = generate_full_procedure_doc(procedure)
    else:
        doc_string = generate_object_doc(source_object, 1)

    click.echo(resolve_placeholders(doc_string) if plain else doc_string)


@cli.command()
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
def cleanup(yes):
    """Remove configuration directory (.al-xml-doc)."""
    try:
        config_manager = ConfigManager()

        if yes or click.confirm("⚠️  This will delete the entire .al-xml-doc directory. Continue?"):
            if config_manager.cleanup():
                click.echo("✓ Cleanup complete")
            else:
                click.echo("✗ Cleanup failed - configuration directory not found")
                click.echo(f"  Directory: {config_manager.config_dir}")
                sys.exit(1)

    except Exception as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == '__main__':
    main()
