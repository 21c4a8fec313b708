"""
Command line interface for hivemall-spark.

Lists the Hivemall function catalog and renders the SQL that registers it in a
Spark session (e.g. for ``spark-sql -i``).
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click
import yaml

from .__version__ import __version__, check_compatibility, get_version_info
from .catalog import ddl_script
from .registry import FunctionType, groups, list_bindings
from .utils.config_parser import JAR_ENV
from .utils.logging_config import setup_logging

CONTEXT_SETTINGS = {
    'help_option_names': ['-h', '--help'],
    'max_content_width': 120,
}


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__, prog_name='hivemall-spark')
@click.option('--log-level',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              default='WARNING',
              help='Set logging level')
@click.option('--json-logs', is_flag=True, help='Emit logs as JSON lines')
@click.pass_context
def main(ctx, log_level, json_logs):
    """
    Hivemall functions for Spark DataFrames.

    Examples:
        hivemall-spark functions --group classifier
        hivemall-spark ddl --jar hivemall-with-dependencies.jar > define-udfs.sql
    """
    ctx.ensure_object(dict)
    ctx.obj['logger'] = setup_logging(level=log_level, json_format=json_logs)

    try:
        check_compatibility()
    except RuntimeError as e:
        click.echo(f"Compatibility error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.option('--format', 'output_format',
              type=click.Choice(['json', 'yaml', 'table']),
              default='table',
              help='Output format for version information')
def version(output_format):
    """Display version and build information."""
    version_info = get_version_info()

    if output_format == 'json':
        click.echo(json.dumps(version_info, indent=2))
    elif output_format == 'yaml':
        click.echo(yaml.dump(version_info, default_flow_style=False))
    else:
        click.echo("hivemall-spark")
        click.echo("=" * 50)
        click.echo(f"Version: {version_info['version']}")
        click.echo(f"Build: {version_info['build']}")
        click.echo(f"Hivemall: {version_info['hivemall_version']}")
        click.echo(f"Python: {version_info['system_info']['python_version']}")


@main.command()
@click.option('--group', type=click.Choice(groups()), help='Only list one function group')
@click.option('--type', 'function_type',
              type=click.Choice([t.value for t in FunctionType]),
              help='Only list one kind of function')
@click.option('--format', 'output_format',
              type=click.Choice(['table', 'json']),
              default='table')
def functions(group: Optional[str], function_type: Optional[str], output_format: str):
    """List the Hivemall functions and their implementing classes."""
    bindings = list_bindings(group=group, function_type=function_type)

    if output_format == 'json':
        click.echo(json.dumps([
            {
                'name': b.name,
                'sql_name': b.sql_name,
                'class_name': b.class_name,
                'type': b.function_type.value,
                'group': b.group,
                'output_columns': list(b.output_columns),
                'mixable': b.mixable,
            }
            for b in bindings
        ], indent=2))
        return

    width = max((len(b.name) for b in bindings), default=0)
    for b in bindings:
        line = f"{b.name:<{width}}  {b.function_type.value:<11}  {b.class_name}"
        if b.output_columns:
            line += f"  -> ({', '.join(b.output_columns)})"
        click.echo(line)
    click.echo(f"\n{len(bindings)} functions")


@main.command()
@click.option('--jar', 'jar_path', envvar=JAR_ENV, help='Hivemall jar to add before creating functions')
@click.option('--group', type=click.Choice(groups()), help='Only emit one function group')
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
              help='Write the script to a file instead of stdout')
@click.pass_context
def ddl(ctx, jar_path: Optional[str], group: Optional[str], output: Optional[Path]):
    """Print the SQL that registers the Hivemall functions."""
    script = ddl_script(jar_path=jar_path, group=group)

    if output is None:
        click.echo(script, nl=False)
        return

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(script)
    except OSError as e:
        ctx.obj['logger'].error(f"Failed to write {output}: {e}")
        click.echo(f"Error: cannot write {output}: {e}", err=True)
        sys.exit(1)
    click.echo(f"Wrote {output}")


if __name__ == '__main__':
    main()
