"""CLI entry point for the VDF KeyValues parser."""

from __future__ import annotations

import logging
import sys


def build_cli():
    import click

    @click.command()
    @click.argument("source", default="-")
    @click.option(
        "--config", "-c",
        default=None,
        help="Path to YAML config file",
    )
    @click.option(
        "--disable-escape",
        is_flag=True,
        default=None,
        help="Treat backslash as an ordinary character (overrides config/env)",
    )
    @click.option(
        "--escape-policy",
        type=click.Choice(["strict", "passthrough"]),
        default=None,
        help="Unknown escape sequences: fail (strict) or keep both characters (passthrough)",
    )
    @click.option(
        "--latest", "use_latest_value",
        is_flag=True,
        default=None,
        help="Duplicate keys: last occurrence wins (default: first occurrence wins)",
    )
    @click.option(
        "--allow-incomplete",
        is_flag=True,
        default=None,
        help="Do not fail on unclosed quotes/blocks at end of input",
    )
    @click.option(
        "--format", "-f", "output_format",
        type=click.Choice(["json", "pairs"]),
        default=None,
        help="Output: nested JSON object, or one JSON record per key path (overrides config/env)",
    )
    @click.option(
        "--indent",
        type=int,
        default=None,
        help="JSON indentation, 0 for compact output",
    )
    @click.option(
        "--encoding",
        default=None,
        help="Input encoding (default utf-8)",
    )
    @click.option(
        "--debug-buffer-size",
        type=int,
        default=None,
        help="Number of trailing characters shown in error messages",
    )
    @click.option(
        "--verbose", "-v",
        is_flag=True,
        default=None,
        help="Enable debug logging and tokenizer tracing (overrides config/env)",
    )
    def cli(
        source: str,
        config: str | None,
        disable_escape: bool | None,
        escape_policy: str | None,
        use_latest_value: bool | None,
        allow_incomplete: bool | None,
        output_format: str | None,
        indent: int | None,
        encoding: str | None,
        debug_buffer_size: int | None,
        verbose: bool | None,
    ) -> None:
        """Convert a Valve KeyValues (VDF) document to JSON.

        SOURCE is a file path, an http(s):// URL, or '-' for stdin.

        Configuration priority: YAML config < env vars (VDF_*) < CLI arguments.
        """
        from vdf_keyvalues.config import load_config
        from vdf_keyvalues.domain.exceptions import VdfException
        from vdf_keyvalues.domain.services import VdfParser
        from vdf_keyvalues.infrastructure.sources.readers import (
            iter_file_chunks,
            iter_stream_chunks,
            iter_url_chunks,
        )
        from vdf_keyvalues.presentation.formatter import OutputFormatter

        cli_overrides = {
            "tokenizer.disable_escape": disable_escape or None,
            "tokenizer.escape_policy": escape_policy,
            "tokenizer.require_complete": False if allow_incomplete else None,
            "aggregator.use_latest_value": use_latest_value or None,
            "diagnostics.verbose": verbose or None,
            "diagnostics.debug_buffer_size": debug_buffer_size,
            "source.encoding": encoding,
            "output.format": output_format,
            "output.indent": indent,
        }

        app_config = load_config(config_path=config, cli_overrides=cli_overrides)

        log_level = logging.DEBUG if app_config.diagnostics.verbose else logging.WARNING
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            stream=sys.stderr,
        )

        src = app_config.source
        if source == "-":
            stdin = click.get_binary_stream("stdin")
            chunks = iter_stream_chunks(stdin, src.chunk_size, src.encoding)
        elif source.startswith(("http://", "https://")):
            chunks = iter_url_chunks(source, src.chunk_size, src.encoding, src.timeout)
        else:
            chunks = iter_file_chunks(source, src.chunk_size, src.encoding)

        formatter = OutputFormatter()
        try:
            parser = VdfParser(app_config)
            if app_config.output.format == "pairs":
                for pair in parser.iter_pairs(chunks):
                    click.echo(formatter.format_pair(pair))
            else:
                result = parser.parse_chunks(chunks)
                click.echo(formatter.format_mapping(result, app_config.output.indent))
        except (VdfException, ValueError) as exc:
            click.echo(formatter.format_error(exc), err=True, nl=False)
            sys.exit(1)

    return cli


def main() -> None:
    try:
        cli = build_cli()
    except ImportError:
        print("Error: 'click' package is required. Install with: pip install click", file=sys.stderr)
        sys.exit(1)
    cli()


if __name__ == "__main__":
    main()
