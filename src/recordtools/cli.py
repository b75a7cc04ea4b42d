from __future__ import annotations

import json
from pathlib import Path
from typing import Iterator, List, Optional

import typer

from recordtools.connect.envelope import record_from_json, record_to_json, value_to_json
from recordtools.connect.record import ConnectRecord
from recordtools.errors import ConfigurationError, DataError, ExtractionError
from recordtools.mapping.extract import PathExtractor
from recordtools.mapping.parse import parse_mappings
from recordtools.pipeline import TransformChain, load_pipeline_config
from recordtools.transforms.registry import resolve_transform

app = typer.Typer(help="record-tools CLI")


def _fail(msg: str) -> None:
    typer.secho(msg, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _read_records(path: Path, default_topic: str) -> Iterator[ConnectRecord]:
    with path.open("rb") as f:
        for lineno, raw in enumerate(f, start=1):
            try:
                line = raw.decode("utf-8").strip()
            except UnicodeDecodeError as e:
                raise DataError(f"{path}:{lineno}: invalid UTF-8") from e
            if not line:
                continue
            try:
                doc = json.loads(line)
            except json.JSONDecodeError as e:
                raise DataError(f"{path}:{lineno}: invalid JSON") from e
            try:
                yield record_from_json(doc, default_topic=default_topic)
            except DataError as e:
                raise DataError(f"{path}:{lineno}: {e}") from e


# -----------------------------
# apply
# -----------------------------
@app.command("apply")
def apply_cmd(
    config: Path = typer.Option(..., "--config", "-c", help="Pipeline YAML"),
    input: Path = typer.Option(..., "--input", "-i", help="Input JSONL record envelopes"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output JSONL (default: stdout)"),
    topic: str = typer.Option("records", "--topic", help="Topic for envelopes without one"),
):
    """Run every record in INPUT through the transforms in CONFIG."""
    input = input.expanduser().resolve()
    if not input.is_file():
        _fail(f"Input not found: {input}")

    try:
        chain = TransformChain.from_config(load_pipeline_config(config))
    except (ConfigurationError, FileNotFoundError) as e:
        _fail(f"Invalid configuration: {e}")

    lines: List[str] = []
    try:
        for record in chain.run(_read_records(input, topic)):
            lines.append(json.dumps(record_to_json(record), ensure_ascii=False))
    except (DataError, ExtractionError) as e:
        _fail(f"Record failed: {e}")
    finally:
        chain.close()

    text = "\n".join(lines) + ("\n" if lines else "")
    if output is None:
        typer.echo(text, nl=False)
    else:
        output = output.expanduser().resolve()
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        typer.secho(f"Wrote {output}", fg=typer.colors.GREEN, err=True)

    s = chain.summary()
    typer.secho(f"Done. {s['processed']} record(s) written, {s['skipped']} skipped", err=True)


# -----------------------------
# describe
# -----------------------------
@app.command("describe")
def describe_cmd(transform: str = typer.Argument(..., help="Transform alias or class name")):
    """List the configuration options of a transform."""
    try:
        cls = resolve_transform(transform)
    except ConfigurationError as e:
        _fail(str(e))

    typer.secho(f"{cls.__module__}.{cls.__name__}", bold=True)
    for key in cls.CONFIG_DEF.keys():
        default = "required" if key.required else f"default={key.default!r}"
        typer.echo(f"  {key.name} ({key.type.value}, {key.importance.value}, {default})")
        if key.doc:
            typer.echo(f"      {key.doc}")


# -----------------------------
# extract
# -----------------------------
@app.command("extract")
def extract_cmd(
    mapping: List[str] = typer.Option(..., "--mapping", "-m", help="name:path (repeatable)"),
    input: Path = typer.Option(..., "--input", "-i", help="JSON document to evaluate against"),
):
    """Evaluate name:path mappings against one JSON document and print the results."""
    try:
        field_mapping = parse_mappings(mapping, "mapping")
    except ConfigurationError as e:
        _fail(str(e))

    try:
        value = json.loads(input.expanduser().read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        _fail(f"Cannot read {input}: {e}")

    extractor = PathExtractor(field_mapping, "mapping")
    try:
        result = extractor.extract_values(value)
    except ExtractionError as e:
        _fail(str(e))
    typer.echo(json.dumps(value_to_json(result), indent=2, ensure_ascii=False))


def main():
    app()


if __name__ == "__main__":
    main()
