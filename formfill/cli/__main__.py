from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from formfill.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from formfill.logging.init import log_summary, set_level, setup_logging
from formfill.mapping.matcher import auto_map
from formfill.mapping.resolve import apply_overrides, parse_override, resolve_mapping
from formfill.mapping.store import JsonFileMappingStore, MappingStoreError
from formfill.mapping.templates import (
    MappingImportError,
    default_data_source,
    export_mapping,
    get_mapping_for_template,
    import_mapping,
    remember_data_source,
    save_mapping_template,
)
from formfill.models.record_set import RecordSet
from formfill.pdf.fields import TemplateReadError, extract_template_fields, mappable_fields
from formfill.services.orchestrator import run_batch
from formfill.services.summary import render_summary_line
from formfill.tabular.normalize import NoHeadersError, record_set_to_matrix
from formfill.tabular.parser import render_delimited
from formfill.tabular.reader import UnsupportedFormatError, WorkbookReadError, load_record_set

"""CLI entrypoint.

Flow:
- Load config (``config/formfill.yml`` unless ``--config`` is given)
- Resolve the data source (``--data`` > config ``data_file`` > remembered default)
- Normalize it into a RecordSet
- Read template fields, combine the stored mapping, ``--set`` overrides and
  auto-mapping, save the mapping template
- Plan one fill per record, write the validation log, print SUMMARY

Exit codes: 0 success, 1 fatal error, 2 finished with validation warnings.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_WARNINGS = 2

INSPECT_ROWS = 3


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Spreadsheet -> fillable form field mapper")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    p.add_argument("--data", help="Tabular data source (.csv, .xlsx, .xls)")
    p.add_argument("--template", help="Fillable PDF template")
    p.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="FIELD=COLUMN",
        help="Map FIELD to COLUMN (empty COLUMN skips the field); repeatable",
    )
    p.add_argument("--inspect-data", action="store_true", help="Print columns & first rows then exit")
    p.add_argument("--convert", type=Path, metavar="OUT", help="Write the normalized records as CSV then exit")
    p.add_argument("--export-mapping", type=Path, metavar="OUT", help="Export the saved mapping for the template")
    p.add_argument("--import-mapping", type=Path, metavar="IN", help="Import a mapping template from JSON")
    p.add_argument("--output", type=Path, metavar="PLAN", help="Write fill plans as JSON")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _inspect_data(record_set: RecordSet) -> int:
    layout = "transposed" if record_set.transposed else "standard"
    print(f"layout={layout} records={len(record_set)} termed={record_set.termed_count}")
    print(f"columns={record_set.columns}")
    for record in record_set.records[:INSPECT_ROWS]:
        print("  row=", json.dumps(record, ensure_ascii=False))
    return EXIT_SUCCESS


def _write_plans(path: Path, template_name: str, result) -> None:
    payload = {
        "template": template_name,
        "plans": [plan.to_dict() for plan in result.plans or []],
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an empty list must not fall back to sys.argv (pytest args)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.debug:
        set_level("DEBUG")
        logger.debug("debug mode enabled")

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    store = JsonFileMappingStore(Path(cfg.store_path))
    template_path = Path(args.template or cfg.template_file)
    template_name = template_path.name

    try:
        if args.import_mapping is not None:
            try:
                text = args.import_mapping.read_text(encoding="utf-8")
            except OSError as e:
                logger.error(f"import: {e}")
                return EXIT_FATAL
            try:
                imported = import_mapping(store, text)
            except MappingImportError as e:
                logger.error(f"import: {e}")
                return EXIT_FATAL
            logger.info(
                f"imported mapping template {imported.template_name!r} "
                f"({len(imported.mappings)} fields)"
            )
            return EXIT_SUCCESS

        if args.export_mapping is not None:
            exported = export_mapping(store, template_name)
            if exported is None:
                logger.error(f"export: no saved mapping for template {template_name!r}")
                return EXIT_FATAL
            args.export_mapping.parent.mkdir(parents=True, exist_ok=True)
            args.export_mapping.write_text(exported, encoding="utf-8")
            logger.info(f"exported mapping template {template_name!r} to {args.export_mapping}")
            return EXIT_SUCCESS

        data_file = args.data or cfg.data_file or default_data_source(store)
        if not data_file:
            logger.error("no data source: pass --data or set data_file in config")
            return EXIT_FATAL

        try:
            record_set = load_record_set(Path(data_file))
        except (FileNotFoundError, UnsupportedFormatError, WorkbookReadError, NoHeadersError) as e:
            logger.error(f"data: {e}")
            return EXIT_FATAL
        remember_data_source(store, str(data_file))

        if args.inspect_data:
            return _inspect_data(record_set)

        if args.convert is not None:
            args.convert.parent.mkdir(parents=True, exist_ok=True)
            args.convert.write_text(
                render_delimited(record_set_to_matrix(record_set)), encoding="utf-8"
            )
            logger.info(f"wrote {len(record_set)} records to {args.convert}")
            return EXIT_SUCCESS

        try:
            fields = extract_template_fields(template_path)
        except TemplateReadError as e:
            logger.error(f"template: {e}")
            return EXIT_FATAL

        overrides: dict[str, str] = {}
        for text in args.overrides:
            try:
                field, column = parse_override(text)
            except ValueError as e:
                logger.error(f"override: {e}")
                return EXIT_FATAL
            if column and column not in record_set.columns:
                logger.warning(f"override {field!r}: unknown column {column!r}, field left unmapped")
            overrides[field] = column

        # Saved entries (skips and columns absent from this source included) are
        # persisted as-is; auto-map only proposes for fields with no entry
        stored = get_mapping_for_template(store, template_name) or {}
        unsaved = [f for f in mappable_fields(fields) if f.name not in stored]
        saved_mapping = apply_overrides(
            {**auto_map(unsaved, record_set.columns), **stored}, overrides
        )
        save_mapping_template(store, template_name, [f.name for f in fields], saved_mapping)
        mapping = resolve_mapping(saved_mapping, record_set.columns)
        for field, column in saved_mapping.items():
            if column and not mapping[field] and field not in overrides:
                logger.warning(f"saved mapping {field!r}: column {column!r} not in data, field skipped")

        result = run_batch(
            template_name,
            fields,
            record_set,
            mapping,
            log_dir=Path(cfg.log_dir),
            history_limit=cfg.history_limit,
        )
    except MappingStoreError as e:
        logger.error(f"store: {e}")
        return EXIT_FATAL

    if args.output is not None:
        _write_plans(args.output, template_name, result)
        logger.info(f"wrote fill plans to {args.output}")

    # log_summary adds the "SUMMARY " label itself
    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if result.warnings > 0:
        return EXIT_WARNINGS
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
