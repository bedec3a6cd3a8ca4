"""Command-line interface for parsing and ingesting box-score PDFs."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from boxscore.config_loader import Settings
from boxscore.ingest import MatchParseError, parse_match_document
from boxscore.persistence import BoxScoreStore, DuplicateUploadError
from boxscore.workflow import UploadProcessingError, ingest_document, preview_document


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Parse basketball box-score PDFs")
    parser.add_argument("pdf", type=Path, help="Path to the box-score PDF")
    parser.add_argument("--team", default=None, help="Registered team profile key (e.g., ETROS)")
    parser.add_argument("--team-profile", type=Path, default=None, help="Team profile JSON file")
    parser.add_argument("--db", type=Path, default=None, help="SQLite database used for --preview/--ingest")
    parser.add_argument("--output", type=Path, default=None, help="Write the parsed match JSON here")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--preview", action="store_true", help="Print review findings against the database")
    mode.add_argument("--ingest", action="store_true", help="Store the match in the database")
    parser.add_argument("--uploaded-by", default="cli", help="Identity recorded on the upload")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _resolve_settings(args: argparse.Namespace) -> Settings:
    overrides: dict[str, object] = {}
    if args.team_profile:
        overrides["team_profile"] = args.team_profile
    elif args.team:
        overrides.update(team_key=args.team, team_profile=None)
    if args.db:
        overrides["db_path"] = args.db
    return Settings.from_env(**overrides)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        settings = _resolve_settings(args)
    except (KeyError, ValueError) as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc
    data = args.pdf.read_bytes()

    if args.preview or args.ingest:
        store = BoxScoreStore(settings.db_path)
        try:
            if args.preview:
                preview = preview_document(store, data, file_name=args.pdf.name, settings=settings)
                issues = preview.issues
                print(f"{preview.document.home_team.name} {preview.document.home_team.score} - "
                      f"{preview.document.away_team.score} {preview.document.away_team.name}")
                for review in preview.players:
                    print(f"  {review.row.label}: {review.validation_status}")
                if issues.has_issues:
                    print("Potential issues:")
                    for label in issues.new_players:
                        print(f"  new player: {label}")
                    for mismatch in issues.number_mismatches:
                        print(f"  number mismatch: {mismatch['name']} stored #{mismatch['stored_number']}, "
                              f"parsed #{mismatch['parsed_number']}")
                    for message in issues.statistical_anomalies:
                        print(f"  {message}")
                    for message in (issues.score_mismatch, issues.totals_mismatch):
                        if message:
                            print(f"  {message}")
                print(f"Upload token: {preview.upload_token}")
                return
            result = ingest_document(
                store,
                data,
                file_name=args.pdf.name,
                uploaded_by=args.uploaded_by,
                settings=settings,
            )
        except MatchParseError as exc:
            raise SystemExit(f"Could not parse {args.pdf}: {exc}") from exc
        except DuplicateUploadError as exc:
            raise SystemExit(f"{exc} (upload {exc.existing_upload_id})") from exc
        except UploadProcessingError as exc:
            raise SystemExit(f"Upload {exc.upload_id} failed: {exc.message}") from exc
        print(f"{result.message}: upload {result.upload_id}, match {result.match_id}")
        print(json.dumps(result.player_management.as_dict(), indent=2, ensure_ascii=False))
        return

    try:
        document = parse_match_document(data, settings.team)
    except MatchParseError as exc:
        raise SystemExit(f"Could not parse {args.pdf}: {exc}") from exc
    payload = document.model_dump_json(indent=2)
    if args.output:
        args.output.write_text(payload, encoding="utf-8")
        print(f"Wrote parsed match to {args.output}")
    else:
        print(payload)


if __name__ == "__main__":
    main()
