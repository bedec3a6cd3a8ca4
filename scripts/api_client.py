"""Lightweight REST client for the boxscore API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def build_adjustments(raw: str) -> dict | None:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid adjustments JSON: {exc}") from exc


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the boxscore REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("pdf", type=Path, nargs="?", help="Box-score PDF")
    parser.add_argument("--user", default="api-client", help="Identity sent in X-User-Id")
    parser.add_argument("--preview-only", action="store_true", help="Fetch preview findings without saving")
    parser.add_argument("--confirm", action="store_true", help="Preview, then confirm the returned token")
    parser.add_argument("--adjustments", default="", help="JSON adjustments applied on confirm")
    parser.add_argument("--status", metavar="UPLOAD_ID", help="Fetch the status of an upload and exit")
    args = parser.parse_args()

    headers = {"X-User-Id": args.user}
    with httpx.Client(base_url=args.base_url, headers=headers) as client:
        if args.status:
            resp = client.get(f"/pdf/status/{args.status}")
            if resp.status_code == 404:
                raise SystemExit(f"upload {args.status} not found")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2, ensure_ascii=False))
            return

        if args.pdf is None:
            raise SystemExit("a PDF file is required unless using --status")

        files = {"pdf": (args.pdf.name, args.pdf.read_bytes(), "application/pdf")}

        if not (args.preview_only or args.confirm):
            resp = client.post("/pdf/upload", files=files)
            if resp.status_code == 409:
                raise SystemExit(f"duplicate match: {resp.json()['detail']}")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2, ensure_ascii=False))
            return

        resp = client.post("/pdf/preview", files=files)
        if resp.status_code == 409:
            raise SystemExit(f"duplicate match: {resp.json()['detail']}")
        resp.raise_for_status()
        preview = resp.json()
        print("Match details:", json.dumps(preview["match_details"], indent=2, ensure_ascii=False))
        print("Potential issues:", json.dumps(preview["potential_issues"], indent=2, ensure_ascii=False))

        if args.preview_only:
            return

        body = {
            "upload_token": preview["upload_token"],
            "adjustments": build_adjustments(args.adjustments),
        }
        resp = client.post("/pdf/confirm", json=body)
        resp.raise_for_status()
        print(json.dumps(resp.json(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
