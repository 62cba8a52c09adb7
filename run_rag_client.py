#!/usr/bin/env python3
"""
Script to talk to a running document retrieval API.
"""
import requests
import json
import argparse
from pathlib import Path

DEFAULT_URL = "http://localhost:8000"


def build_payload(args):
    """
    Build the /rag action body for the parsed command line.

    Args:
        args: Namespace produced by build_parser()
    """
    if args.command == "upload":
        path = Path(args.file)
        document = {
            "filename": path.name,
            "text": path.read_text(encoding="utf-8"),
            "size": path.stat().st_size,
            "metadata": {},
        }
        if args.category:
            document["metadata"]["category"] = args.category
        if args.tags:
            document["metadata"]["tags"] = [tag.strip() for tag in args.tags.split(",") if tag.strip()]
        return {"action": "upload", "document": document}
    if args.command == "search":
        options = {"limit": args.limit}
        if args.threshold is not None:
            options["threshold"] = args.threshold
        if args.document_ids:
            options["documentIds"] = args.document_ids
        return {"action": "search", "query": args.query, "options": options}
    if args.command == "delete":
        return {"action": "delete", "documentId": args.document_id}
    return {"action": args.command}


def run_action(payload, api_url=DEFAULT_URL, user_id="local-user"):
    """
    Send one action to the API and print the JSON answer.

    Returns:
        The HTTP status code of the response
    """
    response = requests.post(
        f"{api_url}/rag",
        json=payload,
        headers={"X-User-ID": user_id},
        timeout=60,
    )
    try:
        body = response.json()
    except ValueError:
        body = {"raw": response.text}

    if not response.ok:
        print(f"Error: {response.status_code}")
    print(json.dumps(body, indent=2))
    return response.status_code


def build_parser():
    parser = argparse.ArgumentParser(description="Run document retrieval actions against the API")
    parser.add_argument("--url", default=DEFAULT_URL, help="Base URL of the API")
    parser.add_argument("--user", default="local-user", help="Owner id sent as X-User-ID")
    subparsers = parser.add_subparsers(dest="command", required=True)

    upload = subparsers.add_parser("upload", help="Upload a UTF-8 text file")
    upload.add_argument("file", help="Path to the text file")
    upload.add_argument("--category", default=None)
    upload.add_argument("--tags", default=None, help="Comma separated tags")

    search = subparsers.add_parser("search", help="Search uploaded documents")
    search.add_argument("query")
    search.add_argument("--limit", type=int, default=10)
    search.add_argument("--threshold", type=float, default=None)
    search.add_argument("--document-ids", nargs="*", default=None)

    delete = subparsers.add_parser("delete", help="Delete a document")
    delete.add_argument("document_id")

    subparsers.add_parser("list", help="List documents")
    subparsers.add_parser("stats", help="Show document statistics")
    return parser


if __name__ == "__main__":
    args = build_parser().parse_args()
    status_code = run_action(build_payload(args), args.url, args.user)
    raise SystemExit(0 if status_code < 400 else 1)
