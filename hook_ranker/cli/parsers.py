from __future__ import annotations

import argparse


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}") from None
    if n < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Preference-learned hook ranking (Ollama embeddings)")
    ap.add_argument("--store", default=None, help="Preference file; defaults to $HOOK_RANKER_STORE_PATH")
    ap.add_argument("--key", default=None, help="Profile key inside the preference file; defaults to $HOOK_RANKER_STORE_KEY")
    sub = ap.add_subparsers(dest="cmd", required=True)

    # Judgments
    add_judgment_subparser(sub, "like")
    add_judgment_subparser(sub, "dislike")
    fg = sub.add_parser("forget")
    fg.add_argument("--text", required=True, help="Exact hook text to remove")
    sub.add_parser("reset")

    # Ranking
    rk = sub.add_parser("rank")
    rk.add_argument("--candidate", action="append", default=[], help="Candidate hook; can repeat")
    rk.add_argument("--file", help="Path to a file; each non-empty line becomes a candidate")

    # Inspection
    cx = sub.add_parser("context")
    cx.add_argument("--limit", type=int, default=3)
    sub.add_parser("records")

    # Full generate -> rank -> finalize cycle
    sl = sub.add_parser("select")
    sl.add_argument("--context", default="", help="Free-text product/character analysis")
    sl.add_argument("--context-json", default=None, help="JSON object with the analysis payload")
    sl.add_argument("--niche", default="lifestyle")
    sl.add_argument("--tone", default="energetic")
    sl.add_argument("--directive", default=None, help="Optional user direction for hook generation")
    sl.add_argument("--batch-size", type=positive_int, default=None, help="Defaults to $HOOK_RANKER_BATCH_SIZE or 5")

    return ap


def add_judgment_subparser(sub, name):
    """
    Adds a like or dislike subparser to the CLI argument parser.

    Args:
        sub: The subparsers object from argparse.
        name: The name of the subcommand to add.

    Returns:
        argparse.ArgumentParser: The configured subparser.
    """
    result = sub.add_parser(name)
    result.add_argument("--text", required=True, help="Exact hook text being judged")
    return result
