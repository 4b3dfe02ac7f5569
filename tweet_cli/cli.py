#!/usr/bin/env python3
"""tweet-cli - post tweets and threads to Twitter.

Usage:
  tweet post "Hello world!"                     # Post (threads automatically if too long)
  tweet reply 1234567890 "Thanks!"              # Reply to a tweet
  tweet split "some long text..."               # Show how text would be split
  tweet webhook register                        # Register the Account Activity webhook
  tweet webhook crc <token>                     # Compute a CRC response token
  tweet config                                  # Show configuration
"""

import argparse
import logging
import sys

from . import __version__


def _setup_logging(verbose: bool) -> None:
    from .config import get

    level = logging.DEBUG if verbose else getattr(logging, str(get("logging.level", "INFO")).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="tweet",
        description="Post tweets and threads to Twitter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES:
  tweet post "Hello, Twitter!"
  tweet post --dry-run "$(cat long-announcement.txt)"
  tweet reply 1234567890 "Good point" --user someone
  tweet split --json "some long text..."
  tweet webhook register --origin https://bot.example.com

Run 'tweet <command> --help' for detailed command help.
"""
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # post
    post_parser = subparsers.add_parser(
        "post", help="Post a tweet (or a thread when it is too long)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES:
  tweet post "Hello, Twitter!"
  tweet post --dry-run "Test message"
  tweet post --on-failure abort "a very long text..."
"""
    )
    post_parser.add_argument("text", nargs="?", help="Tweet text (split into a thread if needed)")
    post_parser.add_argument("--dry-run", action="store_true", help="Print segments without posting")
    post_parser.add_argument(
        "--on-failure", choices=["continue", "abort"], default=None,
        help="What to do when a post fails mid-thread (default: from config thread.on_failure)",
    )

    # reply
    reply_parser = subparsers.add_parser(
        "reply", help="Reply to a tweet",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLE:
  tweet reply 1234567890 "Great point!"
"""
    )
    reply_parser.add_argument("tweet_id", help="Id of the tweet to reply to")
    reply_parser.add_argument("text", nargs="?", help="Reply text (split into a thread if needed)")
    reply_parser.add_argument("--user", default=None, help="Who we are replying to (for logs)")
    reply_parser.add_argument("--dry-run", action="store_true", help="Print segments without posting")
    reply_parser.add_argument("--on-failure", choices=["continue", "abort"], default=None,
                              help="What to do when a post fails mid-thread")

    # split
    split_parser = subparsers.add_parser("split", help="Show how text would be split into tweets")
    split_parser.add_argument("text", nargs="?", help="Text to split")
    split_parser.add_argument("--json", action="store_true", help="Output JSON")

    # webhook
    webhook_parser = subparsers.add_parser(
        "webhook", help="Account Activity webhook",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES:
  tweet webhook register                              # Uses webhook.origin from config
  tweet webhook register --origin https://bot.example.com
  tweet webhook crc abc123                            # Prints {"response_token": "sha256=..."}
  tweet webhook show                                  # Show stored registration
"""
    )
    webhook_sub = webhook_parser.add_subparsers(dest="webhook_command", required=True)
    register_parser = webhook_sub.add_parser("register", help="Register webhook URL with Twitter")
    register_parser.add_argument("--origin", default=None, help="Public origin of the webhook (default: from config)")
    crc_parser = webhook_sub.add_parser("crc", help="Compute CRC challenge response")
    crc_parser.add_argument("token", help="crc_token sent by Twitter")
    webhook_sub.add_parser("show", help="Show stored webhook registration")

    # config
    config_parser = subparsers.add_parser(
        "config", help="Manage configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES:
  tweet config                    # Show current config
  tweet config --init             # Create config file with defaults
  tweet config --path             # Show config file path

CONFIG LOCATION:
  ~/.config/tweet-cli/config.yaml
"""
    )
    config_parser.add_argument("--init", action="store_true", help="Create config file with example settings")
    config_parser.add_argument("--path", action="store_true", help="Show config file path")
    config_parser.add_argument("--force", action="store_true", help="Overwrite existing config (with --init)")

    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    # Import and run the appropriate command
    if args.command == "post":
        from .post import run
    elif args.command == "reply":
        from .post import run_reply as run
    elif args.command == "split":
        from .post import run_split as run
    elif args.command == "webhook":
        from .webhook import run
    elif args.command == "config":
        from .config import find_config_file, init_config, show_config
        if args.path:
            config_file = find_config_file()
            if config_file:
                print(config_file)
            else:
                print("(no config file - using defaults)")
            return 0
        elif args.init:
            try:
                path = init_config(force=args.force)
                print(f"✓ Created config file: {path}")
                print(f"  Edit it to customize settings.")
                return 0
            except FileExistsError as e:
                print(f"✗ {e}")
                print("  Use --force to overwrite.")
                return 1
        else:
            show_config()
            return 0
    else:
        parser.print_help()
        return 2

    return run(args)


if __name__ == "__main__":
    sys.exit(main())
