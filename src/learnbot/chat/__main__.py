#!/usr/bin/env python3
"""Entry point for running chat interface as a module.

Usage:
    python -m learnbot.chat
    python -m learnbot.chat --data-dir ./data/my_bot --keyword
"""

import argparse


def main():
    parser = argparse.ArgumentParser(
        description="learnbot conversational chatbot interface",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Use default directory (./data/learnbot)
  python -m learnbot.chat

  # Use custom directory
  python -m learnbot.chat --data-dir ./data/my_bot

  # Keyword intent classifier instead of HDC prototypes
  python -m learnbot.chat --keyword
        """
    )

    parser.add_argument(
        "--data-dir",
        default=None,
        help="Directory for the statement store and intent model (default: ./data/learnbot)"
    )

    parser.add_argument(
        "--keyword",
        action="store_true",
        help="Use the keyword intent classifier"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args()

    overrides = {}
    if args.data_dir:
        overrides["data_dir"] = args.data_dir
    if args.keyword:
        overrides["classifier"] = "keyword"
    if args.debug:
        overrides["debug"] = True

    # Import here to avoid circular import warning
    from learnbot.chat.interface import ChatInterface
    from learnbot.config.settings import get_settings
    interface = ChatInterface(settings=get_settings(**overrides))
    interface.start()


if __name__ == "__main__":
    main()
