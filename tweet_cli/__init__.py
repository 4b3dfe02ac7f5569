"""tweet-cli: post tweets and threads to Twitter."""

__version__ = "0.1.0"
