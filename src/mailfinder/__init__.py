"""MailFinder - prefix search over a corpus of email messages."""

__version__ = "0.1.0"
