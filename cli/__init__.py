"""Command-line front end for the fitcoach client."""
