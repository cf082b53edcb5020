"""Command line front end for the Procreate reader."""
