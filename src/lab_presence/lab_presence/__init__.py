"""Lab Presence package.

Tracks who is inside a controlled space by toggling Inside/Outside on each
scan of an identifier, organized by feature modules (roster, presence) with
a thin Flask controller layer over service/repository layers.
"""
