"""Tracked-run lifecycle, tracking facades and project launchers."""
