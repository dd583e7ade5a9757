"""Pacman mirror list generator that ranks Arch Linux mirrors by latency."""
