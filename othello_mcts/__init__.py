"""Othello rules engine and Monte Carlo Tree Search planner."""

__version__ = "0.1.0"
