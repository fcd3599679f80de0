"""
Speedlingo

Forks a GitHub repository, runs the lingo review/rewrite tool against a
fresh clone of the fork and, in rewrite mode, pushes the result to a
dedicated branch.
"""

__version__ = "0.1.0"
__author__ = "Speedlingo Team"
__description__ = "Fork, lint and rewrite GitHub repositories with lingo"
