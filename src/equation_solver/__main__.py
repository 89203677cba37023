"""Run the equation solver CLI.

Usage:
    python -m equation_solver solve "x^2 + 1" --set x=3
    python -m equation_solver vars "sin(x) / y"
"""

from equation_solver.cli import cli


if __name__ == "__main__":
    cli()
