"""
docgraph - entry point.

Usage:
    python main.py validate content/            # Validate a content tree
    python main.py topics content/              # Topic/depth coverage
    python main.py paths content/ learning-paths/
"""

from docgraph.cli.main import app


def main():
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    main()
