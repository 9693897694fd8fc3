"""Allow running procinspect with ``python -m procinspect``."""

from procinspect.cli import run

if __name__ == "__main__":
    run()
