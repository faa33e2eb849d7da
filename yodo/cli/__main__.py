"""Allow ``python -m yodo.cli`` execution (runs the preview tool)."""

from yodo.cli.preview import main

main()
