"""CLI tools for yodo.

- ``python -m yodo.cli.preview`` -- fetch, caption and theme one batch
  and print it (text or ``--json``).
"""
