"""``python -m perch`` — same as the ``perch`` console script."""

from perch.cli import main

main()
