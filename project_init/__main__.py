"""Allow ``python -m project_init``."""

from project_init.initializer import main

main()
