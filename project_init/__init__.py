"""project-init -- scaffold a new project from a remote template registry.

Fetches a registry of templates, lets the user pick one interactively,
downloads it into a new folder and renames the package inside it.
"""

__version__ = "0.1.0"
