"""Template selection.

Walks the registry tree one level at a time, asking the user to pick a
child at each ``Branch`` until a ``Leaf`` is reached.  The depth is whatever
the registry's shape is along the chosen path.
"""

from __future__ import annotations

from project_init.prompts import InterruptiblePrompt
from project_init.registry import Leaf, Node

ROOT_MESSAGE = "Which type of project do you want to create?"
CUSTOM_URL_CHOICE = "Custom GitHub URL"
GITHUB_URL_PREFIX = "https://github.com/"


def level_message(label: str | None) -> str:
    """Prompt text for a level of the tree; ``None`` means the root."""
    if label is None:
        return ROOT_MESSAGE
    return f"Choose a {label} template:"


def _github_url_error(url: str) -> str | None:
    if url.startswith(GITHUB_URL_PREFIX) and len(url) > len(GITHUB_URL_PREFIX):
        return None
    return f"Must be a valid GitHub URL (starting with {GITHUB_URL_PREFIX})"


def select_template(
    node: Node,
    prompt: InterruptiblePrompt,
    label: str | None = None,
    custom_choice: str | None = None,
) -> str:
    """Resolve *node* to a single template source locator.

    Args:
        node: The registry tree (or any subtree of it).
        prompt: Prompt wrapper used for every question.
        label: Display label of *node*; ``None`` for the registry root.
        custom_choice: When set, offered as an extra option at the first
            level.  Picking it asks for a GitHub URL instead of descending.

    Returns:
        The locator of the chosen leaf, or the URL typed for the custom
        choice.
    """
    offer_custom = custom_choice is not None
    while not isinstance(node, Leaf):
        choices = node.labels()
        if offer_custom and custom_choice not in node.children:
            choices.append(custom_choice)
        offer_custom = False

        choice = prompt.select(level_message(label), choices)
        if choice == custom_choice and choice not in node.children:
            return prompt.text("Enter the GitHub repo URL:", validate=_github_url_error)

        node = node.children[choice]
        label = choice
    return node.locator

