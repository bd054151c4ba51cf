"""project-init scaffolder -- from a chosen template to a named project folder.

Quick usage::

    from project_init.scaffolder import (
        TemplateFetcher,
        patch_manifests,
        resolve_target_directory,
        select_template,
    )

    locator = select_template(registry, prompt)
    target = resolve_target_directory(prompt)
    await TemplateFetcher().fetch(locator, target.path)
    await patch_manifests(target.path, target.name)
"""

from project_init.scaffolder.fetcher import TemplateFetcher, TemplateSource, parse_locator
from project_init.scaffolder.git import init_git_repository
from project_init.scaffolder.manifest import ManifestPatch, PatchStatus, patch_manifests
from project_init.scaffolder.naming import NameProblem, validate_project_name
from project_init.scaffolder.resolver import TargetDirectory, resolve_target_directory
from project_init.scaffolder.selector import CUSTOM_URL_CHOICE, select_template

__all__ = [
    "CUSTOM_URL_CHOICE",
    "ManifestPatch",
    "NameProblem",
    "PatchStatus",
    "TargetDirectory",
    "TemplateFetcher",
    "TemplateSource",
    "init_git_repository",
    "parse_locator",
    "patch_manifests",
    "resolve_target_directory",
    "select_template",
    "validate_project_name",
]
