"""Fresh-project scaffolding from the base Hardhat template.

Quick usage::

    from example_factory.scaffolder import TemplateComposer, ProjectMetadata

    composer = TemplateComposer(config)
    project_path = await composer.compose(
        config.resolved_template_dir,
        asset_set,
        ProjectMetadata(name="fhevm-example-fhe-counter"),
        "./fhe-counter",
    )
"""

from .composer import (
    ProjectMetadata,
    TemplateComposer,
    create_category_project,
    create_example_project,
)
from .templates import TemplateRenderer

__all__ = [
    "ProjectMetadata",
    "TemplateComposer",
    "TemplateRenderer",
    "create_category_project",
    "create_example_project",
]
