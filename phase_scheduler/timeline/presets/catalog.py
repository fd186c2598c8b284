"""Preset catalog loader.

Loads per-course project templates (title, description, ordered phase
labels) from YAML. The scheduler treats a template's phases as an opaque
ordered list of labels.
"""

from pathlib import Path

import yaml
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from phase_scheduler.timeline.errors import PresetNotFoundError

# Bundled catalog, used when no path is configured
DEFAULT_CATALOG_PATH = Path(__file__).parent / "catalog.yaml"


class PresetTemplate(BaseModel):
    """Project template offered for a course.

    Attributes:
        title: Project title
        description: Project description
        phases: Ordered phase labels
    """

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1)
    description: str = ""
    phases: list[str] = Field(..., min_length=1)


PresetCatalog = dict[str, list[PresetTemplate]]


def load_preset_catalog(path: Path | str | None = None) -> PresetCatalog:
    """Load the preset catalog from a YAML file.

    Args:
        path: Catalog file (defaults to the bundled catalog)

    Returns:
        Mapping of course code to templates

    Raises:
        FileNotFoundError: If the catalog file does not exist
        ValueError: If the file is not a course-code -> template-list mapping
        pydantic.ValidationError: If a template is malformed
    """
    catalog_path = Path(path) if path is not None else DEFAULT_CATALOG_PATH
    if not catalog_path.exists():
        raise FileNotFoundError(f"Preset catalog not found: {catalog_path}")

    with catalog_path.open(encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Preset catalog must map course codes to template lists: {catalog_path}")

    catalog: PresetCatalog = {}
    for course_code, templates in raw.items():
        if not isinstance(templates, list):
            raise ValueError(f"Templates for course {course_code} must be a list")
        catalog[str(course_code)] = [PresetTemplate.model_validate(t) for t in templates]

    logger.debug(
        "Preset catalog loaded",
        path=str(catalog_path),
        courses=len(catalog),
    )
    return catalog


def get_course_presets(course_code: str, catalog: PresetCatalog | None = None) -> list[PresetTemplate]:
    """Templates offered for a course (empty when the course has none)."""
    if catalog is None:
        catalog = load_preset_catalog()
    return list(catalog.get(course_code, []))


def find_preset(course_code: str, title: str, catalog: PresetCatalog | None = None) -> PresetTemplate:
    """Look up one template by course code and title (case-insensitive).

    Raises:
        PresetNotFoundError: If the course or title is unknown
    """
    presets = get_course_presets(course_code, catalog)
    if not presets:
        raise PresetNotFoundError(f"No presets for course {course_code}")
    wanted = title.strip().lower()
    for preset in presets:
        if preset.title.lower() == wanted:
            return preset
    available = ", ".join(p.title for p in presets)
    raise PresetNotFoundError(f"Preset '{title}' not found for course {course_code}. Available: {available}")
